"""API Pydantic models."""

from .responses import (
    CategoryPayload,
    CyclicYearResponse,
    DayResponse,
    ErrorCodes,
    ErrorResponse,
    EventPayload,
    EventResponse,
    HealthResponse,
    ImportResponse,
    MonthGridResponse,
    SettingsPayload,
    YearSummaryResponse,
)

__all__ = [
    "HealthResponse",
    "ErrorResponse",
    "ErrorCodes",
    "EventPayload",
    "EventResponse",
    "MonthGridResponse",
    "CyclicYearResponse",
    "DayResponse",
    "YearSummaryResponse",
    "SettingsPayload",
    "CategoryPayload",
    "ImportResponse",
]
