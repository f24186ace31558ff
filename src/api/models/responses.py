"""Pydantic request/response models for API endpoints."""

from datetime import date, datetime

from pydantic import BaseModel, Field

from models.calendar import CyclicQuarter, MonthGrid
from models.events import Event
from models.settings import CalendarSettings


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "healthy" or "unhealthy"
    version: str
    database_available: bool
    timestamp: str  # ISO 8601 UTC
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    UNAUTHORIZED = "UNAUTHORIZED"
    NOT_FOUND = "NOT_FOUND"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    IMPORT_FAILED = "IMPORT_FAILED"
    INTERNAL_ERROR = "INTERNAL_ERROR"


# =============================================================================
# EVENTS
# =============================================================================


class EventPayload(BaseModel):
    """Event body for create/update. The id is optional on create."""

    id: str | None = None
    title: str
    start_date: datetime
    end_date: datetime
    category_id: str
    notes: str = ""

    def to_event(self, event_id: str) -> Event:
        return Event(
            id=event_id,
            title=self.title,
            start_date=self.start_date,
            end_date=self.end_date,
            category_id=self.category_id,
            notes=self.notes,
        )


class EventResponse(BaseModel):
    id: str
    title: str
    start_date: datetime
    end_date: datetime
    category_id: str
    notes: str = ""

    @classmethod
    def from_event(cls, event: Event) -> "EventResponse":
        return cls(
            id=event.id,
            title=event.title,
            start_date=event.start_date,
            end_date=event.end_date,
            category_id=event.category_id,
            notes=event.notes,
        )


# =============================================================================
# CALENDAR
# =============================================================================


class MonthGridResponse(BaseModel):
    year: int
    month_index: int
    days_in_month: int
    start_padding: int
    days: list[date]
    burnout_days: list[date] = []

    @classmethod
    def from_grid(cls, grid: MonthGrid, burnout_days: list[date]) -> "MonthGridResponse":
        return cls(
            year=grid.year,
            month_index=grid.month_index,
            days_in_month=grid.days_in_month,
            start_padding=grid.start_padding,
            days=list(grid.days),
            burnout_days=burnout_days,
        )


class CyclicWeekResponse(BaseModel):
    week_number: int
    quarter_index: int
    type: str
    days: list[date]
    cycle_index: int
    week_in_cycle: int
    is_check_in: bool


class CyclicQuarterResponse(BaseModel):
    quarter_index: int
    weeks: list[CyclicWeekResponse]


class CyclicYearResponse(BaseModel):
    year: int
    week_count: int
    has_prep_week: bool
    quarters: list[CyclicQuarterResponse]

    @classmethod
    def from_quarters(cls, year: int, quarters: tuple[CyclicQuarter, ...]) -> "CyclicYearResponse":
        weeks = [week for quarter in quarters for week in quarter.weeks]
        return cls(
            year=year,
            week_count=len(weeks),
            has_prep_week=any(week.type == "prep" for week in weeks),
            quarters=[
                CyclicQuarterResponse(
                    quarter_index=quarter.quarter_index,
                    weeks=[
                        CyclicWeekResponse(
                            week_number=week.week_number,
                            quarter_index=week.quarter_index,
                            type=week.type,
                            days=list(week.days),
                            cycle_index=week.cycle_index,
                            week_in_cycle=week.week_in_cycle,
                            is_check_in=week.is_check_in,
                        )
                        for week in quarter.weeks
                    ],
                )
                for quarter in quarters
            ],
        )


class DayResponse(BaseModel):
    day: date
    burnout: bool
    events: list[EventResponse]


class YearSummaryResponse(BaseModel):
    year: int
    chain_ids: list[str]
    chain_count: int
    burnout_days: list[date]


# =============================================================================
# SETTINGS & CATEGORIES
# =============================================================================


class SettingsPayload(BaseModel):
    fade_past: bool = True
    show_burnout_warnings: bool = True
    active_category_ids: list[str] = []
    view_mode: str = Field(default="weekday", pattern="^(weekday|numeric)$")
    layout: str = Field(default="horizontal", pattern="^(horizontal|vertical|cyclic)$")
    is_bird_eye_view: bool = False
    language: str = Field(default="en", pattern="^(en|it)$")

    @classmethod
    def from_settings(cls, settings: CalendarSettings) -> "SettingsPayload":
        return cls(**settings.to_dict())

    def to_settings(self) -> CalendarSettings:
        return CalendarSettings.from_dict(self.model_dump())


class CategoryPayload(BaseModel):
    id: str = Field(min_length=1)
    label: str = Field(min_length=1)
    color: str = Field(pattern="^#[0-9a-fA-F]{6}$")


class ImportResponse(BaseModel):
    year: int
    imported: int
    rejected: dict[str, str] = {}
