"""API route modules."""

from .calendar import router as calendar_router
from .events import router as events_router
from .health import router as health_router
from .preferences import router as preferences_router
from .transfers import router as transfers_router

__all__ = [
    "health_router",
    "events_router",
    "calendar_router",
    "preferences_router",
    "transfers_router",
]
