"""
Per-day event aggregation: active events, burnout days and chains.
"""

from datetime import date, datetime
from typing import Iterable

from core.config import BURNOUT_THRESHOLD, CHAIN_MIN_DAYS
from core.dates import days_between, is_event_active_on_day
from models.events import Event


def events_active_on_day(day: date | datetime, events: Iterable[Event]) -> list[Event]:
    """Return the events covering the day, in input order."""
    return [event for event in events if is_event_active_on_day(day, event)]


def is_burnout_day(day: date | datetime, events: Iterable[Event]) -> bool:
    """True when BURNOUT_THRESHOLD or more events overlap on the day."""
    return len(events_active_on_day(day, events)) >= BURNOUT_THRESHOLD


def burnout_days(days: Iterable[date], events: list[Event]) -> list[date]:
    """Filter days down to the ones flagged as burnout, keeping order."""
    return [day for day in days if is_burnout_day(day, events)]


def event_duration_days(event: Event) -> int:
    """Inclusive span in days, at least 1 (used for bar widths)."""
    return max(1, days_between(event.end_date, event.start_date) + 1)


def detect_chains(events: Iterable[Event]) -> list[str]:
    """
    Return the ids of events lasting CHAIN_MIN_DAYS days or more.

    The span is inclusive and date-only: 2025-01-01 to 2025-01-14 is 14 days.
    """
    return [
        event.id
        for event in events
        if days_between(event.end_date, event.start_date) + 1 >= CHAIN_MIN_DAYS
    ]
