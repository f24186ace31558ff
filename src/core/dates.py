"""
Date-interval math and the Gregorian month grid builder.

Everything here works at day granularity: time-of-day is truncated away
before any comparison.
"""

import calendar
from datetime import MAXYEAR, MINYEAR, date, datetime, time

from models.calendar import MonthGrid
from models.events import Event


def as_date(value: date | datetime) -> date:
    """Drop the time-of-day component, if any."""
    if isinstance(value, datetime):
        return value.date()
    return value


def start_of_day(value: date | datetime) -> datetime:
    """Naive datetime at 00:00 of the given day."""
    return datetime.combine(as_date(value), time.min)


def end_of_day(value: date | datetime) -> datetime:
    """Naive datetime at the last microsecond of the given day."""
    return datetime.combine(as_date(value), time.max)


def weekday_index(value: date | datetime) -> int:
    """
    Return the 0-indexed day of the week with Monday=0 ... Sunday=6.
    """
    # date.weekday() already uses the Monday-first convention
    return as_date(value).weekday()


def days_between(later: date | datetime, earlier: date | datetime) -> int:
    """Whole-day difference between two days, ignoring time of day."""
    return (as_date(later) - as_date(earlier)).days


def is_event_active_on_day(day: date | datetime, event: Event) -> bool:
    """
    Check whether the event covers the given day.

    The interval is inclusive on both ends. An event whose end precedes its
    start is never active.
    """
    start = start_of_day(event.start_date)
    end = end_of_day(event.end_date)
    if end < start:
        return False
    return start <= start_of_day(day) <= end


def normalize_month(year: int, month_index: int) -> tuple[int, int]:
    """
    Carry an out-of-range month index into the year.

    Example: (2025, -1) -> (2024, 11), (2025, 12) -> (2026, 0)
    """
    return year + month_index // 12, month_index % 12


def get_month_days(year: int, month_index: int) -> MonthGrid:
    """
    Build the grid for a month (month_index is 0-based).

    start_padding is the number of blank cells needed so day 1 lands under
    its weekday column in a Monday-first week.

    Months rolling past year 1 or 9999 clamp to the first or last
    representable month.
    """
    year, month_index = normalize_month(year, month_index)
    if year < MINYEAR:
        year, month_index = MINYEAR, 0
    elif year > MAXYEAR:
        year, month_index = MAXYEAR, 11
    month = month_index + 1

    first_day = date(year, month, 1)
    days_in_month = calendar.monthrange(year, month)[1]

    return MonthGrid(
        year=year,
        month_index=month_index,
        days_in_month=days_in_month,
        start_padding=weekday_index(first_day),
        days=tuple(date(year, month, d) for d in range(1, days_in_month + 1)),
    )


def is_weekend(value: date | datetime) -> bool:
    return weekday_index(value) >= 5
