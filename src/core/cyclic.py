"""
Cyclic calendar generator.

A cyclic year is 4 quarters of 13 weeks. Inside a quarter, weeks 1-12 form
three 4-week cycles and week 13 is a reset week. The year starts on the
Monday of ISO week 1, so a cyclic year is 364 days long and drifts against
the Gregorian year; when the next ISO-aligned start is a full week away a
53rd "prep" week absorbs the leftover days.
"""

from datetime import date, datetime, timedelta
from functools import lru_cache
from typing import Iterator

from core.config import (
    CHECK_IN_POSITIONS,
    DAYS_PER_WEEK,
    QUARTERS_PER_YEAR,
    RESET_WEEK_INDEX,
    WEEKS_PER_CYCLE,
    WEEKS_PER_QUARTER,
)
from core.dates import as_date, weekday_index
from models.calendar import NO_CYCLE, CyclicQuarter, CyclicWeek, WeekType


def iso_week_anchor(year: int) -> date:
    """Monday of the week containing January 4th (start of ISO week 1)."""
    jan_fourth = date(year, 1, 4)
    return jan_fourth - timedelta(days=weekday_index(jan_fourth))


def _week_days(start: date, length: int = DAYS_PER_WEEK) -> tuple[date, ...]:
    return tuple(start + timedelta(days=i) for i in range(length))


def _build_week(week_number: int, quarter_index: int, week_in_quarter: int, start: date) -> CyclicWeek:
    if week_in_quarter == RESET_WEEK_INDEX:
        return CyclicWeek(
            week_number=week_number,
            quarter_index=quarter_index,
            days=_week_days(start),
            type=WeekType.RESET,
        )

    week_in_cycle = week_in_quarter % WEEKS_PER_CYCLE
    return CyclicWeek(
        week_number=week_number,
        quarter_index=quarter_index,
        days=_week_days(start),
        type=WeekType.STANDARD,
        cycle_index=week_in_quarter // WEEKS_PER_CYCLE,
        week_in_cycle=week_in_cycle,
        is_check_in=week_in_cycle in CHECK_IN_POSITIONS,
    )


@lru_cache(maxsize=32)
def get_cyclic_year_data(year: int) -> tuple[CyclicQuarter, ...]:
    """
    Generate the cyclic calendar for a year.

    Returns 4 quarters of 13 weeks; the last quarter gets a 14th "prep" week
    when the following year's ISO-aligned start is at least 7 days after the
    end of week 52. Output is immutable, so results are cached per year.
    """
    current = iso_week_anchor(year)
    quarters = []

    for q in range(QUARTERS_PER_YEAR):
        weeks = []
        for w in range(WEEKS_PER_QUARTER):
            week_number = q * WEEKS_PER_QUARTER + w + 1
            weeks.append(_build_week(week_number, q, w, current))
            current += timedelta(days=DAYS_PER_WEEK)
        quarters.append(weeks)

    # Partial remainders under a full week are dropped
    gap = (iso_week_anchor(year + 1) - current).days
    if gap >= DAYS_PER_WEEK:
        last_quarter = QUARTERS_PER_YEAR - 1
        quarters[last_quarter].append(
            CyclicWeek(
                week_number=QUARTERS_PER_YEAR * WEEKS_PER_QUARTER + 1,
                quarter_index=last_quarter,
                days=_week_days(current, min(gap, DAYS_PER_WEEK)),
                type=WeekType.PREP,
            )
        )

    return tuple(
        CyclicQuarter(quarter_index=index, weeks=tuple(weeks))
        for index, weeks in enumerate(quarters)
    )


def iter_cyclic_weeks(year: int) -> Iterator[CyclicWeek]:
    """Iterate over every week of the cyclic year in order."""
    for quarter in get_cyclic_year_data(year):
        yield from quarter.weeks


def find_cyclic_week(day: date | datetime, year: int | None = None) -> CyclicWeek | None:
    """
    Find the cyclic week containing a day.

    Without an explicit year the day's own Gregorian year and its neighbours
    are searched, since cyclic years start up to 3 days early or late.
    """
    day = as_date(day)
    years = [year] if year is not None else [day.year, day.year - 1, day.year + 1]

    for candidate in years:
        for week in iter_cyclic_weeks(candidate):
            if week.start <= day <= week.end:
                return week
    return None
