"""
Value types produced by the date/calendar core.
"""

from dataclasses import dataclass
from datetime import date


class WeekType:
    """Cyclic week type constants."""

    STANDARD = "standard"
    RESET = "reset"
    PREP = "prep"


NO_CYCLE = -1  # Sentinel for reset and prep weeks


@dataclass(frozen=True)
class MonthGrid:
    """Days of a Gregorian month plus the blank cells before day 1."""

    year: int
    month_index: int  # 0-11
    days_in_month: int
    start_padding: int  # 0-6, Monday-first
    days: tuple[date, ...]


@dataclass(frozen=True)
class CyclicWeek:
    """One week of the cyclic calendar."""

    week_number: int  # 1-based across the whole year
    quarter_index: int
    days: tuple[date, ...]
    type: str
    cycle_index: int = NO_CYCLE
    week_in_cycle: int = NO_CYCLE
    is_check_in: bool = False

    @property
    def start(self) -> date:
        return self.days[0]

    @property
    def end(self) -> date:
        return self.days[-1]


@dataclass(frozen=True)
class CyclicQuarter:
    """Thirteen cyclic weeks (fourteen for the last quarter of a long year)."""

    quarter_index: int  # 0-3
    weeks: tuple[CyclicWeek, ...]
