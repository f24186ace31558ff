"""
View assemblers for the three planner layouts.

Each assembler turns (year, events, settings) into plain immutable geometry:
which cell a bar starts in, how many cells it covers, and whether it is a
continuation of an event that began before the visible range. Settings are
always passed in explicitly.
"""

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from core.aggregation import detect_chains, events_active_on_day, is_burnout_day
from core.config import (
    MONTH_NAMES,
    NUMERIC_MODE_COLUMNS,
    VERTICAL_BASE_ROWS,
    VERTICAL_BLOCKS,
    VERTICAL_WEEKDAY_EXTRA_ROWS,
    VIEW_LABELS,
    WEEKDAY_MODE_COLUMNS,
    WEEKDAY_NAMES,
    WEEKS_PER_CYCLE,
)
from core.cyclic import get_cyclic_year_data
from core.dates import as_date, get_month_days, is_weekend
from models.calendar import CyclicWeek, MonthGrid, WeekType
from models.events import Event
from models.settings import CalendarSettings


@dataclass(frozen=True)
class EventSegment:
    """The visible part of an event inside a date range."""

    event_id: str
    title: str
    category_id: str
    start: date
    end: date
    span_days: int
    is_continuation: bool


@dataclass(frozen=True)
class DayCell:
    day: date
    is_weekend: bool
    is_today: bool
    is_past: bool
    faded: bool
    burnout: bool


@dataclass(frozen=True)
class EventBar:
    """A bar placed on a grid: offset is a column (horizontal) or row (vertical)."""

    event_id: str
    title: str
    label: str  # text drawn on the bar, empty in bird-eye view
    category_id: str
    offset: int
    span: int
    is_continuation: bool
    faded: bool


@dataclass(frozen=True)
class MonthRow:
    month_index: int
    label: str
    start_padding: int
    max_columns: int
    days: tuple[DayCell, ...]
    bars: tuple[EventBar, ...]


@dataclass(frozen=True)
class VerticalColumn:
    month_index: int
    label: str
    padding: int
    days: tuple[DayCell, ...]
    bars: tuple[EventBar, ...]


@dataclass(frozen=True)
class VerticalBlock:
    title: str
    total_rows: int
    row_labels: tuple[str, ...]
    columns: tuple[VerticalColumn, ...]


@dataclass(frozen=True)
class MonthSpan:
    label: str
    span: int


@dataclass(frozen=True)
class CyclicEventLabel:
    event_id: str
    title: str
    category_id: str
    show_title: bool
    is_continuation: bool
    faded: bool


@dataclass(frozen=True)
class CyclicDayCell:
    day: date
    is_weekend: bool
    is_today: bool
    is_past: bool
    events: tuple[CyclicEventLabel, ...]


@dataclass(frozen=True)
class CyclicWeekView:
    week: CyclicWeek
    label: str
    progress: tuple[bool, ...]  # empty for reset and prep weeks
    days: tuple[CyclicDayCell, ...]


@dataclass(frozen=True)
class CyclicQuarterView:
    quarter_index: int
    title: str
    month_spans: tuple[MonthSpan, ...]
    weeks: tuple[CyclicWeekView, ...]


@dataclass(frozen=True)
class YearSummary:
    year: int
    chain_ids: tuple[str, ...]
    chain_count: int
    burnout_days: tuple[date, ...]


# =============================================================================
# SHARED HELPERS
# =============================================================================


def filter_events_for_settings(events: Iterable[Event], settings: CalendarSettings) -> list[Event]:
    """Keep events in active categories (an empty selection keeps everything)."""
    if not settings.active_category_ids:
        return list(events)
    return [e for e in events if e.category_id in settings.active_category_ids]


def clip_event_to_range(event: Event, range_start: date, range_end: date) -> EventSegment | None:
    """
    Clip an event to [range_start, range_end] for continuation rendering.

    Inverted events render as a single day on their start date.
    """
    start = as_date(event.start_date)
    end = max(as_date(event.end_date), start)

    if end < range_start or start > range_end:
        return None

    seg_start = max(start, range_start)
    seg_end = min(end, range_end)
    return EventSegment(
        event_id=event.id,
        title=event.title,
        category_id=event.category_id,
        start=seg_start,
        end=seg_end,
        span_days=(seg_end - seg_start).days + 1,
        is_continuation=start < range_start,
    )


def _month_names(settings: CalendarSettings, month_names: list[str] | None) -> list[str]:
    return month_names or MONTH_NAMES[settings.language]


def _day_cell(day: date, events: list[Event], settings: CalendarSettings, today: date | None) -> DayCell:
    is_past = today is not None and day < today
    return DayCell(
        day=day,
        is_weekend=is_weekend(day),
        is_today=day == today,
        is_past=is_past,
        faded=settings.fade_past and is_past,
        burnout=settings.show_burnout_warnings and is_burnout_day(day, events),
    )


def _bar_label(title: str, is_continuation: bool, settings: CalendarSettings) -> str:
    if settings.is_bird_eye_view:
        return ""
    if is_continuation:
        return f"{VIEW_LABELS[settings.language]['cont']} {title}"
    return title


def _month_label(name: str, settings: CalendarSettings, bird_eye_length: int) -> str:
    return name[:bird_eye_length] if settings.is_bird_eye_view else name


def _month_bars(
    grid: MonthGrid, events: list[Event], padding: int, settings: CalendarSettings, today: date | None
) -> tuple[EventBar, ...]:
    month_start, month_end = grid.days[0], grid.days[-1]
    bars = []
    for event in events:
        segment = clip_event_to_range(event, month_start, month_end)
        if segment is None:
            continue
        bars.append(
            EventBar(
                event_id=segment.event_id,
                title=segment.title,
                label=_bar_label(segment.title, segment.is_continuation, settings),
                category_id=segment.category_id,
                offset=padding + segment.start.day - 1,
                span=segment.span_days,
                is_continuation=segment.is_continuation,
                faded=settings.fade_past and today is not None and segment.start < today,
            )
        )
    return tuple(bars)


# =============================================================================
# HORIZONTAL LAYOUT
# =============================================================================


def build_horizontal_rows(
    year: int,
    events: Iterable[Event],
    settings: CalendarSettings,
    today: date | None = None,
    month_names: list[str] | None = None,
) -> list[MonthRow]:
    """One row per month; weekday mode pads each row so weekdays line up."""
    visible = filter_events_for_settings(events, settings)
    names = _month_names(settings, month_names)
    weekday_mode = settings.view_mode == "weekday"

    rows = []
    for month_index in range(12):
        grid = get_month_days(year, month_index)
        padding = grid.start_padding if weekday_mode else 0
        rows.append(
            MonthRow(
                month_index=month_index,
                label=_month_label(names[month_index], settings, 1),
                start_padding=padding,
                max_columns=WEEKDAY_MODE_COLUMNS if weekday_mode else NUMERIC_MODE_COLUMNS,
                days=tuple(_day_cell(day, visible, settings, today) for day in grid.days),
                bars=_month_bars(grid, visible, padding, settings, today),
            )
        )
    return rows


# =============================================================================
# VERTICAL LAYOUT
# =============================================================================


def build_vertical_blocks(
    year: int,
    events: Iterable[Event],
    settings: CalendarSettings,
    today: date | None = None,
    month_names: list[str] | None = None,
) -> list[VerticalBlock]:
    """Two half-year blocks with one column per month and one row per day."""
    visible = filter_events_for_settings(events, settings)
    names = _month_names(settings, month_names)
    labels = VIEW_LABELS[settings.language]
    weekday_mode = settings.view_mode == "weekday"

    total_rows = VERTICAL_BASE_ROWS + (VERTICAL_WEEKDAY_EXTRA_ROWS if weekday_mode else 0)
    if weekday_mode:
        weekday_names = WEEKDAY_NAMES[settings.language]
        row_labels = tuple(weekday_names[row % 7][0] for row in range(total_rows))
    else:
        row_labels = tuple(str(row + 1) for row in range(total_rows))

    blocks = []
    for title_key, months in zip(("first_half", "second_half"), VERTICAL_BLOCKS):
        columns = []
        for month_index in months:
            grid = get_month_days(year, month_index)
            padding = grid.start_padding if weekday_mode else 0
            columns.append(
                VerticalColumn(
                    month_index=month_index,
                    label=_month_label(names[month_index], settings, 3),
                    padding=padding,
                    days=tuple(_day_cell(day, visible, settings, today) for day in grid.days),
                    bars=_month_bars(grid, visible, padding, settings, today),
                )
            )
        blocks.append(
            VerticalBlock(
                title=labels[title_key],
                total_rows=total_rows,
                row_labels=row_labels,
                columns=tuple(columns),
            )
        )
    return blocks


# =============================================================================
# CYCLIC LAYOUT
# =============================================================================


def month_spans(weeks: Iterable[CyclicWeek], month_names: list[str]) -> list[MonthSpan]:
    """Group consecutive weeks by the month their first day falls in."""
    spans: list[MonthSpan] = []
    current_month = None
    current_span = 0

    for week in weeks:
        week_month = week.days[0].month
        if week_month == current_month:
            current_span += 1
            continue
        if current_month is not None:
            spans.append(MonthSpan(label=month_names[current_month - 1], span=current_span))
        current_month = week_month
        current_span = 1

    if current_month is not None:
        spans.append(MonthSpan(label=month_names[current_month - 1], span=current_span))
    return spans


def _week_label(week: CyclicWeek, labels: dict) -> str:
    if week.type == WeekType.RESET:
        return labels["reset"]
    if week.type == WeekType.PREP:
        return labels["prep"]
    return f"{labels['cycle']} {week.cycle_index + 1}"


def _cyclic_day(
    day: date, day_index: int, events: list[Event], settings: CalendarSettings, today: date | None
) -> CyclicDayCell:
    is_past = today is not None and day < today
    labels = []
    for event in events_active_on_day(day, events):
        is_first_day = as_date(event.start_date) == day
        # Titles only on the event's first day or when it carries into a new week
        titled = is_first_day or day_index == 0
        labels.append(
            CyclicEventLabel(
                event_id=event.id,
                title=event.title,
                category_id=event.category_id,
                show_title=titled and not settings.is_bird_eye_view,
                is_continuation=titled and not is_first_day,
                faded=settings.fade_past and is_past,
            )
        )
    return CyclicDayCell(
        day=day,
        is_weekend=is_weekend(day),
        is_today=day == today,
        is_past=is_past,
        events=tuple(labels),
    )


def build_cyclic_view(
    year: int,
    events: Iterable[Event],
    settings: CalendarSettings,
    today: date | None = None,
    month_names: list[str] | None = None,
) -> list[CyclicQuarterView]:
    """Quarters of the cyclic calendar with per-day event labels."""
    visible = filter_events_for_settings(events, settings)
    names = _month_names(settings, month_names)
    labels = VIEW_LABELS[settings.language]

    quarters = []
    for quarter in get_cyclic_year_data(year):
        weeks = []
        for week in quarter.weeks:
            progress = ()
            if week.type == WeekType.STANDARD:
                progress = tuple(step <= week.week_in_cycle for step in range(WEEKS_PER_CYCLE))
            weeks.append(
                CyclicWeekView(
                    week=week,
                    label=_week_label(week, labels),
                    progress=progress,
                    days=tuple(
                        _cyclic_day(day, index, visible, settings, today)
                        for index, day in enumerate(week.days)
                    ),
                )
            )
        quarters.append(
            CyclicQuarterView(
                quarter_index=quarter.quarter_index,
                title=f"{labels['quarter']} {quarter.quarter_index + 1}",
                month_spans=tuple(month_spans(quarter.weeks, names)),
                weeks=tuple(weeks),
            )
        )
    return quarters


# =============================================================================
# ADVISORIES
# =============================================================================


def build_year_summary(year: int, events: Iterable[Event], settings: CalendarSettings) -> YearSummary:
    """
    Chains and burnout days for the advisory banner.

    Chains are counted across all events regardless of the category filter;
    burnout days only consider visible events, as on the grids.
    """
    events = list(events)
    visible = filter_events_for_settings(events, settings)
    chains = tuple(detect_chains(events))

    flagged: tuple[date, ...] = ()
    if settings.show_burnout_warnings:
        flagged = tuple(
            day
            for month_index in range(12)
            for day in get_month_days(year, month_index).days
            if is_burnout_day(day, visible)
        )

    return YearSummary(year=year, chain_ids=chains, chain_count=len(chains), burnout_days=flagged)
