"""
Year plan export to Excel.
"""

from datetime import date
from io import BytesIO
from pathlib import Path

from openpyxl import Workbook
from openpyxl.comments import Comment
from openpyxl.styles import Color, Font, PatternFill
from openpyxl.utils import get_column_letter

from core.aggregation import detect_chains, event_duration_days
from core.config import CYCLIC_HEADERS, EVENT_DETAIL_HEADERS, OUTPUT_DIR, WEEKDAY_NAMES
from core.cyclic import iter_cyclic_weeks
from core.dates import as_date
from models.calendar import WeekType
from models.events import CategoryConfig, Event
from models.settings import CalendarSettings
from services.views import build_horizontal_rows, clip_event_to_range, filter_events_for_settings

HEADER_FONT = Font(bold=True, color=Color(rgb="FFFFFFFF"))
HEADER_FILL = PatternFill(patternType="solid", fgColor=Color(indexed=11))
WEEKEND_FILL = PatternFill(patternType="solid", fgColor=Color(rgb="FFE2E8F0"))
RESET_FILL = PatternFill(patternType="solid", fgColor=Color(rgb="FFE0E7FF"))
PREP_FILL = PatternFill(patternType="solid", fgColor=Color(rgb="FFFEF3C7"))
BURNOUT_FONT = Font(bold=True, color=Color(rgb="FFF97316"))


def format_date_display(d: date) -> str:
    """Format date as M/D/YYYY (platform-safe, no zero-padding)."""
    return f"{d.month}/{d.day}/{d.year}"


def hex_to_argb(color: str) -> str:
    """Convert '#ef4444' to openpyxl's 'FFEF4444'. Falls back to grey."""
    value = color.lstrip("#").upper()
    if len(value) != 6:
        return "FF94A3B8"
    return f"FF{value}"


def _write_header(ws, headers: list[str]) -> None:
    for col_idx, header in enumerate(headers, start=1):
        cell = ws.cell(row=1, column=col_idx, value=header)
        cell.font = HEADER_FONT
        cell.fill = HEADER_FILL


def write_year_plan_sheet(
    ws, year: int, events: list[Event], categories: list[CategoryConfig], settings: CalendarSettings
) -> None:
    """
    Write the horizontal layout: one row per month, one column per grid cell.

    Event bars are drawn as category-coloured fills; the first event to claim
    a cell keeps it. Titles go in a comment on the bar's first cell and burnout
    days get an orange '!' marker.
    """
    colors = {c["id"]: hex_to_argb(c["color"]) for c in categories}
    rows = build_horizontal_rows(year, events, settings)
    max_columns = rows[0].max_columns

    if settings.view_mode == "weekday":
        weekday_names = WEEKDAY_NAMES[settings.language]
        headers = ["Month"] + [weekday_names[i % 7][0] for i in range(max_columns)]
    else:
        headers = ["Month"] + [str(i + 1) for i in range(max_columns)]
    _write_header(ws, headers)

    for row_idx, month_row in enumerate(rows, start=2):
        ws.cell(row=row_idx, column=1, value=month_row.label).font = Font(bold=True)

        for day_offset, day_cell in enumerate(month_row.days):
            column = 2 + month_row.start_padding + day_offset
            cell = ws.cell(row=row_idx, column=column, value=day_cell.day.day)
            if day_cell.is_weekend:
                cell.fill = WEEKEND_FILL
            if day_cell.burnout:
                cell.value = f"{day_cell.day.day}!"
                cell.font = BURNOUT_FONT

        claimed: set[int] = set()
        titles_by_column: dict[int, list[str]] = {}
        for bar in month_row.bars:
            first_column = 2 + bar.offset
            titles_by_column.setdefault(first_column, []).append(bar.title)
            fill = PatternFill(patternType="solid", fgColor=Color(rgb=colors.get(bar.category_id, "FF94A3B8")))
            for column in range(first_column, first_column + bar.span):
                if column in claimed:
                    continue
                ws.cell(row=row_idx, column=column).fill = fill
                claimed.add(column)

        for column, titles in titles_by_column.items():
            ws.cell(row=row_idx, column=column).comment = Comment("\n".join(titles), "Heimdall")

    ws.column_dimensions["A"].width = 14
    for col_idx in range(2, max_columns + 2):
        ws.column_dimensions[get_column_letter(col_idx)].width = 4.5
    ws.freeze_panes = "B2"


def write_cyclic_sheet(ws, year: int, events: list[Event], settings: CalendarSettings) -> None:
    """Write one row per cyclic week with its classification and events."""
    _write_header(ws, CYCLIC_HEADERS)
    visible = filter_events_for_settings(events, settings)

    for row_idx, week in enumerate(iter_cyclic_weeks(year), start=2):
        titles = [
            event.title
            for event in visible
            if clip_event_to_range(event, week.start, week.end) is not None
        ]
        standard = week.type == WeekType.STANDARD
        row_data = [
            week.week_number,
            week.quarter_index + 1,
            week.type,
            week.cycle_index + 1 if standard else "",
            week.week_in_cycle + 1 if standard else "",
            "Yes" if week.is_check_in else "",
            format_date_display(week.start),
            format_date_display(week.end),
            "; ".join(titles),
        ]
        for col_idx, value in enumerate(row_data, start=1):
            cell = ws.cell(row=row_idx, column=col_idx, value=value)
            if week.type == WeekType.RESET:
                cell.fill = RESET_FILL
            elif week.type == WeekType.PREP:
                cell.fill = PREP_FILL

    ws.column_dimensions["I"].width = 60


def write_event_detail_sheet(ws, events: list[Event], categories: list[CategoryConfig]) -> None:
    """Write the raw events with duration and chain flag."""
    _write_header(ws, EVENT_DETAIL_HEADERS)
    labels = {c["id"]: c["label"] for c in categories}
    chains = set(detect_chains(events))

    for row_idx, event in enumerate(events, start=2):
        row_data = [
            event.id,
            event.title,
            labels.get(event.category_id, event.category_id),
            format_date_display(as_date(event.start_date)),
            format_date_display(as_date(event.end_date)),
            event_duration_days(event),
            "Yes" if event.id in chains else "",
            event.notes or "",
        ]
        for col_idx, value in enumerate(row_data, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    column_widths = {"A": 20, "B": 36, "C": 18, "D": 12, "E": 12, "F": 6, "G": 7, "H": 40}
    for col_letter, width in column_widths.items():
        ws.column_dimensions[col_letter].width = width


def create_year_plan_workbook(
    year: int, events: list[Event], categories: list[CategoryConfig], settings: CalendarSettings
) -> Workbook:
    """
    Create the year plan workbook.

    Sheet 1: "Year Plan" - horizontal month rows
    Sheet 2: "Cyclic" - cyclic weeks
    Sheet 3: "Events" - event detail
    """
    wb = Workbook()

    ws_plan = wb.active
    ws_plan.title = "Year Plan"
    write_year_plan_sheet(ws_plan, year, events, categories, settings)

    ws_cyclic = wb.create_sheet(title="Cyclic")
    write_cyclic_sheet(ws_cyclic, year, events, settings)

    ws_events = wb.create_sheet(title="Events")
    write_event_detail_sheet(ws_events, events, categories)

    return wb


def year_plan_filename(year: int) -> str:
    return f"year_plan_{year}.xlsx"


def generate_year_plan_to_bytes(
    year: int, events: list[Event], categories: list[CategoryConfig], settings: CalendarSettings
) -> tuple[bytes, str]:
    """
    Generate the workbook and return it as bytes (for API usage).

    Returns:
        Tuple of (excel_bytes, filename)
    """
    workbook = create_year_plan_workbook(year, events, categories, settings)

    buffer = BytesIO()
    workbook.save(buffer)
    buffer.seek(0)

    return buffer.getvalue(), year_plan_filename(year)


def export_year_plan(
    year: int,
    events: list[Event],
    categories: list[CategoryConfig],
    settings: CalendarSettings,
    output_path: Path | None = None,
) -> Path:
    """Generate the workbook and save it to disk."""
    if output_path is None:
        output_path = OUTPUT_DIR / "plans" / year_plan_filename(year)

    workbook = create_year_plan_workbook(year, events, categories, settings)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    workbook.save(str(output_path))
    print(f"Saved year plan to: {output_path}")
    return output_path
