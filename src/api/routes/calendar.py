"""Calendar computation endpoints: grids, cyclic year, advisories and views."""

import sqlite3
from dataclasses import asdict
from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Query, status
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from api.dependencies import get_db, verify_api_key
from api.models.responses import (
    CyclicYearResponse,
    DayResponse,
    ErrorCodes,
    EventResponse,
    MonthGridResponse,
    YearSummaryResponse,
)
from core.aggregation import burnout_days, events_active_on_day, is_burnout_day
from core.cyclic import get_cyclic_year_data
from core.database import load_planner_state
from core.dates import get_month_days
from services.views import (
    build_cyclic_view,
    build_horizontal_rows,
    build_vertical_blocks,
    build_year_summary,
    filter_events_for_settings,
)

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])

# Cyclic years look one year ahead, so the last representable year is excluded
Year = Annotated[int, Path(ge=2, le=9998)]
# One year of roll-over either side of the requested year
MonthIndex = Annotated[int, Path(ge=-12, le=23)]

VIEW_BUILDERS = {
    "horizontal": build_horizontal_rows,
    "vertical": build_vertical_blocks,
    "cyclic": build_cyclic_view,
}


@router.get("/calendar/{year}/months/{month_index}", response_model=MonthGridResponse)
async def month_grid(year: Year, month_index: MonthIndex, conn: sqlite3.Connection = Depends(get_db)):
    """
    Month grid with burnout days.

    Out-of-range month indices roll into the neighbouring year.
    """
    events, _, settings = load_planner_state(conn)
    grid = get_month_days(year, month_index)
    visible = filter_events_for_settings(events, settings)
    flagged = burnout_days(grid.days, visible) if settings.show_burnout_warnings else []
    return MonthGridResponse.from_grid(grid, flagged)


@router.get("/calendar/{year}/cyclic", response_model=CyclicYearResponse)
async def cyclic_year(year: Year):
    return CyclicYearResponse.from_quarters(year, get_cyclic_year_data(year))


@router.get("/calendar/{year}/summary", response_model=YearSummaryResponse)
async def year_summary(year: Year, conn: sqlite3.Connection = Depends(get_db)):
    """Chains and burnout days driving the advisory banner."""
    events, _, settings = load_planner_state(conn)
    summary = build_year_summary(year, events, settings)
    return YearSummaryResponse(
        year=summary.year,
        chain_ids=list(summary.chain_ids),
        chain_count=summary.chain_count,
        burnout_days=list(summary.burnout_days),
    )


@router.get("/calendar/days/{day}", response_model=DayResponse)
async def day_detail(day: date, conn: sqlite3.Connection = Depends(get_db)):
    """Events active on a day and whether it is a burnout day."""
    events, _, settings = load_planner_state(conn)
    visible = filter_events_for_settings(events, settings)
    return DayResponse(
        day=day,
        burnout=is_burnout_day(day, visible),
        events=[EventResponse.from_event(e) for e in events_active_on_day(day, visible)],
    )


@router.get("/views/{year}/{layout}")
async def layout_view(
    year: Year,
    layout: str,
    today: Annotated[date | None, Query(description="Reference day for today/past flags")] = None,
    conn: sqlite3.Connection = Depends(get_db),
):
    """Render-ready geometry for one of the three layouts."""
    builder = VIEW_BUILDERS.get(layout)
    if builder is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={
                "error": f"Unknown layout '{layout}'",
                "code": ErrorCodes.INVALID_REQUEST,
                "details": [f"Expected one of: {', '.join(sorted(VIEW_BUILDERS))}"],
            },
        )

    events, _, settings = load_planner_state(conn)
    view = builder(year, events, settings, today=today or date.today())
    return JSONResponse(content=jsonable_encoder([asdict(part) for part in view]))
