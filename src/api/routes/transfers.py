"""Calendar import and year plan export endpoints."""

import asyncio
import sqlite3
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status
from fastapi.responses import Response

from api.dependencies import get_client_ip, get_db, verify_api_key
from api.logging import RequestLog
from api.models.responses import ErrorCodes, ImportResponse
from core.database import load_planner_state, upsert_event
from core.validation import validate_events
from services.calendar import CalendarImportError, fetch_events
from services.reports import generate_year_plan_to_bytes

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])

Year = Annotated[int, Path(ge=2, le=9998)]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _internal_error(request_log: RequestLog, e: Exception) -> HTTPException:
    request_log.fail(500, ErrorCodes.INTERNAL_ERROR, str(e))
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={
            "error": "Internal server error",
            "code": ErrorCodes.INTERNAL_ERROR,
            "details": [],
        },
    )


@router.post("/import/{year}", response_model=ImportResponse)
async def import_year(year: Year, request: Request, conn: sqlite3.Connection = Depends(get_db)):
    """
    Import a year of events from the external calendar.

    Valid events are upserted (last write wins); invalid ones are reported
    back and skipped.
    """
    request_log = RequestLog(
        endpoint=f"/v1/import/{year}",
        method="POST",
        client_ip=get_client_ip(request),
        year=year,
    )

    try:
        imported = await fetch_events(year)

        _, categories, _ = load_planner_state(conn)
        rejected = validate_events(imported, [c["id"] for c in categories])
        accepted = [event for event in imported if event.id not in rejected]
        for event in accepted:
            upsert_event(conn, event)
            request_log.add_detail("event_imported", event.id)

        request_log.status_code = 200
        request_log.events_count = len(accepted)
        for event_id, message in rejected.items():
            request_log.add_detail("validation_error", f"{event_id}: {message}")

        return ImportResponse(year=year, imported=len(accepted), rejected=rejected)

    except CalendarImportError as e:
        request_log.fail(502, ErrorCodes.IMPORT_FAILED, str(e))
        raise HTTPException(
            status_code=status.HTTP_502_BAD_GATEWAY,
            detail={
                "error": "Calendar import failed",
                "code": ErrorCodes.IMPORT_FAILED,
                "details": [str(e)],
            },
        )

    except Exception as e:
        raise _internal_error(request_log, e)

    finally:
        request_log.finish()


@router.get("/export/{year}")
async def export_year(year: Year, request: Request, conn: sqlite3.Connection = Depends(get_db)):
    """Download the year plan as an Excel workbook."""
    request_log = RequestLog(
        endpoint=f"/v1/export/{year}",
        method="GET",
        client_ip=get_client_ip(request),
        year=year,
    )

    try:
        events, categories, settings = load_planner_state(conn)
        request_log.events_count = len(events)

        # Workbook generation is CPU-bound; keep it off the event loop
        excel_bytes, filename = await asyncio.to_thread(
            generate_year_plan_to_bytes, year, events, categories, settings
        )

        request_log.status_code = 200
        return Response(
            content=excel_bytes,
            media_type=XLSX_MEDIA_TYPE,
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    except Exception as e:
        raise _internal_error(request_log, e)

    finally:
        request_log.finish()
