"""Event CRUD endpoints."""

import sqlite3
import uuid

from fastapi import APIRouter, Depends, HTTPException, Response, status

from api.dependencies import get_db, verify_api_key
from api.models.responses import ErrorCodes, EventPayload, EventResponse
from core.database import delete_event, get_event, load_categories, load_events, load_settings, upsert_event
from core.validation import validate_event
from models.events import Event

router = APIRouter(prefix="/v1", dependencies=[Depends(verify_api_key)])


def _not_found(event_id: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={
            "error": "Event not found",
            "code": ErrorCodes.NOT_FOUND,
            "details": [f"No event with id '{event_id}'"],
        },
    )


def _validate_or_raise(conn: sqlite3.Connection, event: Event) -> None:
    """Reject events the editing surface should never accept."""
    settings = load_settings(conn)
    category_ids = [c["id"] for c in load_categories(conn, settings.language)]
    errors = validate_event(event, category_ids)
    if errors:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail={
                "error": "Event validation failed",
                "code": ErrorCodes.VALIDATION_ERROR,
                "details": errors,
            },
        )


@router.get("/events", response_model=list[EventResponse])
async def list_events(conn: sqlite3.Connection = Depends(get_db)):
    """List all events ordered by start date."""
    return [EventResponse.from_event(event) for event in load_events(conn)]


@router.post("/events", response_model=EventResponse, status_code=status.HTTP_201_CREATED)
async def create_event(payload: EventPayload, conn: sqlite3.Connection = Depends(get_db)):
    """Create an event, generating an id when none is supplied."""
    event = payload.to_event(payload.id or str(uuid.uuid4()))
    _validate_or_raise(conn, event)
    upsert_event(conn, event)
    return EventResponse.from_event(event)


@router.get("/events/{event_id}", response_model=EventResponse)
async def read_event(event_id: str, conn: sqlite3.Connection = Depends(get_db)):
    event = get_event(conn, event_id)
    if event is None:
        raise _not_found(event_id)
    return EventResponse.from_event(event)


@router.put("/events/{event_id}", response_model=EventResponse)
async def update_event(event_id: str, payload: EventPayload, conn: sqlite3.Connection = Depends(get_db)):
    """Replace an existing event. The path id wins over any id in the body."""
    if get_event(conn, event_id) is None:
        raise _not_found(event_id)
    event = payload.to_event(event_id)
    _validate_or_raise(conn, event)
    upsert_event(conn, event)
    return EventResponse.from_event(event)


@router.delete("/events/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
async def remove_event(event_id: str, conn: sqlite3.Connection = Depends(get_db)):
    if not delete_event(conn, event_id):
        raise _not_found(event_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
