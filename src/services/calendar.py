"""
External calendar import from MS Graph.

Import failures (missing credentials, unknown calendar, Graph or network
errors) surface as CalendarImportError; callers decide how to report them.
"""

import re
from datetime import date, datetime, time, timedelta

from core.config import (
    IMPORT_CALENDAR_NAME,
    IMPORT_CATEGORY_ID,
    IMPORT_DEFAULT_TITLE,
    IMPORT_ID_PREFIX,
    IMPORT_PAGE_SIZE,
    IMPORT_USER_ID,
)
from core.graph_client import get_graph_client, graph_credentials_configured
from models.events import Event, parse_instant


class CalendarImportError(Exception):
    """Raised when events cannot be fetched from the external calendar."""


def year_bounds(year: int) -> tuple[str, str]:
    """UTC filter bounds covering the whole year (end is exclusive)."""
    start_dt = datetime.combine(date(year, 1, 1), time.min)
    end_dt = datetime.combine(date(year + 1, 1, 1), time.min)
    return start_dt.strftime("%Y-%m-%dT%H:%M:%SZ"), end_dt.strftime("%Y-%m-%dT%H:%M:%SZ")


def strip_body(content: str | None) -> str:
    """Turn an event body (plain text or HTML) into plain notes."""
    if not content:
        return ""
    text = content.strip()
    if "<" in text:
        # Simple HTML stripping
        text = re.sub(r"<[^>]+>", "\n", text)
    lines = [line.strip() for line in text.split("\n")]
    return "\n".join(line for line in lines if line)


def parse_event(event) -> Event | None:
    """
    Parse an MS Graph event into a planner Event.

    Returns None for events without a start time. All-day events carry an
    exclusive end at midnight, so their end is pulled back one day.
    """
    if not (event.start and event.start.date_time):
        return None

    start = parse_instant(event.start.date_time)
    end = start
    if event.end and event.end.date_time:
        end = parse_instant(event.end.date_time)

    if getattr(event, "is_all_day", False) and end > start:
        end -= timedelta(days=1)

    body = getattr(event, "body", None)
    notes = strip_body(body.content if body else None)

    return Event(
        id=f"{IMPORT_ID_PREFIX}{event.id}",
        title=event.subject or IMPORT_DEFAULT_TITLE,
        start_date=start,
        end_date=end,
        category_id=IMPORT_CATEGORY_ID,
        notes=notes,
    )


async def find_calendar(user_id: str, calendar_name: str) -> str:
    """
    Find a user's calendar by name (case-insensitive).

    Raises:
        CalendarImportError: Graph call failed or no calendar matched
    """
    graph = get_graph_client()

    try:
        calendars_response = await graph.users.by_user_id(user_id).calendars.get()
    except Exception as e:
        raise CalendarImportError(f"Could not list calendars for {user_id}: {e}") from e

    calendars = calendars_response.value if calendars_response and calendars_response.value else []
    wanted = calendar_name.strip().lower()
    for calendar in calendars:
        if calendar.name and calendar.name.strip().lower() == wanted:
            return calendar.id

    raise CalendarImportError(f"No calendar named '{calendar_name}' found for {user_id}")


async def fetch_events(
    year: int, user_id: str | None = None, calendar_name: str | None = None
) -> list[Event]:
    """
    Fetch all events overlapping the given year from a Graph calendar.

    Follows @odata.nextLink pagination. Cancelled events are skipped.

    Raises:
        CalendarImportError: credentials missing, calendar not found, or Graph failure
    """
    if not graph_credentials_configured():
        raise CalendarImportError("MS Graph credentials are not configured")

    user_id = user_id or IMPORT_USER_ID
    if not user_id:
        raise CalendarImportError("No import user configured (IMPORT_USER_ID)")
    calendar_name = calendar_name or IMPORT_CALENDAR_NAME

    calendar_id = await find_calendar(user_id, calendar_name)
    graph = get_graph_client()
    start_str, end_str = year_bounds(year)

    from msgraph.generated.users.item.calendars.item.events.events_request_builder import (
        EventsRequestBuilder,
    )

    query_params = EventsRequestBuilder.EventsRequestBuilderGetQueryParameters(
        filter=f"start/dateTime lt '{end_str}' and end/dateTime ge '{start_str}'",
        orderby=["start/dateTime"],
        top=IMPORT_PAGE_SIZE,
    )
    request_config = EventsRequestBuilder.EventsRequestBuilderGetRequestConfiguration(
        query_parameters=query_params
    )
    events_builder = graph.users.by_user_id(user_id).calendars.by_calendar_id(calendar_id).events

    raw_events = []
    try:
        response = await events_builder.get(request_configuration=request_config)
        while response:
            raw_events.extend(response.value or [])
            if not response.odata_next_link:
                break
            response = await events_builder.with_url(response.odata_next_link).get()
    except Exception as e:
        raise CalendarImportError(f"Error fetching events for {year}: {e}") from e

    events = []
    for raw_event in raw_events:
        if getattr(raw_event, "is_cancelled", False):
            continue
        parsed = parse_event(raw_event)
        if parsed:
            events.append(parsed)

    print(f"  Fetched {len(events)} events from '{calendar_name}' for {year}")
    return events
