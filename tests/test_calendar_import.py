"""Tests for importing events from an MS Graph calendar."""

import asyncio
from datetime import datetime
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock, patch

import pytest

from services.calendar import (
    CalendarImportError,
    fetch_events,
    find_calendar,
    parse_event,
    strip_body,
    year_bounds,
)


def graph_event(event_id, subject, start, end, is_all_day=False, body=None, is_cancelled=False):
    return SimpleNamespace(
        id=event_id,
        subject=subject,
        start=SimpleNamespace(date_time=start),
        end=SimpleNamespace(date_time=end),
        is_all_day=is_all_day,
        is_cancelled=is_cancelled,
        body=SimpleNamespace(content=body) if body is not None else None,
    )


def page(events, next_link=None):
    return SimpleNamespace(value=events, odata_next_link=next_link)


@pytest.fixture
def graph():
    """Graph client mock with a single 'Calendar' calendar."""
    client = MagicMock()
    users = client.users.by_user_id.return_value
    users.calendars.get = AsyncMock(
        return_value=page([
            SimpleNamespace(id="cal-0", name="Birthdays"),
            SimpleNamespace(id="cal-1", name="Calendar"),
        ])
    )
    with patch("services.calendar.get_graph_client", return_value=client), \
            patch("services.calendar.graph_credentials_configured", return_value=True):
        yield client


def events_builder(client):
    return client.users.by_user_id.return_value.calendars.by_calendar_id.return_value.events


def test_year_bounds():
    assert year_bounds(2025) == ("2025-01-01T00:00:00Z", "2026-01-01T00:00:00Z")


def test_strip_body():
    assert strip_body(None) == ""
    assert strip_body("  plain notes ") == "plain notes"
    assert strip_body("<html><body><p>Pack</p><p>light</p></body></html>") == "Pack\nlight"


class TestParseEvent:
    def test_timed_event(self):
        event = parse_event(
            graph_event("abc", "Offsite", "2025-03-04T09:00:00.0000000", "2025-03-06T17:00:00.0000000")
        )
        assert event.id == "graph-abc"
        assert event.title == "Offsite"
        assert event.start_date == datetime(2025, 3, 4, 9, 0)
        assert event.end_date == datetime(2025, 3, 6, 17, 0)
        assert event.category_id == "other"

    def test_all_day_end_is_exclusive(self):
        event = parse_event(
            graph_event("d", "Holiday", "2025-04-18T00:00:00", "2025-04-22T00:00:00", is_all_day=True)
        )
        assert event.end_date == datetime(2025, 4, 21)

    def test_defaults(self):
        event = parse_event(graph_event("x", None, "2025-01-01T10:00:00", None, body="<p>Notes</p>"))
        assert event.title
        assert event.end_date == event.start_date
        assert event.notes == "Notes"

    def test_missing_start(self):
        assert parse_event(graph_event("x", "No start", None, None)) is None


class TestFindCalendar:
    def test_case_insensitive_match(self, graph):
        assert asyncio.run(find_calendar("user@example.com", " calendar ")) == "cal-1"

    def test_not_found(self, graph):
        with pytest.raises(CalendarImportError, match="Work"):
            asyncio.run(find_calendar("user@example.com", "Work"))

    def test_graph_failure(self, graph):
        graph.users.by_user_id.return_value.calendars.get = AsyncMock(side_effect=RuntimeError("403"))
        with pytest.raises(CalendarImportError, match="403"):
            asyncio.run(find_calendar("user@example.com", "Calendar"))


class TestFetchEvents:
    def test_follows_pagination_and_skips_cancelled(self, graph):
        builder = events_builder(graph)
        builder.get = AsyncMock(
            return_value=page(
                [
                    graph_event("1", "Kickoff", "2025-01-06T09:00:00", "2025-01-06T10:00:00"),
                    graph_event("2", "Cancelled", "2025-01-07T09:00:00", "2025-01-07T10:00:00", is_cancelled=True),
                ],
                next_link="https://graph.microsoft.com/next",
            )
        )
        builder.with_url.return_value.get = AsyncMock(
            return_value=page([graph_event("3", "Review", "2025-06-01T09:00:00", "2025-06-01T10:00:00")])
        )

        events = asyncio.run(fetch_events(2025, user_id="user@example.com"))

        assert [e.id for e in events] == ["graph-1", "graph-3"]
        builder.with_url.assert_called_once_with("https://graph.microsoft.com/next")
        graph.users.by_user_id.return_value.calendars.by_calendar_id.assert_called_with("cal-1")

    def test_graph_error_is_wrapped(self, graph):
        events_builder(graph).get = AsyncMock(side_effect=RuntimeError("throttled"))
        with pytest.raises(CalendarImportError, match="throttled"):
            asyncio.run(fetch_events(2025, user_id="user@example.com"))

    def test_requires_credentials(self):
        with patch("services.calendar.graph_credentials_configured", return_value=False):
            with pytest.raises(CalendarImportError, match="credentials"):
                asyncio.run(fetch_events(2025, user_id="user@example.com"))

    def test_requires_user(self, graph):
        with patch("services.calendar.IMPORT_USER_ID", ""):
            with pytest.raises(CalendarImportError, match="IMPORT_USER_ID"):
                asyncio.run(fetch_events(2025))
