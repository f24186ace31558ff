"""Tests for the REST API."""

import sqlite3
from io import BytesIO
from unittest.mock import AsyncMock, patch

import pytest
from openpyxl import load_workbook

from core.database import get_connection, save_events
from services.calendar import CalendarImportError

EVENT_BODY = {
    "title": "Q1 Vision Sprint",
    "start_date": "2025-01-15T00:00:00",
    "end_date": "2025-01-25T00:00:00",
    "category_id": "work",
}


@pytest.fixture
def seeded(api_client, sample_events):
    """API client with the sample events stored."""
    conn = get_connection()
    try:
        save_events(conn, sample_events)
    finally:
        conn.close()
    return api_client


def request_logs(db_path):
    conn = sqlite3.connect(db_path)
    try:
        return conn.execute(
            "SELECT endpoint, status_code, error_code, events_count FROM api_requests"
        ).fetchall()
    finally:
        conn.close()


def test_health(api_client):
    response = api_client.get("/health")
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["database_available"] is True


class TestAuth:
    def test_wrong_key(self, api_client):
        response = api_client.get("/v1/events", headers={"X-API-Key": "nope"})
        assert response.status_code == 401
        assert response.json()["detail"]["code"] == "UNAUTHORIZED"

    def test_server_without_key(self, api_client, monkeypatch):
        from core import config

        monkeypatch.setattr(config, "HEIMDALL_API_KEY", "")
        response = api_client.get("/v1/events")
        assert response.status_code == 500


class TestEvents:
    def test_create_and_read(self, api_client):
        created = api_client.post("/v1/events", json=EVENT_BODY)
        assert created.status_code == 201
        event_id = created.json()["id"]
        assert event_id

        response = api_client.get(f"/v1/events/{event_id}")
        assert response.status_code == 200
        assert response.json()["title"] == "Q1 Vision Sprint"
        assert [e["id"] for e in api_client.get("/v1/events").json()] == [event_id]

    def test_create_with_id(self, api_client):
        response = api_client.post("/v1/events", json={**EVENT_BODY, "id": "sprint"})
        assert response.json()["id"] == "sprint"

    def test_create_rejects_inverted_dates(self, api_client):
        body = {**EVENT_BODY, "start_date": "2025-02-01T00:00:00"}
        response = api_client.post("/v1/events", json=body)
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "VALIDATION_ERROR"

    def test_create_rejects_unknown_category(self, api_client):
        response = api_client.post("/v1/events", json={**EVENT_BODY, "category_id": "gym"})
        assert response.status_code == 422

    def test_update(self, seeded):
        response = seeded.put("/v1/events/a", json={**EVENT_BODY, "title": "Renamed", "id": "ignored"})
        assert response.status_code == 200
        assert response.json()["id"] == "a"
        assert seeded.get("/v1/events/a").json()["title"] == "Renamed"

    def test_update_missing(self, api_client):
        response = api_client.put("/v1/events/missing", json=EVENT_BODY)
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "NOT_FOUND"

    def test_delete(self, seeded):
        assert seeded.delete("/v1/events/a").status_code == 204
        assert seeded.get("/v1/events/a").status_code == 404
        assert seeded.delete("/v1/events/a").status_code == 404


class TestCalendar:
    def test_month_grid(self, seeded):
        response = seeded.get("/v1/calendar/2025/months/0")
        assert response.status_code == 200
        body = response.json()
        assert body["start_padding"] == 2
        assert body["days_in_month"] == 31
        assert body["burnout_days"] == ["2025-01-20"]

    def test_month_grid_rolls_over(self, api_client):
        body = api_client.get("/v1/calendar/2025/months/12").json()
        assert (body["year"], body["month_index"]) == (2026, 0)

    def test_month_index_out_of_range(self, api_client):
        assert api_client.get("/v1/calendar/2025/months/100000").status_code == 422
        assert api_client.get("/v1/calendar/2025/months/-13").status_code == 422
        body = api_client.get("/v1/calendar/9998/months/23").json()
        assert (body["year"], body["month_index"]) == (9999, 11)

    def test_cyclic_year(self, api_client):
        body = api_client.get("/v1/calendar/2026/cyclic").json()
        assert body["week_count"] == 53
        assert body["has_prep_week"] is True
        prep = body["quarters"][3]["weeks"][-1]
        assert prep["type"] == "prep"
        assert prep["days"][0] == "2026-12-28"

    def test_year_out_of_range(self, api_client):
        assert api_client.get("/v1/calendar/1/cyclic").status_code == 422
        assert api_client.get("/v1/calendar/9999/cyclic").status_code == 422

    def test_summary(self, seeded):
        body = seeded.get("/v1/calendar/2025/summary").json()
        assert body["chain_ids"] == ["d"]
        assert body["chain_count"] == 1
        assert body["burnout_days"] == ["2025-01-20"]

    def test_day_detail(self, seeded):
        body = seeded.get("/v1/calendar/days/2025-01-20").json()
        assert body["burnout"] is True
        assert [e["id"] for e in body["events"]] == ["a", "c", "b"]

    def test_summary_respects_category_filter(self, seeded):
        seeded.put("/v1/settings", json={"active_category_ids": ["work"]})
        body = seeded.get("/v1/calendar/2025/summary").json()
        assert body["chain_ids"] == ["d"]
        assert body["burnout_days"] == []


class TestViews:
    def test_horizontal(self, seeded):
        response = seeded.get("/v1/views/2025/horizontal", params={"today": "2025-01-19"})
        assert response.status_code == 200
        rows = response.json()
        assert len(rows) == 12
        assert rows[0]["label"] == "January"
        assert [bar["event_id"] for bar in rows[0]["bars"]] == ["a", "c", "b"]
        assert rows[0]["days"][17]["faded"] is True

    def test_vertical(self, api_client):
        blocks = api_client.get("/v1/views/2025/vertical").json()
        assert [len(block["columns"]) for block in blocks] == [6, 6]
        assert blocks[0]["total_rows"] == 37

    def test_cyclic(self, api_client):
        quarters = api_client.get("/v1/views/2025/cyclic").json()
        assert len(quarters) == 4
        assert quarters[0]["month_spans"][0] == {"label": "December", "span": 1}
        assert quarters[0]["weeks"][12]["label"] == "Reset Week"

    def test_unknown_layout(self, api_client):
        response = api_client.get("/v1/views/2025/spiral")
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_REQUEST"


class TestPreferences:
    def test_default_settings(self, api_client):
        body = api_client.get("/v1/settings").json()
        assert body["view_mode"] == "weekday"
        assert body["active_category_ids"] == []

    def test_update_settings(self, api_client):
        payload = {"view_mode": "numeric", "layout": "cyclic", "language": "it", "active_category_ids": ["work"]}
        assert api_client.put("/v1/settings", json=payload).status_code == 200
        body = api_client.get("/v1/settings").json()
        assert body["layout"] == "cyclic"
        assert body["language"] == "it"

    def test_invalid_settings(self, api_client):
        assert api_client.put("/v1/settings", json={"view_mode": "sideways"}).status_code == 422

    def test_categories_follow_language(self, api_client):
        api_client.put("/v1/settings", json={"language": "it"})
        labels = [c["label"] for c in api_client.get("/v1/categories").json()]
        assert "Viaggi" in labels

    def test_replace_categories(self, api_client):
        payload = [{"id": "deep", "label": "Deep Work", "color": "#123456"}]
        assert api_client.put("/v1/categories", json=payload).status_code == 200
        assert api_client.get("/v1/categories").json() == payload

    def test_duplicate_categories(self, api_client):
        payload = [
            {"id": "deep", "label": "Deep Work", "color": "#123456"},
            {"id": "deep", "label": "Again", "color": "#654321"},
        ]
        response = api_client.put("/v1/categories", json=payload)
        assert response.status_code == 422
        assert response.json()["detail"]["details"] == ["deep"]

    def test_bad_color(self, api_client):
        payload = [{"id": "deep", "label": "Deep Work", "color": "blue"}]
        assert api_client.put("/v1/categories", json=payload).status_code == 422


class TestTransfers:
    def test_import(self, api_client, db_path, make_event):
        imported = [
            make_event("graph-1", (2025, 1, 6), (2025, 1, 7), category_id="other"),
            make_event("graph-2", (2025, 2, 1), (2025, 1, 1), category_id="other"),
        ]
        with patch("api.routes.transfers.fetch_events", AsyncMock(return_value=imported)):
            response = api_client.post("/v1/import/2025")

        assert response.status_code == 200
        body = response.json()
        assert body["imported"] == 1
        assert list(body["rejected"]) == ["graph-2"]
        assert [e["id"] for e in api_client.get("/v1/events").json()] == ["graph-1"]
        assert request_logs(db_path) == [("/v1/import/2025", 200, None, 1)]

    def test_import_failure(self, api_client, db_path):
        failing = AsyncMock(side_effect=CalendarImportError("No calendar named 'Work'"))
        with patch("api.routes.transfers.fetch_events", failing):
            response = api_client.post("/v1/import/2025")

        assert response.status_code == 502
        assert response.json()["detail"]["code"] == "IMPORT_FAILED"
        assert request_logs(db_path) == [("/v1/import/2025", 502, "IMPORT_FAILED", None)]

    def test_export(self, seeded, db_path):
        response = seeded.get("/v1/export/2025")
        assert response.status_code == 200
        assert 'filename="year_plan_2025.xlsx"' in response.headers["content-disposition"]

        workbook = load_workbook(BytesIO(response.content))
        assert workbook.sheetnames == ["Year Plan", "Cyclic", "Events"]
        assert request_logs(db_path) == [("/v1/export/2025", 200, None, 4)]
