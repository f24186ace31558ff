"""
Pytest configuration and shared fixtures.
"""

import sys
from datetime import datetime
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core import config
from core.database import create_tables, get_connection
from models.events import Event

TEST_API_KEY = "test-api-key"


@pytest.fixture
def make_event():
    """Factory for events with date-only defaults."""

    def _make(event_id="evt", start=(2025, 1, 15), end=(2025, 1, 25), category_id="work", title=None, notes=""):
        return Event(
            id=event_id,
            title=title if title is not None else f"Event {event_id}",
            start_date=datetime(*start),
            end_date=datetime(*end),
            category_id=category_id,
            notes=notes,
        )

    return _make


@pytest.fixture
def sample_event(make_event):
    """Sample event matching the seeded 'Q1 Vision Sprint'."""
    return make_event("1", (2025, 1, 15), (2025, 1, 25), title="Q1 Vision Sprint")


@pytest.fixture
def sample_events(make_event):
    """Three events overlapping on 2025-01-20 plus one long-running trip."""
    return [
        make_event("a", (2025, 1, 15), (2025, 1, 25), "work"),
        make_event("b", (2025, 1, 20), (2025, 1, 20), "personal"),
        make_event("c", (2025, 1, 18), (2025, 1, 22), "travel"),
        make_event("d", (2025, 3, 1), (2025, 3, 20), "travel"),
    ]


@pytest.fixture
def db_path(tmp_path, monkeypatch):
    """Point the planner database at a temporary file."""
    path = tmp_path / "db" / "heimdall-test.db"
    monkeypatch.setattr(config, "DB_PATH", path)
    return path


@pytest.fixture
def db_conn(db_path):
    """Connection to a fresh database with all tables created."""
    conn = get_connection()
    create_tables(conn)
    yield conn
    conn.close()


@pytest.fixture
def api_client(db_path, monkeypatch):
    """TestClient with a temp database and a known API key."""
    from fastapi.testclient import TestClient

    from api.main import app

    monkeypatch.setattr(config, "HEIMDALL_API_KEY", TEST_API_KEY)
    with TestClient(app) as client:
        client.headers.update({"X-API-Key": TEST_API_KEY})
        yield client
