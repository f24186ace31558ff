"""
SQLite persistence for events, categories and settings.
"""

import json
import sqlite3

from core import config
from core.config import DEFAULT_CATEGORIES, DEFAULT_LANGUAGE
from models.events import CategoryConfig, Event
from models.settings import CalendarSettings

SETTINGS_KEY = "calendar_settings"


def get_connection() -> sqlite3.Connection:
    """Get a database connection."""
    config.DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    # FastAPI may run a dependency and its route on different worker threads
    return sqlite3.connect(config.DB_PATH, check_same_thread=False)


def create_tables(conn: sqlite3.Connection) -> None:
    """Create all tables if they don't exist."""
    conn.execute("PRAGMA foreign_keys = ON")
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS events (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            start_date TEXT NOT NULL,
            end_date TEXT NOT NULL,
            category_id TEXT NOT NULL,
            notes TEXT
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS categories (
            id TEXT PRIMARY KEY,
            label TEXT NOT NULL,
            color TEXT NOT NULL,
            position INTEGER NOT NULL DEFAULT 0
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
    """)

    # API request logging
    cursor.execute("""
        CREATE TABLE IF NOT EXISTS api_requests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT UNIQUE NOT NULL,
            timestamp TEXT NOT NULL,
            endpoint TEXT NOT NULL,
            method TEXT NOT NULL,
            client_ip TEXT,
            year INTEGER,
            status_code INTEGER NOT NULL,
            error_code TEXT,
            error_message TEXT,
            processing_time_ms INTEGER NOT NULL,
            events_count INTEGER
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS api_request_details (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT NOT NULL,
            detail_type TEXT NOT NULL CHECK(detail_type IN ('validation_error', 'event_imported', 'warning')),
            message TEXT NOT NULL,
            FOREIGN KEY (request_id) REFERENCES api_requests(request_id)
        )
    """)

    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_events_start_date ON events(start_date)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_request_details_request ON api_request_details(request_id)"
    )

    conn.commit()


# =============================================================================
# EVENTS
# =============================================================================


def _event_params(event: Event) -> tuple:
    return (
        event.id,
        event.title,
        event.start_date.isoformat(),
        event.end_date.isoformat(),
        event.category_id,
        event.notes or "",
    )


def _row_to_event(row: tuple) -> Event:
    event_id, title, start_date, end_date, category_id, notes = row
    return Event.from_dict(
        {
            "id": event_id,
            "title": title,
            "start_date": start_date,
            "end_date": end_date,
            "category_id": category_id,
            "notes": notes or "",
        }
    )


def load_events(conn: sqlite3.Connection) -> list[Event]:
    """
    Load all events ordered by start date.

    Rows whose dates no longer parse are skipped with a warning rather than
    failing the whole load.
    """
    cursor = conn.cursor()
    cursor.execute(
        "SELECT id, title, start_date, end_date, category_id, notes "
        "FROM events ORDER BY start_date ASC"
    )

    events = []
    for row in cursor.fetchall():
        try:
            events.append(_row_to_event(row))
        except ValueError as e:
            print(f"  Skipping unreadable event {row[0]}: {e}")
    return events


def get_event(conn: sqlite3.Connection, event_id: str) -> Event | None:
    """Fetch a single event by id."""
    cursor = conn.cursor()
    cursor.execute(
        "SELECT id, title, start_date, end_date, category_id, notes FROM events WHERE id = ?",
        (event_id,),
    )
    row = cursor.fetchone()
    return _row_to_event(row) if row else None


def upsert_event(conn: sqlite3.Connection, event: Event) -> None:
    """Insert or update an event (last write wins)."""
    conn.execute(
        """
        INSERT INTO events (id, title, start_date, end_date, category_id, notes)
        VALUES (?, ?, ?, ?, ?, ?)
        ON CONFLICT (id) DO UPDATE SET
            title = excluded.title,
            start_date = excluded.start_date,
            end_date = excluded.end_date,
            category_id = excluded.category_id,
            notes = excluded.notes
        """,
        _event_params(event),
    )
    conn.commit()


def save_events(conn: sqlite3.Connection, events: list[Event]) -> None:
    """Replace the stored events with the given collection."""
    cursor = conn.cursor()
    cursor.execute("DELETE FROM events")
    cursor.executemany(
        """
        INSERT INTO events (id, title, start_date, end_date, category_id, notes)
        VALUES (?, ?, ?, ?, ?, ?)
        """,
        [_event_params(event) for event in events],
    )
    conn.commit()


def delete_event(conn: sqlite3.Connection, event_id: str) -> bool:
    """Delete an event. Returns False if it did not exist."""
    cursor = conn.cursor()
    cursor.execute("DELETE FROM events WHERE id = ?", (event_id,))
    conn.commit()
    return cursor.rowcount > 0


# =============================================================================
# SETTINGS & CATEGORIES
# =============================================================================


def load_settings(conn: sqlite3.Connection) -> CalendarSettings:
    """Load settings, falling back to defaults if missing or unreadable."""
    cursor = conn.cursor()
    cursor.execute("SELECT value FROM settings WHERE key = ?", (SETTINGS_KEY,))
    row = cursor.fetchone()
    if not row:
        return CalendarSettings()

    try:
        data = json.loads(row[0])
    except json.JSONDecodeError:
        print("  Stored settings are not valid JSON, using defaults")
        return CalendarSettings()

    if not isinstance(data, dict):
        return CalendarSettings()
    return CalendarSettings.from_dict(data)


def save_settings(conn: sqlite3.Connection, settings: CalendarSettings) -> None:
    conn.execute(
        """
        INSERT INTO settings (key, value) VALUES (?, ?)
        ON CONFLICT (key) DO UPDATE SET value = excluded.value
        """,
        (SETTINGS_KEY, json.dumps(settings.to_dict())),
    )
    conn.commit()


def load_categories(
    conn: sqlite3.Connection, language: str = DEFAULT_LANGUAGE
) -> list[CategoryConfig]:
    """Load categories in display order, or the language defaults if none are stored."""
    cursor = conn.cursor()
    cursor.execute("SELECT id, label, color FROM categories ORDER BY position, id")
    rows = cursor.fetchall()

    if not rows:
        defaults = DEFAULT_CATEGORIES.get(language, DEFAULT_CATEGORIES[DEFAULT_LANGUAGE])
        return [CategoryConfig(**category) for category in defaults]

    return [CategoryConfig(id=row[0], label=row[1], color=row[2]) for row in rows]


def load_planner_state(
    conn: sqlite3.Connection,
) -> tuple[list[Event], list[CategoryConfig], CalendarSettings]:
    """
    Load the snapshot a render pass needs.

    Settings come back with every category active if none was selected.
    """
    settings = load_settings(conn)
    categories = load_categories(conn, settings.language)
    settings = settings.with_categories(c["id"] for c in categories)
    return load_events(conn), categories, settings


def save_categories(conn: sqlite3.Connection, categories: list[CategoryConfig]) -> None:
    """Replace the stored categories, keeping list order as display order."""
    cursor = conn.cursor()
    cursor.execute("DELETE FROM categories")
    cursor.executemany(
        "INSERT INTO categories (id, label, color, position) VALUES (?, ?, ?, ?)",
        [
            (category["id"], category["label"], category["color"], position)
            for position, category in enumerate(categories)
        ],
    )
    conn.commit()
