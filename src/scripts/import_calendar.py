#!/usr/bin/env python3
"""
Import a year of events from an MS365 calendar into the planner database.

Fetches events overlapping the year, validates them against the stored
categories, upserts the valid ones and lists the rejected ones.

Usage:
    uv run python src/scripts/import_calendar.py --year 2025 [--user someone@example.com] [--calendar Calendar]
"""

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.database import create_tables, get_connection, load_planner_state, upsert_event
from core.validation import validate_events
from services.calendar import CalendarImportError, fetch_events


async def main(year: int, user_id: str | None = None, calendar_name: str | None = None) -> int:
    """Main entry point. Returns the number of imported events."""
    print(f"Importing events for {year}...")
    events = await fetch_events(year, user_id=user_id, calendar_name=calendar_name)

    conn = get_connection()
    try:
        create_tables(conn)
        _, categories, _ = load_planner_state(conn)
        rejected = validate_events(events, [c["id"] for c in categories])

        imported = 0
        for event in events:
            if event.id in rejected:
                continue
            upsert_event(conn, event)
            imported += 1
    finally:
        conn.close()

    print(f"\nImported {imported} event(s)")
    if rejected:
        print(f"Rejected {len(rejected)} event(s):")
        for event_id, message in sorted(rejected.items()):
            print(f"  - {event_id}: {message}")

    print("\nDone!")
    return imported


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import calendar events for a year")
    parser.add_argument("--year", type=int, default=date.today().year, help="Year to import. Defaults to this year.")
    parser.add_argument("--user", help="Graph user id or UPN. Defaults to IMPORT_USER_ID.")
    parser.add_argument("--calendar", help="Calendar name. Defaults to IMPORT_CALENDAR_NAME.")
    args = parser.parse_args()

    try:
        asyncio.run(main(args.year, args.user, args.calendar))
    except CalendarImportError as e:
        print(f"\nImport failed: {e}")
        sys.exit(1)
