#!/usr/bin/env python3
"""
Create the Heimdall SQLite database with events, categories, settings and
API logging tables.

Usage:
    uv run python src/scripts/init_db.py [--seed]
"""

import argparse
import sys
from datetime import datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core import config
from core.database import create_tables, get_connection, load_events, save_events
from models.events import Event

SAMPLE_EVENTS = [
    Event(
        id="1",
        title="Q1 Vision Sprint",
        start_date=datetime(2025, 1, 15),
        end_date=datetime(2025, 1, 25),
        category_id="work",
    ),
    Event(
        id="2",
        title="Alpine Recovery",
        start_date=datetime(2025, 2, 10),
        end_date=datetime(2025, 2, 17),
        category_id="travel",
    ),
]


def create_database(seed: bool = False):
    """Create the database and tables if they don't exist."""
    conn = get_connection()
    try:
        create_tables(conn)
        if seed:
            if load_events(conn):
                print("Database already has events, skipping seed")
            else:
                save_events(conn, SAMPLE_EVENTS)
                print(f"Seeded {len(SAMPLE_EVENTS)} sample events")
    finally:
        conn.close()
    print(f"Database created successfully at: {config.DB_PATH}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create the Heimdall database")
    parser.add_argument(
        "--seed",
        action="store_true",
        help="Insert sample events when the events table is empty",
    )
    args = parser.parse_args()

    create_database(args.seed)
