#!/usr/bin/env python3
"""
List a user's MS365 calendars, marking the one the importer will use.

Usage:
    uv run python src/scripts/list_calendars.py [--user someone@example.com]
"""

import argparse
import asyncio
import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import IMPORT_CALENDAR_NAME, IMPORT_USER_ID
from core.graph_client import get_graph_client, graph_credentials_configured


async def main(user_id: str):
    """List the user's calendars."""
    graph = get_graph_client()

    print(f"Fetching calendars for {user_id}...\n")
    calendars_response = await graph.users.by_user_id(user_id).calendars.get()
    calendars = calendars_response.value if calendars_response.value else []

    print(f"Found {len(calendars)} calendar(s)")
    print("=" * 80)

    wanted = IMPORT_CALENDAR_NAME.strip().lower()
    for cal in calendars:
        marker = " (import source)" if cal.name and cal.name.strip().lower() == wanted else ""
        print(f"\n  - {cal.name}{marker}")
        print(f"    ID: {cal.id}")
        if cal.color:
            print(f"    Color: {cal.color}")

    print("\nDone!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="List calendars for the import user")
    parser.add_argument("--user", default=IMPORT_USER_ID, help="Graph user id or UPN. Defaults to IMPORT_USER_ID.")
    args = parser.parse_args()

    if not graph_credentials_configured():
        print("MS Graph credentials are not configured")
        sys.exit(1)
    if not args.user:
        print("No user given and IMPORT_USER_ID is not set")
        sys.exit(1)

    asyncio.run(main(args.user))
