#!/usr/bin/env python3
"""
Export the year plan (horizontal grid, cyclic weeks, event detail) to Excel.

Usage:
    uv run python src/scripts/export_year_plan.py --year 2025 [--output plan.xlsx]
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.aggregation import detect_chains
from core.database import create_tables, get_connection, load_planner_state
from services.reports import export_year_plan


def main():
    parser = argparse.ArgumentParser(description="Export the year plan to an Excel workbook")
    parser.add_argument("--year", type=int, default=date.today().year, help="Year to export. Defaults to this year.")
    parser.add_argument("--output", type=Path, help="Output path. Defaults to output/plans/year_plan_<year>.xlsx")
    args = parser.parse_args()

    try:
        conn = get_connection()
        try:
            create_tables(conn)
            events, categories, settings = load_planner_state(conn)
        finally:
            conn.close()

        print(f"Exporting {len(events)} event(s) for {args.year}...")
        chains = detect_chains(events)
        if chains:
            print(f"  {len(chains)} event(s) last 14 days or more; consider recovery periods")

        output_path = export_year_plan(args.year, events, categories, settings, args.output)
        print(f"\nYear plan exported: {output_path}")
    except Exception as e:
        print(f"\nError: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
