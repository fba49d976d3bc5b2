#!/usr/bin/env python3
"""
Import a CSV calendar export into the local events table.

Every row becomes a one-time event in the upcoming week (Monday through
Sunday), keeping the weekday and times of its original start. Existing local
events are replaced.

Usage:
    python src/scripts/import_calendar_csv.py calendar_export.csv
"""

import argparse
import csv
import re
import sys
from datetime import date, datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH, DISPLAY_TIMEZONE
from core.database import (
    create_tables,
    delete_all_calendar_events,
    get_connection,
    insert_calendar_events,
)
from models.events import normalize_color

_TIME_RE = re.compile(r"^(\d{2}:\d{2})")


# =============================================================================
# PARSING
# =============================================================================


def get_upcoming_monday(today: date) -> date:
    """Today if it is a Monday, otherwise the next Monday."""
    return today + timedelta(days=(7 - today.weekday()) % 7)


def extract_time(value: str | None) -> str | None:
    """
    Pull 'HH:MM' out of an ISO timestamp or a 'HH:MM[:SS]' string.

    '2024-03-05T09:30:00Z' -> '09:30', '14:15:00' -> '14:15'
    """
    if not value:
        return None
    working = value.strip()
    if not working:
        return None
    if "T" in working:
        working = working.split("T", 1)[1]
    elif " " in working:
        # 'YYYY-MM-DD HH:MM:SS' keeps the time part
        working = working.split(" ", 1)[1]
    working = working.replace("Z", "")
    m = _TIME_RE.match(working)
    return m.group(1) if m else None


def parse_date(value: str | None, tz: ZoneInfo) -> date | None:
    """Calendar date of an ISO date/datetime, in the display timezone."""
    if not value or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(tz)
    return parsed.date()


def parse_rows(rows, week_start: date, tz: ZoneInfo) -> tuple[list[dict], list[dict]]:
    """
    Map CSV rows onto the week starting at `week_start`.

    Returns:
        Tuple of (events, skipped) where skipped entries carry title and reason
    """
    events = []
    skipped = []

    for row in rows:
        title = (row.get("title") or "").strip()
        if not title:
            continue

        start_date = parse_date(row.get("start_time"), tz) or parse_date(row.get("created_date"), tz)
        if start_date is None:
            skipped.append({"title": title, "reason": "no valid date"})
            continue

        target_date = week_start + timedelta(days=start_date.weekday())
        is_all_day = (row.get("is_all_day") or "").strip().lower() == "true"

        events.append(
            {
                "title": title,
                "color": normalize_color(row.get("color")),
                "is_all_day": is_all_day,
                "is_recurring": False,
                "start_time": None if is_all_day else extract_time(row.get("start_time")),
                "end_time": None if is_all_day else extract_time(row.get("end_time")),
                "specific_date": target_date.isoformat(),
                "days_of_week": None,
            }
        )

    return events, skipped


# =============================================================================
# MAIN
# =============================================================================


def main(csv_path: Path, db_path: Path = DB_PATH, today: date | None = None) -> int:
    """Import the CSV, replacing all local events. Returns the exit status."""
    tz = ZoneInfo(DISPLAY_TIMEZONE)
    week_start = get_upcoming_monday(today or datetime.now(tz).date())
    print(f"Mapping events to week starting {week_start.isoformat()}")

    with open(csv_path, newline="", encoding="utf-8") as f:
        rows = [row for row in csv.DictReader(f) if any((v or "").strip() for v in row.values())]

    events, skipped = parse_rows(rows, week_start, tz)
    if not events:
        print("No events parsed from CSV. Aborting.", file=sys.stderr)
        return 1

    print(f"Parsed {len(events)} events. Skipped {len(skipped)}. Clearing existing calendar_events...")

    conn = get_connection(db_path)
    try:
        create_tables(conn)
        delete_all_calendar_events(conn)
        inserted = insert_calendar_events(conn, events)
    finally:
        conn.close()

    print(f"Import complete. Inserted {inserted} events.")
    if skipped:
        print("Skipped rows:")
        for s in skipped:
            print(f"- {s['title']}: {s['reason']}")
    return 0


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Import a CSV calendar export")
    parser.add_argument("csv_path", type=Path, help="Path to the CSV file")
    parser.add_argument("--db", type=Path, default=DB_PATH, help="SQLite database path")
    args = parser.parse_args()

    sys.exit(main(args.csv_path, args.db))
