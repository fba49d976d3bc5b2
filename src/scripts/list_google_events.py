#!/usr/bin/env python3
"""
Check the Google Calendar connection and list upcoming events.

Usage:
    python src/scripts/list_google_events.py [calendar_id]
"""

import asyncio
import sys
from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

import httpx

from core.config import (
    DISPLAY_TIMEZONE,
    GOOGLE_API_KEY,
    GOOGLE_CALENDAR_ID,
    HTTP_TIMEOUT_SECONDS,
)
from services.google_calendar import GoogleCalendarClient, build_token_provider, default_window


async def main(calendar_id: str) -> int:
    """Test the connection, then print the next events."""
    if not calendar_id:
        print("No calendar ID given and GOOGLE_CALENDAR_ID is not set.")
        return 1

    tz = ZoneInfo(DISPLAY_TIMEZONE)

    async with httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS) as http_client:
        client = GoogleCalendarClient(
            http_client,
            token_provider=build_token_provider(http_client),
            api_key=GOOGLE_API_KEY,
            tz=tz,
        )

        print(f"Testing calendar {calendar_id} (auth: {client.auth_method or 'none'})...\n")
        result = await client.test_connection(calendar_id)
        if not result["success"]:
            print(f"Connection failed: {result['error']}")
            return 1
        print(f"Connected to: {result['calendarName']}")

        time_min, time_max = default_window(datetime.now(tz))
        events = await client.fetch_events(calendar_id, time_min, time_max)

    print(f"\nFound {len(events)} events\n")
    print("=" * 80)

    for event in events:
        when = "all day" if event["is_all_day"] else f"{event['start_time']} - {event['end_time']}"
        print(f"{event['specific_date']}  {when:<15}  {event['title']}")
        if event.get("location"):
            print(f"    Location: {event['location']}")

    print("\nDone!")
    return 0


if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else GOOGLE_CALENDAR_ID
    sys.exit(asyncio.run(main(target)))
