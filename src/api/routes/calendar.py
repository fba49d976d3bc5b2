"""Calendar view endpoint: resolved and laid-out events for the visible days."""

import asyncio
import sqlite3
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query, status

from api.dependencies import api_error, get_db, get_google_client, get_settings
from api.models.responses import ErrorCodes
from core.config import DISPLAY_TIMEZONE
from services.calendar import (
    build_calendar_view,
    calendar_view_to_dict,
    load_events,
    shift_anchor,
    visible_days,
)
from services.google_calendar import GoogleCalendarClient

router = APIRouter(prefix="/api")


def parse_anchor_date(date_str: str | None, today: date) -> date:
    """Parse the anchor date query parameter (defaults to today)."""
    if not date_str:
        return today
    try:
        return datetime.strptime(date_str, "%Y-%m-%d").date()
    except ValueError:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "Invalid date format",
            ErrorCodes.INVALID_REQUEST,
            ["Expected format: YYYY-MM-DD"],
        )


@router.get("/calendar")
async def calendar_view(
    view: str = Query(default="week", description="1day, 3day or week"),
    date_str: str | None = Query(default=None, alias="date", description="Anchor date (YYYY-MM-DD)"),
    include_google: bool = Query(default=True),
    conn: sqlite3.Connection = Depends(get_db),
    settings: dict = Depends(get_settings),
    client: GoogleCalendarClient = Depends(get_google_client),
):
    """
    Events for every visible day, split into all-day and timed events.

    Timed events carry column / total_columns and pixel geometry so
    simultaneous events render side by side.
    """
    tz = ZoneInfo(DISPLAY_TIMEZONE)
    today = datetime.now(tz).date()
    anchor = parse_anchor_date(date_str, today)

    try:
        days = visible_days(view, anchor)
    except ValueError as e:
        raise api_error(status.HTTP_400_BAD_REQUEST, "Invalid view mode", ErrorCodes.INVALID_REQUEST, [str(e)])

    google_events = []
    calendar_id = settings.get("google_calendar_id")
    if include_google and calendar_id:
        time_min = datetime.combine(days[0], time.min, tzinfo=tz)
        time_max = datetime.combine(days[-1] + timedelta(days=1), time.min, tzinfo=tz)
        google_events = await client.fetch_events(calendar_id, time_min, time_max)

    events = await asyncio.to_thread(load_events, conn, google_events)
    result = calendar_view_to_dict(build_calendar_view(events, view, anchor, settings, today))
    result["previous"] = shift_anchor(view, anchor, -1).isoformat()
    result["next"] = shift_anchor(view, anchor, 1).isoformat()
    return result
