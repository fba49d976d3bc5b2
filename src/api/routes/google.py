"""Server-side Google Calendar endpoints."""

import logging
from datetime import datetime
from zoneinfo import ZoneInfo

from fastapi import APIRouter, Depends, Query

from api.dependencies import get_google_client, get_settings
from api.models.responses import ConnectionTestResponse, GoogleEventsResponse
from core.config import DISPLAY_TIMEZONE
from services.google_calendar import GoogleCalendarClient, default_window

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/google-calendar-events", response_model=GoogleEventsResponse)
async def google_calendar_events(
    settings: dict = Depends(get_settings),
    client: GoogleCalendarClient = Depends(get_google_client),
):
    """Google events from local midnight today through the next 30 days."""
    calendar_id = settings.get("google_calendar_id")
    if not calendar_id:
        return GoogleEventsResponse(events=[], error="No calendar ID configured")
    if client.auth_method is None:
        return GoogleEventsResponse(events=[], error="Service account not configured")

    time_min, time_max = default_window(datetime.now(ZoneInfo(DISPLAY_TIMEZONE)))
    events = await client.fetch_events(calendar_id, time_min, time_max)
    logger.info("Fetched %d Google Calendar events", len(events))
    return GoogleEventsResponse(events=events)


@router.get("/google-calendar/test", response_model=ConnectionTestResponse)
async def test_google_calendar(
    calendar_id: str | None = Query(default=None),
    settings: dict = Depends(get_settings),
    client: GoogleCalendarClient = Depends(get_google_client),
):
    """Check the configured (or given) calendar is readable."""
    result = await client.test_connection(calendar_id or settings.get("google_calendar_id") or "")
    return ConnectionTestResponse(**result)
