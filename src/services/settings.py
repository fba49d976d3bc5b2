"""
Display settings with defaults and a TTL read cache.
"""

import sqlite3

from core.cache import TTLCache
from core.config import (
    DEFAULT_CALENDAR_TITLE,
    DEFAULT_END_HOUR,
    DEFAULT_START_HOUR,
    EVENTS_REFRESH_SECONDS,
    GOOGLE_API_KEY,
    GOOGLE_CALENDAR_ID,
    SETTINGS_CACHE_TTL_SECONDS,
)
from core.database import fetch_settings, save_settings

DEFAULT_SETTINGS = {
    "calendar_title": DEFAULT_CALENDAR_TITLE,
    "calendar_start_hour": DEFAULT_START_HOUR,
    "calendar_end_hour": DEFAULT_END_HOUR,
    "google_calendar_id": None,
    "google_api_key": None,
}

_CACHE_KEY = "settings"


def effective_settings(row: dict | None) -> dict:
    """Overlay a stored settings row on the defaults; None keeps the default."""
    settings = dict(DEFAULT_SETTINGS)
    for key, value in (row or {}).items():
        if key in settings and value is not None and value != "":
            settings[key] = value
    # Environment config wins when the row does not name a calendar
    if not settings["google_calendar_id"] and GOOGLE_CALENDAR_ID:
        settings["google_calendar_id"] = GOOGLE_CALENDAR_ID
    if not settings["google_api_key"] and GOOGLE_API_KEY:
        settings["google_api_key"] = GOOGLE_API_KEY
    settings["refresh_interval_seconds"] = EVENTS_REFRESH_SECONDS
    return settings


class SettingsService:
    """Reads settings through a TTL cache; writes merge and invalidate it."""

    def __init__(self, cache: TTLCache | None = None):
        self.cache = cache or TTLCache(ttl_seconds=SETTINGS_CACHE_TTL_SECONDS)

    def get(self, conn: sqlite3.Connection) -> dict:
        return dict(
            self.cache.get_or_load(_CACHE_KEY, lambda: effective_settings(fetch_settings(conn)))
        )

    def save(self, conn: sqlite3.Connection, payload: dict) -> dict:
        saved = save_settings(conn, payload)
        self.cache.clear()
        return effective_settings(saved)

    def clear(self):
        self.cache.clear()
