"""
Configuration constants and environment setup.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# =============================================================================
# PATHS
# =============================================================================

PROJECT_ROOT = Path(__file__).parent.parent.parent
DB_PATH = Path(os.environ.get("TABLET_DB_PATH", PROJECT_ROOT / "data" / "db" / "tablet-display.db"))
DIST_DIR = Path(os.environ.get("TABLET_DIST_DIR", PROJECT_ROOT / "dist"))

# =============================================================================
# DISPLAY CONFIGURATION
# =============================================================================

DISPLAY_TIMEZONE = os.environ.get("DISPLAY_TIMEZONE", "America/Los_Angeles")

DEFAULT_CALENDAR_TITLE = "Weekly Calendar"
DEFAULT_START_HOUR = 8
DEFAULT_END_HOUR = 21
HOUR_HEIGHT_PX = 80  # Height of one hour row in the calendar grid

VIEW_MODES = {"1day": 1, "3day": 3, "week": 7}

# Client refetch interval for the event list, also used as settings cache TTL
EVENTS_REFRESH_SECONDS = 300
SETTINGS_CACHE_TTL_SECONDS = int(os.environ.get("SETTINGS_CACHE_TTL_SECONDS", "300"))

# =============================================================================
# EVENT CONFIGURATION
# =============================================================================

EVENT_COLORS = (
    "red", "cyan", "blue", "green", "yellow",
    "gray", "purple", "pink", "orange", "indigo",
)
DEFAULT_EVENT_COLOR = "blue"

DEFAULT_EVENT_MINUTES = 60  # Assumed duration when end_time is missing
IMPORT_CHUNK_SIZE = 50

# =============================================================================
# GOOGLE CALENDAR (from environment)
# =============================================================================

GOOGLE_CALENDAR_API_BASE = "https://www.googleapis.com/calendar/v3"
GOOGLE_TOKEN_URL = "https://oauth2.googleapis.com/token"
GOOGLE_CALENDAR_SCOPE = "https://www.googleapis.com/auth/calendar.readonly"

GOOGLE_SERVICE_ACCOUNT_EMAIL = os.environ.get("GOOGLE_SERVICE_ACCOUNT_EMAIL", "")
# Keys pasted into .env usually carry literal "\n" sequences
GOOGLE_SERVICE_ACCOUNT_PRIVATE_KEY = os.environ.get(
    "GOOGLE_SERVICE_ACCOUNT_PRIVATE_KEY", ""
).replace("\\n", "\n")
GOOGLE_CALENDAR_ID = os.environ.get("GOOGLE_CALENDAR_ID", "")
GOOGLE_API_KEY = os.environ.get("GOOGLE_API_KEY", "")

GOOGLE_FETCH_DAYS = 30
GOOGLE_MAX_RESULTS = 250
TOKEN_LIFETIME_SECONDS = 3600
TOKEN_REFRESH_BUFFER_SECONDS = 300  # Reuse a cached token only with 5+ minutes left

# =============================================================================
# DASHBOARD DATA
# =============================================================================

WEATHER_LAT = os.environ.get("WEATHER_LAT", "47.6062")
WEATHER_LON = os.environ.get("WEATHER_LON", "-122.3321")
WEATHER_TIMEZONE = os.environ.get("WEATHER_TIMEZONE", DISPLAY_TIMEZONE)
HTTP_TIMEOUT_SECONDS = float(os.environ.get("HTTP_TIMEOUT_SECONDS", "15"))

# =============================================================================
# API CONFIGURATION
# =============================================================================

API_HOST = os.environ.get("API_HOST", "0.0.0.0")
API_PORT = int(os.environ.get("PORT", "3001"))
API_DEBUG = os.environ.get("API_DEBUG", "false").lower() == "true"
API_VERSION = "1.0.0"
