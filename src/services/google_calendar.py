"""
Read-only Google Calendar source using service account authentication.

The calendar must be shared with the service account email. When no service
account is configured, a Google API key can still read public calendars.
"""

import logging
import time
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from urllib.parse import quote
from zoneinfo import ZoneInfo

import httpx
from google.auth import crypt, jwt

from core.cache import AccessTokenCache
from core.config import (
    DISPLAY_TIMEZONE,
    GOOGLE_CALENDAR_API_BASE,
    GOOGLE_CALENDAR_SCOPE,
    GOOGLE_FETCH_DAYS,
    GOOGLE_MAX_RESULTS,
    GOOGLE_SERVICE_ACCOUNT_EMAIL,
    GOOGLE_SERVICE_ACCOUNT_PRIVATE_KEY,
    GOOGLE_TOKEN_URL,
    TOKEN_LIFETIME_SECONDS,
    TOKEN_REFRESH_BUFFER_SECONDS,
)

logger = logging.getLogger(__name__)

JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"

GOOGLE_COLOR_MAP = {
    "1": "blue", "2": "green", "3": "purple", "4": "pink",
    "5": "yellow", "6": "orange", "7": "cyan", "8": "gray",
    "9": "blue", "10": "green", "11": "red",
}


class TokenExchangeError(Exception):
    """The OAuth token endpoint rejected the service account assertion."""


# =============================================================================
# NORMALIZATION
# =============================================================================


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def normalize_google_event(item: dict, tz: ZoneInfo) -> dict:
    """
    Convert a Google Calendar API event into the local event row shape.

    All-day events keep their start date; timed events are converted to the
    display timezone for date and HH:MM times. Google events never recur here:
    the API is queried with singleEvents=true so each instance is separate.
    """
    start = item.get("start") or {}
    end = item.get("end") or {}
    is_all_day = bool(start.get("date"))

    start_time = None
    end_time = None
    if is_all_day:
        specific_date = start["date"]
    else:
        start_dt = _parse_datetime(start["dateTime"]).astimezone(tz)
        specific_date = start_dt.strftime("%Y-%m-%d")
        start_time = start_dt.strftime("%H:%M")
        if end.get("dateTime"):
            end_time = _parse_datetime(end["dateTime"]).astimezone(tz).strftime("%H:%M")

    color_id = str(item.get("colorId") or "1")

    return {
        "id": f"gcal_{item.get('id')}",
        "title": item.get("summary") or "(No title)",
        "description": item.get("description") or "",
        "color": GOOGLE_COLOR_MAP.get(color_id, "blue"),
        "is_all_day": is_all_day,
        "is_recurring": False,
        "specific_date": specific_date,
        "start_time": start_time,
        "end_time": end_time,
        "days_of_week": [],
        "excluded_dates": [],
        "source": "google",
        "google_event_id": item.get("id"),
        "google_html_link": item.get("htmlLink"),
        "location": item.get("location") or None,
    }


def default_window(now: datetime, days: int = GOOGLE_FETCH_DAYS) -> tuple[datetime, datetime]:
    """Local midnight today through `days` days later."""
    time_min = now.replace(hour=0, minute=0, second=0, microsecond=0)
    return time_min, time_min + timedelta(days=days)


def _rfc3339(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _json_object(response: httpx.Response) -> dict:
    """Decode a JSON object body; ValueError for anything else (e.g. an HTML portal page)."""
    payload = response.json()
    if not isinstance(payload, dict):
        raise ValueError(f"expected a JSON object, got {type(payload).__name__}")
    return payload


def _error_message(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        payload = None
    if isinstance(payload, dict) and isinstance(payload.get("error"), dict):
        message = payload["error"].get("message")
        if message:
            return str(message)
    return response.text.strip()[:200] or f"HTTP {response.status_code}"


# =============================================================================
# SERVICE ACCOUNT AUTH
# =============================================================================


class ServiceAccountTokenProvider:
    """Exchanges a signed service account JWT for a bearer token, with caching."""

    def __init__(
        self,
        client_email: str,
        private_key: str,
        http_client: httpx.AsyncClient,
        cache: AccessTokenCache | None = None,
        clock: Callable[[], float] = time.time,
    ):
        self.client_email = client_email
        self.private_key = private_key
        self.http_client = http_client
        self.cache = cache or AccessTokenCache(
            refresh_buffer_seconds=TOKEN_REFRESH_BUFFER_SECONDS, clock=clock
        )
        self.clock = clock

    def build_assertion(self) -> str:
        """RS256 JWT asserting the service account identity for the calendar scope."""
        now = int(self.clock())
        signer = crypt.RSASigner.from_string(self.private_key)
        payload = {
            "iss": self.client_email,
            "sub": self.client_email,
            "aud": GOOGLE_TOKEN_URL,
            "scope": GOOGLE_CALENDAR_SCOPE,
            "iat": now,
            "exp": now + TOKEN_LIFETIME_SECONDS,
        }
        token = jwt.encode(signer, payload)
        return token.decode("utf-8") if isinstance(token, bytes) else token

    async def get_access_token(self) -> str:
        """Return a cached token or fetch a new one from the token endpoint."""
        cached = self.cache.get()
        if cached:
            return cached

        try:
            assertion = self.build_assertion()
        except ValueError as e:
            raise TokenExchangeError(f"Invalid service account private key: {e}") from e

        response = await self.http_client.post(
            GOOGLE_TOKEN_URL,
            data={"grant_type": JWT_BEARER_GRANT, "assertion": assertion},
            headers={"Accept": "application/json"},
        )
        if response.status_code != 200:
            raise TokenExchangeError(
                f"Token exchange failed ({response.status_code}): {_error_message(response)}"
            )

        try:
            payload = _json_object(response)
        except ValueError as e:
            raise TokenExchangeError(f"Token response is not valid JSON: {e}") from e
        access_token = payload.get("access_token")
        if not access_token:
            raise TokenExchangeError("Token response is missing access_token")

        self.cache.store(access_token, float(payload.get("expires_in") or TOKEN_LIFETIME_SECONDS))
        logger.info("Obtained Google Calendar access token")
        return access_token

    def invalidate(self):
        self.cache.clear()


# =============================================================================
# CALENDAR CLIENT
# =============================================================================


class GoogleCalendarClient:
    """
    Fetches events from one Google Calendar.

    Uses the service account when one is configured, otherwise the API key
    (public calendars only). Failures are logged and yield no events so the
    dashboard keeps rendering local events.
    """

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        token_provider: ServiceAccountTokenProvider | None = None,
        api_key: str | None = None,
        tz: ZoneInfo | None = None,
    ):
        self.http_client = http_client
        self.token_provider = token_provider
        self.api_key = api_key
        self.tz = tz or ZoneInfo(DISPLAY_TIMEZONE)

    @property
    def auth_method(self) -> str | None:
        if self.token_provider is not None:
            return "service_account"
        if self.api_key:
            return "api_key"
        return None

    async def _get(self, path: str, params: dict | None = None) -> httpx.Response:
        params = dict(params or {})
        headers = {}
        if self.token_provider is not None:
            token = await self.token_provider.get_access_token()
            headers["Authorization"] = f"Bearer {token}"
        else:
            params["key"] = self.api_key
        return await self.http_client.get(
            f"{GOOGLE_CALENDAR_API_BASE}{path}", params=params, headers=headers
        )

    async def fetch_events(self, calendar_id: str, time_min: datetime, time_max: datetime) -> list[dict]:
        """Fetch normalized events in [time_min, time_max)."""
        if not calendar_id or self.auth_method is None:
            return []

        params = {
            "timeMin": _rfc3339(time_min),
            "timeMax": _rfc3339(time_max),
            "singleEvents": "true",
            "orderBy": "startTime",
            "maxResults": str(GOOGLE_MAX_RESULTS),
        }
        try:
            response = await self._get(f"/calendars/{quote(calendar_id, safe='')}/events", params)
        except (httpx.HTTPError, TokenExchangeError) as e:
            logger.error("Failed to fetch Google Calendar events: %s", e)
            return []

        if response.status_code != 200:
            logger.error("Google Calendar API error (%s): %s", response.status_code, _error_message(response))
            if response.status_code == 401 and self.token_provider is not None:
                self.token_provider.invalidate()
            return []

        try:
            items = _json_object(response).get("items") or []
        except ValueError as e:
            logger.error("Unreadable Google Calendar response: %s", e)
            return []

        events = []
        for item in items:
            if not isinstance(item, dict) or item.get("status") == "cancelled":
                continue
            try:
                events.append(normalize_google_event(item, self.tz))
            except (KeyError, ValueError) as e:
                logger.warning("Skipping malformed Google event %s: %s", item.get("id"), e)
        return events

    async def test_connection(self, calendar_id: str) -> dict:
        """Check that the calendar is reachable with the configured credentials."""
        if not calendar_id:
            return {"success": False, "error": "Calendar ID is required"}
        if self.auth_method is None:
            return {"success": False, "error": "Calendar ID and API key are required"}

        try:
            response = await self._get(f"/calendars/{quote(calendar_id, safe='')}")
        except TokenExchangeError as e:
            return {"success": False, "error": str(e)}
        except httpx.HTTPError:
            return {"success": False, "error": "Network error - please check your internet connection"}

        if response.status_code != 200:
            message = _error_message(response)
            if self.auth_method == "service_account" and response.status_code in (403, 404):
                message = f"{message}. Make sure you shared the calendar with the service account."
            return {"success": False, "error": message}

        try:
            calendar = _json_object(response)
        except ValueError:
            return {"success": False, "error": "Unexpected response from Google Calendar"}

        result = {
            "success": True,
            "calendarName": calendar.get("summary") or "Unnamed Calendar",
        }
        if self.auth_method == "service_account":
            result["authMethod"] = "service_account"
        return result


def service_account_configured() -> bool:
    return bool(GOOGLE_SERVICE_ACCOUNT_EMAIL and GOOGLE_SERVICE_ACCOUNT_PRIVATE_KEY)


def build_token_provider(http_client: httpx.AsyncClient) -> ServiceAccountTokenProvider | None:
    """Token provider from environment config, or None without a service account."""
    if not service_account_configured():
        return None
    return ServiceAccountTokenProvider(
        GOOGLE_SERVICE_ACCOUNT_EMAIL, GOOGLE_SERVICE_ACCOUNT_PRIVATE_KEY, http_client
    )
