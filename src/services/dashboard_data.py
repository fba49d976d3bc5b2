"""
Weather and price data for the dashboard cards. Free APIs, no keys required.
"""

import json
import logging
from datetime import date
from urllib.parse import quote

import httpx

from core.config import WEATHER_LAT, WEATHER_LON, WEATHER_TIMEZONE

logger = logging.getLogger(__name__)

OPEN_METEO_URL = "https://api.open-meteo.com/v1/forecast"
KRAKEN_TICKER_URL = "https://api.kraken.com/0/public/Ticker"
YAHOO_CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/COIN?interval=1d&range=2d"

# Yahoo blocks browser origins, so quotes go through public CORS proxies
COIN_PROXIES = (
    "https://api.allorigins.win/raw?url={url}",
    "https://corsproxy.io/?{url}",
    "https://api.codetabs.com/v1/proxy?quest={url}",
)
MAX_PLAUSIBLE_CHANGE_PCT = 50

WMO_CODES = {
    0: "Clear", 1: "Mainly Clear", 2: "Partly Cloudy", 3: "Overcast",
    45: "Fog", 48: "Fog", 51: "Light Drizzle", 53: "Drizzle", 55: "Heavy Drizzle",
    61: "Light Rain", 63: "Rain", 65: "Heavy Rain",
    71: "Light Snow", 73: "Snow", 75: "Heavy Snow", 77: "Snow Grains",
    80: "Light Rain Showers", 81: "Rain Showers", 82: "Heavy Rain Showers",
    85: "Light Snow Showers", 86: "Snow Showers",
    95: "Thunderstorm", 96: "Thunderstorm with Hail", 99: "Thunderstorm with Heavy Hail",
}


class DashboardDataError(Exception):
    """An upstream data source failed or returned unusable data."""


class QuoteUnavailableError(DashboardDataError):
    """Every quote source failed."""


def describe_weather(code) -> str:
    return WMO_CODES.get(code, "Unknown")


def _weather_params(**extra) -> dict:
    return {
        "latitude": WEATHER_LAT,
        "longitude": WEATHER_LON,
        "temperature_unit": "fahrenheit",
        "timezone": WEATHER_TIMEZONE,
        **extra,
    }


async def _get_json(client: httpx.AsyncClient, url: str, what: str, **kwargs) -> dict:
    try:
        response = await client.get(url, **kwargs)
        response.raise_for_status()
        return response.json()
    except (httpx.HTTPError, ValueError) as e:
        raise DashboardDataError(f"Failed to fetch {what}: {e}") from e


async def fetch_weather_summary(client: httpx.AsyncClient) -> dict:
    """Current temperature and condition."""
    data = await _get_json(
        client, OPEN_METEO_URL, "weather",
        params=_weather_params(current="temperature_2m,weather_code"),
    )
    try:
        current = data["current"]
        return {
            "temperature": current["temperature_2m"],
            "condition": describe_weather(current["weather_code"]),
        }
    except (KeyError, TypeError) as e:
        raise DashboardDataError(f"Unexpected weather payload: missing {e}") from e


async def fetch_weather_forecast(client: httpx.AsyncClient, days: int = 5) -> list[dict]:
    """Daily high/low/condition for the next `days` days."""
    data = await _get_json(
        client, OPEN_METEO_URL, "forecast",
        params=_weather_params(
            daily="temperature_2m_max,temperature_2m_min,weather_code",
            forecast_days=days,
        ),
    )
    try:
        daily = data["daily"]
        return [
            {
                "day": date.fromisoformat(day_str).strftime("%a"),
                "high": round(daily["temperature_2m_max"][i]),
                "low": round(daily["temperature_2m_min"][i]),
                "condition": describe_weather(daily["weather_code"][i]),
            }
            for i, day_str in enumerate(daily["time"])
        ]
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise DashboardDataError(f"Unexpected forecast payload: {e}") from e


async def fetch_btc_price(client: httpx.AsyncClient) -> dict:
    """BTC/USD last trade and change since the 24h open, from Kraken."""
    data = await _get_json(client, KRAKEN_TICKER_URL, "BTC price", params={"pair": "XBTUSD"})
    try:
        ticker = data["result"]["XXBTZUSD"]
        current = float(ticker["c"][0])
        open_24h = float(ticker["o"])
    except (KeyError, IndexError, TypeError, ValueError) as e:
        raise DashboardDataError(f"Unexpected Kraken payload: {e}") from e
    if not open_24h:
        raise DashboardDataError("Unexpected Kraken payload: 24h open price is zero")
    return {"price": current, "change_24h": (current - open_24h) / open_24h * 100}


def parse_yahoo_quote(text: str) -> dict | None:
    """Extract price and daily change from a Yahoo chart response, or None."""
    if not text.startswith("{"):
        return None
    try:
        meta = json.loads(text)["chart"]["result"][0]["meta"]
    except (ValueError, KeyError, IndexError, TypeError):
        return None

    price = meta.get("regularMarketPrice")
    previous_close = meta.get("chartPreviousClose") or meta.get("previousClose")
    if not price or not previous_close:
        return None

    change = (price - previous_close) / previous_close * 100
    if abs(change) > MAX_PLAUSIBLE_CHANGE_PCT:
        logger.warning("COIN change unreasonable: %.1f%%", change)
        return None
    return {"price": price, "change_24h": change}


async def fetch_coin_quote(client: httpx.AsyncClient) -> dict:
    """COIN stock quote, trying each proxy in order until one yields a sane quote."""
    encoded = quote(YAHOO_CHART_URL, safe="")
    for template in COIN_PROXIES:
        proxy_url = template.format(url=encoded)
        try:
            response = await client.get(proxy_url)
        except httpx.HTTPError as e:
            logger.warning("Proxy failed: %s %s", proxy_url, e)
            continue
        if response.status_code != 200:
            continue
        quote_data = parse_yahoo_quote(response.text)
        if quote_data is not None:
            return quote_data
    raise QuoteUnavailableError("All COIN fetch attempts failed")
