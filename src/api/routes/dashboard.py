"""Weather and quote endpoints for the dashboard cards."""

import logging

import httpx
from fastapi import APIRouter, Depends, Query, status

from api.dependencies import api_error, get_http_client
from api.models.responses import ErrorCodes
from services.dashboard_data import (
    DashboardDataError,
    fetch_btc_price,
    fetch_coin_quote,
    fetch_weather_forecast,
    fetch_weather_summary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


async def _upstream(coro, what: str):
    try:
        return await coro
    except DashboardDataError as e:
        logger.warning("%s unavailable: %s", what, e)
        raise api_error(
            status.HTTP_502_BAD_GATEWAY, f"{what} unavailable", ErrorCodes.UPSTREAM_ERROR, [str(e)]
        )


@router.get("/weather")
async def weather(client: httpx.AsyncClient = Depends(get_http_client)):
    return await _upstream(fetch_weather_summary(client), "Weather")


@router.get("/weather/forecast")
async def weather_forecast(
    days: int = Query(default=5, ge=1, le=16),
    client: httpx.AsyncClient = Depends(get_http_client),
):
    return await _upstream(fetch_weather_forecast(client, days), "Forecast")


@router.get("/quotes/btc")
async def btc_quote(client: httpx.AsyncClient = Depends(get_http_client)):
    return await _upstream(fetch_btc_price(client), "BTC price")


@router.get("/quotes/coin")
async def coin_quote(client: httpx.AsyncClient = Depends(get_http_client)):
    return await _upstream(fetch_coin_quote(client), "COIN quote")
