"""FastAPI dependencies for shared resources and error helpers."""

import sqlite3
from collections.abc import Iterator

import httpx
from fastapi import Depends, HTTPException, Request

from core.database import get_connection
from services.google_calendar import GoogleCalendarClient
from services.settings import SettingsService


def get_db(request: Request) -> Iterator[sqlite3.Connection]:
    """Open a connection to the configured database for one request."""
    conn = get_connection(request.app.state.db_path)
    try:
        yield conn
    finally:
        conn.close()


def get_settings_service(request: Request) -> SettingsService:
    return request.app.state.settings_service


def get_http_client(request: Request) -> httpx.AsyncClient:
    return request.app.state.http_client


def get_settings(
    conn: sqlite3.Connection = Depends(get_db),
    service: SettingsService = Depends(get_settings_service),
) -> dict:
    """Effective display settings (cached)."""
    return service.get(conn)


def get_google_client(request: Request, settings: dict = Depends(get_settings)) -> GoogleCalendarClient:
    """Google client using the shared token provider and the configured API key."""
    return GoogleCalendarClient(
        request.app.state.http_client,
        token_provider=request.app.state.google_token_provider,
        api_key=settings.get("google_api_key"),
    )


def api_error(status_code: int, error: str, code: str, details: list[str] | None = None) -> HTTPException:
    """HTTPException carrying the standard error body."""
    return HTTPException(
        status_code=status_code,
        detail={"error": error, "code": code, "details": details or []},
    )
