"""Display settings endpoints."""

import sqlite3

from fastapi import APIRouter, Depends, status

from api.dependencies import api_error, get_db, get_settings, get_settings_service
from api.models.requests import SettingsPayload
from api.models.responses import ErrorCodes
from services.settings import SettingsService

router = APIRouter(prefix="/api")


def _public(settings: dict) -> dict:
    # The API key never leaves the server
    return {key: value for key, value in settings.items() if key != "google_api_key"}


@router.get("/settings")
def read_settings(settings: dict = Depends(get_settings)):
    return _public(settings)


@router.put("/settings")
def update_settings(
    payload: SettingsPayload,
    conn: sqlite3.Connection = Depends(get_db),
    service: SettingsService = Depends(get_settings_service),
):
    """Merge the given fields over the stored settings."""
    data = payload.model_dump(exclude_unset=True)

    errors = []
    for key in ("calendar_start_hour", "calendar_end_hour"):
        if key in data and data[key] is not None and not 0 <= data[key] <= 23:
            errors.append(f"{key} must be between 0 and 23")
    current = service.get(conn)
    start = data.get("calendar_start_hour", current["calendar_start_hour"])
    end = data.get("calendar_end_hour", current["calendar_end_hour"])
    if start is not None and end is not None and end <= start:
        errors.append("calendar_end_hour must be after calendar_start_hour")
    if errors:
        raise api_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Settings validation failed",
            ErrorCodes.VALIDATION_ERROR,
            errors,
        )

    return _public(service.save(conn, data))


@router.post("/refresh")
def refresh(service: SettingsService = Depends(get_settings_service)):
    """Drop cached settings so the next read sees fresh Google Calendar config."""
    service.clear()
    return {"status": "ok"}
