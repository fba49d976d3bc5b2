"""Local calendar event CRUD and single-occurrence edits."""

import sqlite3

from fastapi import APIRouter, Depends, Response, status

from api.dependencies import api_error, get_db
from api.models.requests import EventPayload
from api.models.responses import ErrorCodes
from core.database import (
    create_calendar_event,
    delete_calendar_event,
    exclude_occurrence,
    get_calendar_event,
    list_calendar_events,
    replace_occurrence,
    update_calendar_event,
)
from core.validation import clean_event_payload, is_valid_date, validate_event_payload

router = APIRouter(prefix="/api/events")


def _reject_google_id(event_id: str):
    if event_id.startswith("gcal_"):
        raise api_error(
            status.HTTP_409_CONFLICT,
            "Google Calendar events are read-only",
            ErrorCodes.READ_ONLY_EVENT,
            [f"Event: {event_id}"],
        )


def _get_or_404(conn: sqlite3.Connection, event_id: str) -> dict:
    event = get_calendar_event(conn, event_id)
    if event is None:
        raise api_error(
            status.HTTP_404_NOT_FOUND, "Event not found", ErrorCodes.NOT_FOUND, [f"Event: {event_id}"]
        )
    return event


def _validated(data: dict) -> dict:
    errors = validate_event_payload(data)
    if errors:
        raise api_error(
            status.HTTP_422_UNPROCESSABLE_ENTITY,
            "Event validation failed",
            ErrorCodes.VALIDATION_ERROR,
            errors,
        )
    return clean_event_payload(data)


def _check_date(date_str: str):
    if not is_valid_date(date_str):
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "Invalid occurrence date",
            ErrorCodes.INVALID_REQUEST,
            ["Expected format: YYYY-MM-DD"],
        )


@router.get("")
def list_events(conn: sqlite3.Connection = Depends(get_db)):
    """All local events (Google events are served separately)."""
    return list_calendar_events(conn)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_event(payload: EventPayload, conn: sqlite3.Connection = Depends(get_db)):
    """Create a recurring series or a one-time event."""
    data = _validated(payload.model_dump(exclude_unset=True))
    return create_calendar_event(conn, data)


@router.patch("/{event_id}")
def update_event(event_id: str, payload: EventPayload, conn: sqlite3.Connection = Depends(get_db)):
    """Update a whole series or a one-time event."""
    _reject_google_id(event_id)
    existing = _get_or_404(conn, event_id)
    data = _validated({**existing, **payload.model_dump(exclude_unset=True)})
    return update_calendar_event(conn, event_id, data)


@router.delete("/{event_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_event(event_id: str, conn: sqlite3.Connection = Depends(get_db)):
    """Delete a whole series or a one-time event."""
    _reject_google_id(event_id)
    if not delete_calendar_event(conn, event_id):
        raise api_error(
            status.HTTP_404_NOT_FOUND, "Event not found", ErrorCodes.NOT_FOUND, [f"Event: {event_id}"]
        )
    return Response(status_code=status.HTTP_204_NO_CONTENT)


def _get_series_or_error(conn: sqlite3.Connection, series_id: str, date_str: str) -> dict:
    _reject_google_id(series_id)
    _check_date(date_str)
    series = _get_or_404(conn, series_id)
    if series.get("is_recurring") is False:
        raise api_error(
            status.HTTP_400_BAD_REQUEST,
            "Event is not a recurring series",
            ErrorCodes.INVALID_REQUEST,
            [f"Event: {series_id}"],
        )
    return series


@router.post("/{series_id}/occurrences/{date_str}/exclude")
def delete_occurrence(series_id: str, date_str: str, conn: sqlite3.Connection = Depends(get_db)):
    """Remove one occurrence of a series, leaving the rest untouched."""
    _get_series_or_error(conn, series_id, date_str)
    return exclude_occurrence(conn, series_id, date_str)


@router.put("/{series_id}/occurrences/{date_str}", status_code=status.HTTP_201_CREATED)
def update_occurrence(
    series_id: str, date_str: str, payload: EventPayload, conn: sqlite3.Connection = Depends(get_db)
):
    """
    Edit one occurrence of a series.

    The date is excluded from the series and a one-time event with the edited
    fields is created on that date. Returns the new one-time event.
    """
    series = _get_series_or_error(conn, series_id, date_str)
    base = {
        key: series.get(key)
        for key in ("title", "color", "is_all_day", "start_time", "end_time")
    }
    data = _validated(
        {
            **base,
            **payload.model_dump(exclude_unset=True),
            "is_recurring": False,
            "specific_date": date_str,
        }
    )
    return replace_occurrence(conn, series_id, date_str, data)
