"""Pydantic request bodies. Domain rules live in core.validation."""

from pydantic import BaseModel


class EventPayload(BaseModel):
    """Create/update body for a local event. Every field is optional for PATCH."""

    title: str | None = None
    color: str | None = None
    is_all_day: bool | None = None
    is_recurring: bool | None = None
    start_time: str | None = None
    end_time: str | None = None
    specific_date: str | None = None
    days_of_week: list[int] | None = None
    excluded_dates: list[str] | None = None


class SettingsPayload(BaseModel):
    calendar_title: str | None = None
    calendar_start_hour: int | None = None
    calendar_end_hour: int | None = None
    google_calendar_id: str | None = None
    google_api_key: str | None = None
