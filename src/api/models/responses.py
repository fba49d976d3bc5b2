"""Pydantic response models for API endpoints."""

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """Health check response."""

    status: str  # "ok"
    version: str
    calendar_configured: bool
    service_account_configured: bool
    database_available: bool
    timestamp: str  # ISO 8601 UTC


class GoogleEventsResponse(BaseModel):
    """Google Calendar events for the next 30 days."""

    events: list[dict]
    error: str | None = None


class ConnectionTestResponse(BaseModel):
    success: bool
    calendarName: str | None = None
    authMethod: str | None = None
    error: str | None = None


class ErrorResponse(BaseModel):
    """Standard error response."""

    error: str
    code: str
    details: list[str] = []


class ErrorCodes:
    """Error code constants."""

    INVALID_REQUEST = "INVALID_REQUEST"
    NOT_FOUND = "NOT_FOUND"
    READ_ONLY_EVENT = "READ_ONLY_EVENT"
    VALIDATION_ERROR = "VALIDATION_ERROR"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    INTERNAL_ERROR = "INTERNAL_ERROR"
