"""API Pydantic models."""

from .requests import EventPayload, SettingsPayload
from .responses import (
    ConnectionTestResponse,
    ErrorCodes,
    ErrorResponse,
    GoogleEventsResponse,
    HealthResponse,
)

__all__ = [
    "HealthResponse",
    "GoogleEventsResponse",
    "ConnectionTestResponse",
    "ErrorResponse",
    "ErrorCodes",
    "EventPayload",
    "SettingsPayload",
]
