"""API route modules."""

from .calendar import router as calendar_router
from .dashboard import router as dashboard_router
from .events import router as events_router
from .google import router as google_router
from .health import router as health_router
from .settings import router as settings_router

__all__ = [
    "health_router",
    "google_router",
    "calendar_router",
    "events_router",
    "settings_router",
    "dashboard_router",
]
