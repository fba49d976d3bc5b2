"""Health check endpoint."""

from datetime import datetime, timezone

from fastapi import APIRouter, Depends, Request

from api.dependencies import get_settings
from api.models.responses import HealthResponse
from core.config import API_VERSION

router = APIRouter(prefix="/api")


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request, settings: dict = Depends(get_settings)):
    """Health check endpoint for monitoring."""
    return HealthResponse(
        status="ok",
        version=API_VERSION,
        calendar_configured=bool(settings.get("google_calendar_id")),
        service_account_configured=request.app.state.google_token_provider is not None,
        database_available=request.app.state.db_path.exists(),
        timestamp=datetime.now(timezone.utc).isoformat(),
    )
