"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager
from pathlib import Path

import httpx
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse

from api.dependencies import api_error
from api.logging import request_logging_middleware
from api.models.responses import ErrorCodes, ErrorResponse
from api.routes import (
    calendar_router,
    dashboard_router,
    events_router,
    google_router,
    health_router,
    settings_router,
)
from core.config import (
    API_DEBUG,
    API_VERSION,
    DB_PATH,
    DISPLAY_TIMEZONE,
    DIST_DIR,
    HTTP_TIMEOUT_SECONDS,
)
from core.database import create_tables, get_connection
from services.google_calendar import ServiceAccountTokenProvider, build_token_provider
from services.settings import SettingsService

logger = logging.getLogger(__name__)

_UNSET = object()


def create_app(
    db_path: Path = DB_PATH,
    dist_dir: Path = DIST_DIR,
    http_client: httpx.AsyncClient | None = None,
    token_provider: ServiceAccountTokenProvider | None | object = _UNSET,
    settings_service: SettingsService | None = None,
) -> FastAPI:
    """
    Build the application.

    Dependencies default to the environment config; tests pass their own
    database path, HTTP client and token provider.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler for startup/shutdown."""
        db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = get_connection(db_path)
        try:
            create_tables(conn)
        finally:
            conn.close()

        owns_client = http_client is None
        client = http_client or httpx.AsyncClient(timeout=HTTP_TIMEOUT_SECONDS)
        app.state.db_path = db_path
        app.state.http_client = client
        app.state.google_token_provider = (
            build_token_provider(client) if token_provider is _UNSET else token_provider
        )
        app.state.settings_service = settings_service or SettingsService()

        logger.info("Tablet Display server ready (database: %s, timezone: %s)", db_path, DISPLAY_TIMEZONE)
        if app.state.google_token_provider is None:
            logger.info("Google service account: NOT SET")

        yield

        if owns_client:
            await client.aclose()

    app = FastAPI(
        title="Tablet Display API",
        description="Calendar, weather and quote data for the household tablet dashboard",
        version=API_VERSION,
        debug=API_DEBUG,
        lifespan=lifespan,
    )

    # CORS middleware (for development)
    if API_DEBUG:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=["*"],
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    app.middleware("http")(request_logging_middleware)

    # Global exception handler for unexpected errors
    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Handle unexpected exceptions with standard error format."""
        logger.exception("Unhandled error on %s %s", request.method, request.url.path)
        return JSONResponse(
            status_code=500,
            content=ErrorResponse(
                error="Internal server error",
                code=ErrorCodes.INTERNAL_ERROR,
                details=[],
            ).model_dump(),
        )

    # Include routers
    app.include_router(health_router)
    app.include_router(google_router)
    app.include_router(calendar_router)
    app.include_router(events_router)
    app.include_router(settings_router)
    app.include_router(dashboard_router)

    # Static files from dist/ with SPA fallback to index.html. Registered last
    # so every /api route takes precedence.
    @app.get("/{full_path:path}", include_in_schema=False)
    async def serve_spa(full_path: str):
        if full_path == "api" or full_path.startswith("api/"):
            raise api_error(status.HTTP_404_NOT_FOUND, "Not found", ErrorCodes.NOT_FOUND)

        root = dist_dir.resolve()
        candidate = (root / full_path).resolve()
        if full_path and candidate.is_file() and candidate.is_relative_to(root):
            return FileResponse(candidate)

        index = root / "index.html"
        if index.is_file():
            return FileResponse(index)
        raise api_error(status.HTTP_404_NOT_FOUND, "Frontend build not found", ErrorCodes.NOT_FOUND)

    return app


app = create_app()


# Entry point for uvicorn
if __name__ == "__main__":
    import uvicorn

    from core.config import API_HOST, API_PORT

    logging.basicConfig(level=logging.DEBUG if API_DEBUG else logging.INFO)
    uvicorn.run(
        "api.main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_DEBUG,
    )
