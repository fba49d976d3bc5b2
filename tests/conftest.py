"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import httpx
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from core.database import create_tables, get_connection  # noqa: E402


@pytest.fixture
def sample_event():
    """Sample recurring event row (Mon/Wed/Fri morning standup)."""
    return {
        "id": "evt-standup",
        "title": "Standup",
        "color": "green",
        "is_all_day": False,
        "is_recurring": True,
        "start_time": "09:00",
        "end_time": "09:30",
        "specific_date": None,
        "days_of_week": [0, 2, 4],
        "excluded_dates": [],
        "source": "local",
    }


@pytest.fixture
def sample_events(sample_event):
    """Recurring, one-time and Google event rows for testing."""
    return [
        sample_event,
        {
            **sample_event,
            "id": "evt-dentist",
            "title": "Dentist",
            "color": "red",
            "is_recurring": False,
            "start_time": "09:15",
            "end_time": "10:00",
            "specific_date": "2025-01-06",
            "days_of_week": [],
        },
        {
            **sample_event,
            "id": "gcal_abc123",
            "title": "Team offsite",
            "color": "purple",
            "is_all_day": True,
            "is_recurring": False,
            "start_time": None,
            "end_time": None,
            "specific_date": "2025-01-06",
            "days_of_week": [],
            "source": "google",
        },
    ]


@pytest.fixture
def db_conn(tmp_path):
    """Connection to a fresh database with all tables created."""
    conn = get_connection(tmp_path / "test.db")
    create_tables(conn)
    yield conn
    conn.close()


class FakeUpstream:
    """
    Stand-in for every outbound HTTP call the server makes.

    Tests register responses per URL path; every request is recorded.
    Unregistered paths answer 404.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, path: str, response):
        """`response` is an httpx.Response or a callable taking the request."""
        self.routes[path] = response

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get(request.url.path)
        if response is None:
            return httpx.Response(404, json={"error": {"message": "Not Found"}})
        if callable(response):
            return response(request)
        return response


@pytest.fixture
def upstream():
    return FakeUpstream()


@pytest.fixture
def http_client(upstream):
    return httpx.AsyncClient(transport=httpx.MockTransport(upstream))


@pytest.fixture
def app(tmp_path, http_client, monkeypatch):
    """Application wired to a temporary database and the fake upstream."""
    from api.main import create_app
    from services.settings import SettingsService

    # Keep the developer's .env out of the tests
    monkeypatch.setattr("services.settings.GOOGLE_CALENDAR_ID", "")
    monkeypatch.setattr("services.settings.GOOGLE_API_KEY", "")

    dist_dir = tmp_path / "dist"
    dist_dir.mkdir()
    return create_app(
        db_path=tmp_path / "db" / "test.db",
        dist_dir=dist_dir,
        http_client=http_client,
        token_provider=None,
        settings_service=SettingsService(),
    )


@pytest.fixture
def client(app):
    from fastapi.testclient import TestClient

    with TestClient(app) as test_client:
        yield test_client
