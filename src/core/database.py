"""
SQLite row store for calendar events and display settings.
"""

import json
import sqlite3
import uuid
from pathlib import Path

from core.config import DB_PATH, IMPORT_CHUNK_SIZE
from models.events import as_list

EVENT_COLUMNS = (
    "id", "title", "color", "is_all_day", "is_recurring", "start_time",
    "end_time", "specific_date", "days_of_week", "excluded_dates",
)
SETTINGS_COLUMNS = (
    "calendar_title", "calendar_start_hour", "calendar_end_hour",
    "google_calendar_id", "google_api_key",
)
_JSON_COLUMNS = {"days_of_week", "excluded_dates"}
_BOOL_COLUMNS = {"is_all_day", "is_recurring"}


def get_connection(db_path: Path = DB_PATH) -> sqlite3.Connection:
    """Get a database connection with dict-like rows."""
    conn = sqlite3.connect(db_path, check_same_thread=False)
    conn.row_factory = sqlite3.Row
    return conn


def create_tables(conn: sqlite3.Connection):
    """Create the calendar, settings and request log tables if missing."""
    cursor = conn.cursor()

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS calendar_events (
            id TEXT PRIMARY KEY,
            title TEXT NOT NULL,
            color TEXT DEFAULT 'blue',
            is_all_day INTEGER NOT NULL DEFAULT 0,
            is_recurring INTEGER,
            start_time TEXT,
            end_time TEXT,
            specific_date TEXT,
            days_of_week TEXT,
            excluded_dates TEXT,
            created_date TEXT DEFAULT CURRENT_TIMESTAMP
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS settings (
            id INTEGER PRIMARY KEY CHECK(id = 1),
            calendar_title TEXT,
            calendar_start_hour INTEGER,
            calendar_end_hour INTEGER,
            google_calendar_id TEXT,
            google_api_key TEXT
        )
    """)

    cursor.execute("""
        CREATE TABLE IF NOT EXISTS api_requests (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            request_id TEXT UNIQUE NOT NULL,
            timestamp TEXT NOT NULL,
            endpoint TEXT NOT NULL,
            method TEXT NOT NULL,
            client_ip TEXT,
            status_code INTEGER NOT NULL,
            error_message TEXT,
            processing_time_ms INTEGER NOT NULL
        )
    """)

    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_calendar_events_date ON calendar_events(specific_date)"
    )
    cursor.execute(
        "CREATE INDEX IF NOT EXISTS idx_api_requests_timestamp ON api_requests(timestamp)"
    )
    conn.commit()


# =============================================================================
# ROW ENCODING
# =============================================================================


def normalize_event_row(row) -> dict | None:
    """
    Decode a stored row into the API event shape.

    days_of_week / excluded_dates always come back as lists (scalars are
    wrapped). is_recurring stays None for legacy rows, which readers treat
    as recurring.
    """
    if row is None:
        return None
    data = dict(row)
    data.pop("created_date", None)
    for key in _JSON_COLUMNS:
        raw = data.get(key)
        if isinstance(raw, str):
            try:
                raw = json.loads(raw)
            except ValueError:
                pass
        data[key] = as_list(raw)
    for key in _BOOL_COLUMNS:
        if data.get(key) is not None:
            data[key] = bool(data[key])
    data["is_all_day"] = bool(data.get("is_all_day"))
    data["source"] = "local"
    return data


def _encode(key: str, value):
    if key in _JSON_COLUMNS:
        return None if value is None else json.dumps(as_list(value))
    if key in _BOOL_COLUMNS:
        return None if value is None else int(bool(value))
    return value


def _encode_event(data: dict) -> dict:
    return {key: _encode(key, data[key]) for key in EVENT_COLUMNS if key in data}


# =============================================================================
# EVENTS
# =============================================================================


def list_calendar_events(conn: sqlite3.Connection) -> list[dict]:
    """All local events, dated ones first by date, then by title."""
    cursor = conn.execute(
        """
        SELECT * FROM calendar_events
        ORDER BY specific_date IS NULL, specific_date ASC, title ASC
        """
    )
    return [normalize_event_row(row) for row in cursor.fetchall()]


def get_calendar_event(conn: sqlite3.Connection, event_id: str) -> dict | None:
    """Fetch one event by id."""
    cursor = conn.execute("SELECT * FROM calendar_events WHERE id = ?", (event_id,))
    return normalize_event_row(cursor.fetchone())


def _insert_event(conn: sqlite3.Connection, data: dict) -> str:
    values = _encode_event(data)
    values["id"] = values.get("id") or str(uuid.uuid4())
    columns = ", ".join(values)
    placeholders = ", ".join("?" for _ in values)
    conn.execute(
        f"INSERT INTO calendar_events ({columns}) VALUES ({placeholders})",
        tuple(values.values()),
    )
    return values["id"]


def create_calendar_event(conn: sqlite3.Connection, data: dict) -> dict:
    """Insert an event and return the stored row."""
    event_id = _insert_event(conn, data)
    conn.commit()
    return get_calendar_event(conn, event_id)


def update_calendar_event(conn: sqlite3.Connection, event_id: str, data: dict) -> dict | None:
    """Update the given fields of an event. Returns None if it does not exist."""
    values = _encode_event(data)
    values.pop("id", None)
    if values:
        assignments = ", ".join(f"{key} = ?" for key in values)
        cursor = conn.execute(
            f"UPDATE calendar_events SET {assignments} WHERE id = ?",
            (*values.values(), event_id),
        )
        conn.commit()
        if cursor.rowcount == 0:
            return None
    return get_calendar_event(conn, event_id)


def delete_calendar_event(conn: sqlite3.Connection, event_id: str) -> bool:
    """Delete a series or one-time event."""
    cursor = conn.execute("DELETE FROM calendar_events WHERE id = ?", (event_id,))
    conn.commit()
    return cursor.rowcount > 0


def exclude_occurrence(conn: sqlite3.Connection, series_id: str, date_str: str) -> dict | None:
    """Suppress one occurrence of a recurring series ("delete this occurrence")."""
    series = get_calendar_event(conn, series_id)
    if series is None:
        return None
    excluded = series["excluded_dates"]
    if date_str not in excluded:
        excluded = [*excluded, date_str]
    return update_calendar_event(conn, series_id, {"excluded_dates": excluded})


def replace_occurrence(
    conn: sqlite3.Connection, series_id: str, date_str: str, one_time_data: dict
) -> dict | None:
    """
    Edit a single occurrence of a series.

    Excludes `date_str` from the series and creates a one-time event on that
    date in the same transaction. Returns the new one-time event.
    """
    series = get_calendar_event(conn, series_id)
    if series is None:
        return None

    excluded = series["excluded_dates"]
    if date_str not in excluded:
        excluded = [*excluded, date_str]

    new_event = {
        **one_time_data,
        "is_recurring": False,
        "specific_date": date_str,
        "days_of_week": None,
        "excluded_dates": None,
    }
    new_event.pop("id", None)

    with conn:
        conn.execute(
            "UPDATE calendar_events SET excluded_dates = ? WHERE id = ?",
            (_encode("excluded_dates", excluded), series_id),
        )
        new_id = _insert_event(conn, new_event)
    return get_calendar_event(conn, new_id)


def delete_all_calendar_events(conn: sqlite3.Connection) -> int:
    """Remove every local event. Returns the number of rows deleted."""
    cursor = conn.execute("DELETE FROM calendar_events")
    conn.commit()
    return cursor.rowcount


def insert_calendar_events(
    conn: sqlite3.Connection, events: list[dict], chunk_size: int = IMPORT_CHUNK_SIZE
) -> int:
    """Bulk insert events, committing every `chunk_size` rows."""
    inserted = 0
    for i in range(0, len(events), chunk_size):
        with conn:
            for event in events[i:i + chunk_size]:
                _insert_event(conn, event)
                inserted += 1
    return inserted


# =============================================================================
# SETTINGS
# =============================================================================


def fetch_settings(conn: sqlite3.Connection) -> dict | None:
    """Return the single settings row, or None if never saved."""
    cursor = conn.execute("SELECT * FROM settings LIMIT 1")
    row = cursor.fetchone()
    return dict(row) if row else None


def save_settings(conn: sqlite3.Connection, payload: dict) -> dict:
    """Merge `payload` over the stored settings and upsert the row."""
    merged = {**(fetch_settings(conn) or {}), **payload}
    values = {key: merged.get(key) for key in SETTINGS_COLUMNS}
    columns = ", ".join(values)
    placeholders = ", ".join("?" for _ in values)
    updates = ", ".join(f"{key} = excluded.{key}" for key in values)
    conn.execute(
        f"""
        INSERT INTO settings (id, {columns}) VALUES (1, {placeholders})
        ON CONFLICT(id) DO UPDATE SET {updates}
        """,
        tuple(values.values()),
    )
    conn.commit()
    return fetch_settings(conn)
