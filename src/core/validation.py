"""
Event payload validation for the write endpoints and the CSV importer.
"""

import re
from datetime import datetime

from core.config import EVENT_COLORS

_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")


def is_valid_time(value) -> bool:
    """Check for a 24-hour 'HH:MM' string."""
    return isinstance(value, str) and bool(_TIME_RE.match(value))


def is_valid_date(value) -> bool:
    """Check for a 'YYYY-MM-DD' calendar date."""
    if not isinstance(value, str):
        return False
    try:
        datetime.strptime(value, "%Y-%m-%d")
    except ValueError:
        return False
    return True


def validate_event_payload(data: dict) -> list[str]:
    """
    Validate a complete event payload (for PATCH, the stored row merged with
    the changes).

    Checks:
    1. Title is present
    2. Colour is part of the palette
    3. Times are HH:MM and required for timed events; end after start
    4. One-time events carry a valid specific_date
    5. Recurring events carry at least one weekday in 0..6
    6. excluded_dates are valid dates

    Returns:
        List of error messages (empty when valid)
    """
    errors = []

    # Check 1: Title
    title = data.get("title")
    if not isinstance(title, str) or not title.strip():
        errors.append("Missing title")

    # Check 2: Colour
    color = data.get("color")
    if color is not None and color not in EVENT_COLORS:
        errors.append(f"Unknown color '{color}'")

    # Check 3: Times
    start_time = data.get("start_time")
    end_time = data.get("end_time")
    if not data.get("is_all_day"):
        if not start_time:
            errors.append("Timed event requires start_time")
        elif not is_valid_time(start_time):
            errors.append(f"Invalid start_time '{start_time}', expected HH:MM")
        if end_time and not is_valid_time(end_time):
            errors.append(f"Invalid end_time '{end_time}', expected HH:MM")
        if is_valid_time(start_time) and is_valid_time(end_time) and end_time <= start_time:
            errors.append("end_time must be after start_time")

    # Check 4/5: Recurrence shape
    if data.get("is_recurring") is False:
        if not is_valid_date(data.get("specific_date")):
            errors.append("One-time event requires specific_date (YYYY-MM-DD)")
    else:
        days = data.get("days_of_week")
        if not isinstance(days, list) or not days:
            errors.append("Recurring event requires at least one day in days_of_week")
        elif any(not isinstance(d, int) or not 0 <= d <= 6 for d in days):
            errors.append("days_of_week values must be between 0 (Mon) and 6 (Sun)")

    # Check 6: Exclusions
    for excluded in data.get("excluded_dates") or []:
        if not is_valid_date(excluded):
            errors.append(f"Invalid excluded date '{excluded}'")

    return errors


def clean_event_payload(data: dict) -> dict:
    """
    Drop the fields that do not apply to the event's kind.

    All-day events have no times; series have no specific_date; one-time
    events have neither weekdays nor exclusions.
    """
    cleaned = dict(data)
    if cleaned.get("is_all_day"):
        cleaned["start_time"] = None
        cleaned["end_time"] = None
    if cleaned.get("is_recurring") is False:
        cleaned["days_of_week"] = None
        cleaned["excluded_dates"] = None
    else:
        cleaned["is_recurring"] = True
        cleaned["specific_date"] = None
        cleaned["days_of_week"] = sorted(set(cleaned.get("days_of_week") or []))
        cleaned["excluded_dates"] = list(cleaned.get("excluded_dates") or [])
    return cleaned
