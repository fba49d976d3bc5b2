"""
Calendar grid layout: column packing for overlapping timed events and
pixel geometry for the hour grid.
"""

import re

from core.config import DEFAULT_EVENT_MINUTES, HOUR_HEIGHT_PX
from models.events import CalendarEvent, PlacedEvent

_HHMM_RE = re.compile(r"^(\d{1,2}):(\d{2})")


def time_to_minutes(time_str: str | None) -> int:
    """Convert 'HH:MM' to minutes past midnight. Missing or malformed -> 0."""
    if not time_str:
        return 0
    m = _HHMM_RE.match(str(time_str).strip())
    if not m:
        return 0
    return int(m.group(1)) * 60 + int(m.group(2))


def event_span(event: CalendarEvent) -> tuple[int, int]:
    """
    Start/end minutes used for overlap checks.

    A missing end, or an end that is not after the start, becomes a one hour
    event.
    """
    start = time_to_minutes(event.start_time)
    end = time_to_minutes(event.end_time)
    if not event.end_time or end <= start:
        end = start + DEFAULT_EVENT_MINUTES
    return start, end


def pack_columns(timed_events: list[CalendarEvent]) -> list[PlacedEvent]:
    """
    Assign each timed event a column so simultaneous events sit side by side.

    Events are sorted by (start, end) and placed greedily into the first
    column with no overlapping member. Touching intervals (one ends when the
    next starts) do not overlap. total_columns is the number of columns the
    whole day needed, shared by every event of the day.
    """
    if not timed_events:
        return []

    spans = [event_span(event) for event in timed_events]
    # sorted() is stable, so exact ties keep input order
    order = sorted(range(len(timed_events)), key=lambda i: spans[i])

    columns: list[list[tuple[int, int]]] = []
    assigned: dict[int, int] = {}

    for i in order:
        start, end = spans[i]
        for col_idx, members in enumerate(columns):
            if not any(start < m_end and end > m_start for m_start, m_end in members):
                members.append((start, end))
                assigned[i] = col_idx
                break
        else:
            columns.append([(start, end)])
            assigned[i] = len(columns) - 1

    total_columns = len(columns)
    return [
        PlacedEvent(
            event=timed_events[i],
            column=assigned[i],
            total_columns=total_columns,
            start_minutes=spans[i][0],
            end_minutes=spans[i][1],
        )
        for i in order
    ]


# =============================================================================
# GRID GEOMETRY
# =============================================================================


def event_top(start_time: str | None, start_hour: int, hour_height: int = HOUR_HEIGHT_PX) -> float:
    """Pixels from the top of the grid (which begins at start_hour)."""
    if not start_time:
        return 0
    relative = time_to_minutes(start_time) - start_hour * 60
    return relative / 60 * hour_height


def event_height(start_time: str | None, end_time: str | None, hour_height: int = HOUR_HEIGHT_PX) -> float:
    """Pixel height of an event block; one hour when either time is missing."""
    if not start_time or not end_time:
        return hour_height
    duration = time_to_minutes(end_time) - time_to_minutes(start_time)
    if duration <= 0:
        return hour_height
    return duration / 60 * hour_height


def format_hour(hour: int) -> str:
    """12-hour clock label, e.g. 0 -> '12 AM', 13 -> '1 PM'."""
    if hour == 0:
        return "12 AM"
    if hour < 12:
        return f"{hour} AM"
    if hour == 12:
        return "12 PM"
    return f"{hour - 12} PM"


def hour_labels(start_hour: int, end_hour: int) -> list[str]:
    """Labels for every grid row from start_hour through end_hour inclusive."""
    return [format_hour(h) for h in range(start_hour, end_hour + 1)]
