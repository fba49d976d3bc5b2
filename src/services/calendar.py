"""
Calendar view assembly: visible window, per-day resolution and layout.
"""

import sqlite3
from dataclasses import dataclass
from datetime import date, timedelta

from core.config import HOUR_HEIGHT_PX, VIEW_MODES
from core.database import list_calendar_events
from core.layout import event_height, event_top, hour_labels, pack_columns
from core.recurrence import resolve_events_for_date, split_all_day
from models.events import CalendarEvent, PlacedEvent, event_from_row, event_to_dict


@dataclass(frozen=True)
class DaySchedule:
    """Everything the grid needs to draw one day column."""
    day: date
    is_today: bool
    all_day: list[CalendarEvent]
    timed: list[PlacedEvent]


@dataclass(frozen=True)
class CalendarView:
    title: str
    view_mode: str
    start_hour: int
    end_hour: int
    hours: list[str]
    days: list[DaySchedule]


# =============================================================================
# WINDOW
# =============================================================================


def visible_days(view_mode: str, anchor: date) -> list[date]:
    """
    Dates shown for a view mode.

    week: Monday through Sunday of the week containing `anchor`
    3day / 1day: `anchor` and the following days
    """
    if view_mode not in VIEW_MODES:
        raise ValueError(f"Unknown view mode '{view_mode}', expected one of {sorted(VIEW_MODES)}")

    first = anchor
    if view_mode == "week":
        first = anchor - timedelta(days=anchor.weekday())
    return [first + timedelta(days=i) for i in range(VIEW_MODES[view_mode])]


def shift_anchor(view_mode: str, anchor: date, step: int) -> date:
    """Move the anchor a whole page forward (step=1) or back (step=-1)."""
    if view_mode not in VIEW_MODES:
        raise ValueError(f"Unknown view mode '{view_mode}', expected one of {sorted(VIEW_MODES)}")
    return anchor + timedelta(days=VIEW_MODES[view_mode] * step)


# =============================================================================
# ASSEMBLY
# =============================================================================


def load_events(conn: sqlite3.Connection, google_events: list[dict] | None = None) -> list[CalendarEvent]:
    """Local rows plus already-normalized Google rows, as tagged variants."""
    rows = list_calendar_events(conn) + list(google_events or [])
    return [event_from_row(row) for row in rows]


def build_day_schedule(events: list[CalendarEvent], day: date, today: date | None = None) -> DaySchedule:
    """Resolve the day's events, split all-day from timed, pack the timed ones."""
    resolved = resolve_events_for_date(events, day)
    all_day, timed = split_all_day(resolved)
    return DaySchedule(
        day=day,
        is_today=day == today,
        all_day=all_day,
        timed=pack_columns(timed),
    )


def build_calendar_view(
    events: list[CalendarEvent],
    view_mode: str,
    anchor: date,
    settings: dict,
    today: date | None = None,
) -> CalendarView:
    """Build the full multi-day view for the given window and settings."""
    start_hour = int(settings["calendar_start_hour"])
    end_hour = int(settings["calendar_end_hour"])
    return CalendarView(
        title=settings["calendar_title"],
        view_mode=view_mode,
        start_hour=start_hour,
        end_hour=end_hour,
        hours=hour_labels(start_hour, end_hour),
        days=[build_day_schedule(events, day, today) for day in visible_days(view_mode, anchor)],
    )


# =============================================================================
# SERIALIZATION
# =============================================================================


def placed_event_to_dict(placed: PlacedEvent, start_hour: int) -> dict:
    """Event row plus column slot and pixel geometry."""
    event = placed.event
    return {
        **event_to_dict(event),
        "column": placed.column,
        "total_columns": placed.total_columns,
        "left_pct": placed.left_pct,
        "width_pct": placed.width_pct,
        "top_px": event_top(event.start_time, start_hour, HOUR_HEIGHT_PX),
        "height_px": event_height(event.start_time, event.end_time, HOUR_HEIGHT_PX),
    }


def calendar_view_to_dict(view: CalendarView) -> dict:
    return {
        "title": view.title,
        "view_mode": view.view_mode,
        "start_hour": view.start_hour,
        "end_hour": view.end_hour,
        "hours": view.hours,
        "days": [
            {
                "date": schedule.day.isoformat(),
                "weekday": schedule.day.strftime("%a"),
                "is_today": schedule.is_today,
                "all_day": [event_to_dict(e) for e in schedule.all_day],
                "timed": [placed_event_to_dict(p, view.start_hour) for p in schedule.timed],
            }
            for schedule in view.days
        ],
    }
