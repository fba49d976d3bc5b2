"""
Data models for calendar events.

Rows coming from SQLite or the Google normalizer are loose dicts (EventRow).
They are converted once, at the loading boundary, into one of three frozen
variants so the day resolver never has to guess what an absent field means.
"""

from dataclasses import dataclass, field
from typing import Any, TypedDict

from core.config import DEFAULT_EVENT_COLOR, EVENT_COLORS


class EventRow(TypedDict, total=False):
    """Calendar event as stored in the row store or returned by the API."""
    id: str
    title: str
    color: str
    is_all_day: bool
    is_recurring: bool | None
    start_time: str | None
    end_time: str | None
    specific_date: str | None
    days_of_week: list[int]
    excluded_dates: list[str]
    source: str
    description: str
    location: str | None
    google_event_id: str
    google_html_link: str | None


@dataclass(frozen=True)
class BaseEvent:
    id: str
    title: str
    color: str = DEFAULT_EVENT_COLOR
    is_all_day: bool = False
    start_time: str | None = None
    end_time: str | None = None

    @property
    def is_timed(self) -> bool:
        return not self.is_all_day and bool(self.start_time)


@dataclass(frozen=True)
class OneTimeEvent(BaseEvent):
    """Local event pinned to a single calendar date."""
    specific_date: str = ""
    source: str = field(default="local", init=False)


@dataclass(frozen=True)
class RecurringEvent(BaseEvent):
    """Local weekly series. Weekdays are Monday=0 ... Sunday=6."""
    days_of_week: tuple[int, ...] = ()
    excluded_dates: frozenset[str] = frozenset()
    source: str = field(default="local", init=False)


@dataclass(frozen=True)
class ExternalEvent(BaseEvent):
    """Read-only event fetched from Google Calendar, always date-pinned."""
    specific_date: str = ""
    description: str = ""
    location: str | None = None
    html_link: str | None = None
    source: str = field(default="google", init=False)


CalendarEvent = OneTimeEvent | RecurringEvent | ExternalEvent


@dataclass(frozen=True)
class PlacedEvent:
    """Timed event annotated with its horizontal slot in a day column."""
    event: CalendarEvent
    column: int
    total_columns: int
    start_minutes: int
    end_minutes: int

    @property
    def width_pct(self) -> float:
        return 100 / self.total_columns

    @property
    def left_pct(self) -> float:
        return self.column * self.width_pct


# =============================================================================
# ROW CONVERSION
# =============================================================================


def normalize_color(color: Any) -> str:
    """Return a palette colour, falling back to the default."""
    if isinstance(color, str) and color.strip().lower() in EVENT_COLORS:
        return color.strip().lower()
    return DEFAULT_EVENT_COLOR


def as_list(value: Any) -> list:
    """Wrap scalars into a list; None becomes empty."""
    if value is None:
        return []
    if isinstance(value, (list, tuple, set, frozenset)):
        return list(value)
    return [value]


def _weekdays(value: Any) -> tuple[int, ...]:
    days = []
    for item in as_list(value):
        try:
            day = int(item)
        except (TypeError, ValueError):
            continue
        if 0 <= day <= 6 and day not in days:
            days.append(day)
    return tuple(days)


def event_from_row(row: dict) -> CalendarEvent:
    """
    Convert a loose event row into its tagged variant.

    - source 'google' -> ExternalEvent (recurrence fields ignored)
    - is_recurring is False -> OneTimeEvent
    - anything else, including a missing is_recurring -> RecurringEvent
    """
    common = {
        "id": str(row.get("id") or ""),
        "title": str(row.get("title") or ""),
        "color": normalize_color(row.get("color")),
        "is_all_day": bool(row.get("is_all_day")),
        "start_time": row.get("start_time") or None,
        "end_time": row.get("end_time") or None,
    }

    if row.get("source") == "google":
        return ExternalEvent(
            **common,
            specific_date=str(row.get("specific_date") or ""),
            description=str(row.get("description") or ""),
            location=row.get("location") or None,
            html_link=row.get("google_html_link") or None,
        )

    if row.get("is_recurring") is False:
        return OneTimeEvent(**common, specific_date=str(row.get("specific_date") or ""))

    return RecurringEvent(
        **common,
        days_of_week=_weekdays(row.get("days_of_week")),
        excluded_dates=frozenset(str(d) for d in as_list(row.get("excluded_dates"))),
    )


def event_to_dict(event: CalendarEvent) -> dict:
    """Serialize a variant back into the row shape used by the API."""
    data = {
        "id": event.id,
        "title": event.title,
        "color": event.color,
        "is_all_day": event.is_all_day,
        "start_time": event.start_time,
        "end_time": event.end_time,
        "source": event.source,
    }
    if isinstance(event, RecurringEvent):
        data.update(
            is_recurring=True,
            specific_date=None,
            days_of_week=list(event.days_of_week),
            excluded_dates=sorted(event.excluded_dates),
        )
    else:
        data.update(
            is_recurring=False,
            specific_date=event.specific_date,
            days_of_week=[],
            excluded_dates=[],
        )
    if isinstance(event, ExternalEvent):
        data.update(
            description=event.description,
            location=event.location,
            google_html_link=event.html_link,
        )
    return data
