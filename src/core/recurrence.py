"""
Day resolution: which events occur on a given calendar date.
"""

from collections.abc import Iterable
from datetime import date, timedelta

from models.events import CalendarEvent, RecurringEvent


def weekday_index(day: date) -> int:
    """Monday-relative weekday (Monday=0 ... Sunday=6)."""
    return day.weekday()


def occurs_on(event: CalendarEvent, day: date) -> bool:
    """Check if a single event has an occurrence on `day`."""
    date_str = day.isoformat()

    if isinstance(event, RecurringEvent):
        if weekday_index(day) not in event.days_of_week:
            return False
        return date_str not in event.excluded_dates

    # One-time and Google events are pinned to their date
    return event.specific_date == date_str


def resolve_events_for_date(events: Iterable[CalendarEvent], day: date) -> list[CalendarEvent]:
    """
    Return the events that occur on `day`, in input order.

    - Google events: included only on their specific_date
    - One-time events: included only on their specific_date
    - Recurring series: included when the weekday is in days_of_week and the
      date is not one of the series' excluded_dates
    """
    return [event for event in events if occurs_on(event, day)]


def split_all_day(events: Iterable[CalendarEvent]) -> tuple[list[CalendarEvent], list[CalendarEvent]]:
    """Partition resolved events into (all_day, timed)."""
    all_day = []
    timed = []
    for event in events:
        if event.is_all_day:
            all_day.append(event)
        elif event.start_time:
            timed.append(event)
    return all_day, timed


def occurrences_between(event: CalendarEvent, start: date, end: date) -> list[date]:
    """All dates in [start, end] on which the event occurs."""
    days = []
    current = start
    while current <= end:
        if occurs_on(event, current):
            days.append(current)
        current += timedelta(days=1)
    return days
