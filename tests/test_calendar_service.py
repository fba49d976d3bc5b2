"""Tests for calendar view assembly."""

from datetime import date

import pytest

from core.database import create_calendar_event
from models.events import OneTimeEvent, RecurringEvent, event_from_row
from services.calendar import (
    build_calendar_view,
    build_day_schedule,
    calendar_view_to_dict,
    load_events,
    shift_anchor,
    visible_days,
)
from services.settings import DEFAULT_SETTINGS

WEDNESDAY = date(2025, 1, 8)


class TestVisibleDays:
    def test_week_starts_monday(self):
        days = visible_days("week", WEDNESDAY)

        assert days[0] == date(2025, 1, 6)
        assert days[-1] == date(2025, 1, 12)
        assert len(days) == 7

    def test_three_day_starts_at_anchor(self):
        assert visible_days("3day", WEDNESDAY) == [date(2025, 1, 8), date(2025, 1, 9), date(2025, 1, 10)]

    def test_one_day(self):
        assert visible_days("1day", WEDNESDAY) == [WEDNESDAY]

    def test_unknown_mode(self):
        with pytest.raises(ValueError, match="Unknown view mode"):
            visible_days("month", WEDNESDAY)

    @pytest.mark.parametrize(
        "mode,step,expected",
        [("week", 1, date(2025, 1, 15)), ("3day", -1, date(2025, 1, 5)), ("1day", 1, date(2025, 1, 9))],
    )
    def test_shift_anchor(self, mode, step, expected):
        assert shift_anchor(mode, WEDNESDAY, step) == expected


class TestDaySchedule:
    def test_splits_and_packs(self, sample_events):
        events = [event_from_row(row) for row in sample_events]

        schedule = build_day_schedule(events, date(2025, 1, 6), today=date(2025, 1, 6))

        assert schedule.is_today is True
        assert [e.id for e in schedule.all_day] == ["gcal_abc123"]
        # Standup 09:00-09:30 overlaps the 09:15 dentist appointment
        assert [(p.event.id, p.column, p.total_columns) for p in schedule.timed] == [
            ("evt-standup", 0, 2),
            ("evt-dentist", 1, 2),
        ]

    def test_excluded_occurrence_is_gone(self):
        series = RecurringEvent(
            id="r", title="Piano", start_time="16:00", days_of_week=(0,),
            excluded_dates=frozenset({"2025-01-06"}),
        )

        assert build_day_schedule([series], date(2025, 1, 6)).timed == []
        assert len(build_day_schedule([series], date(2025, 1, 13)).timed) == 1


class TestCalendarView:
    def test_week_view_to_dict(self):
        events = [
            RecurringEvent(id="r", title="Piano", start_time="16:00", end_time="17:00", days_of_week=(2,)),
            OneTimeEvent(id="o", title="Vet", start_time="08:30", end_time="09:00", specific_date="2025-01-10"),
        ]
        settings = {**DEFAULT_SETTINGS, "calendar_start_hour": 8, "calendar_end_hour": 18}

        view = build_calendar_view(events, "week", WEDNESDAY, settings, today=WEDNESDAY)
        data = calendar_view_to_dict(view)

        assert data["title"] == "Weekly Calendar"
        assert data["hours"][0] == "8 AM"
        assert data["hours"][-1] == "6 PM"
        assert [d["date"] for d in data["days"]][:3] == ["2025-01-06", "2025-01-07", "2025-01-08"]

        wednesday = data["days"][2]
        assert wednesday["weekday"] == "Wed"
        assert wednesday["is_today"] is True
        piano = wednesday["timed"][0]
        assert piano["id"] == "r"
        assert piano["top_px"] == 640
        assert piano["height_px"] == 80
        assert piano["width_pct"] == 100
        assert piano["left_pct"] == 0

        vet = data["days"][4]["timed"][0]
        assert vet["top_px"] == 40
        assert vet["height_px"] == 40


def test_load_events_merges_local_and_google(db_conn, sample_event, sample_events):
    create_calendar_event(db_conn, sample_event)

    events = load_events(db_conn, [sample_events[2]])

    assert [(e.id, e.source) for e in events] == [("evt-standup", "local"), ("gcal_abc123", "google")]
