"""Tests for converting loose event rows into tagged variants."""

import dataclasses

import pytest

from models.events import (
    ExternalEvent,
    OneTimeEvent,
    PlacedEvent,
    RecurringEvent,
    as_list,
    event_from_row,
    event_to_dict,
    normalize_color,
)


class TestEventFromRow:
    def test_recurring(self, sample_event):
        event = event_from_row(sample_event)

        assert isinstance(event, RecurringEvent)
        assert event.days_of_week == (0, 2, 4)
        assert event.excluded_dates == frozenset()
        assert event.source == "local"

    def test_one_time(self, sample_events):
        event = event_from_row(sample_events[1])

        assert isinstance(event, OneTimeEvent)
        assert event.specific_date == "2025-01-06"

    def test_google_wins_over_recurrence_fields(self, sample_events):
        row = {**sample_events[2], "is_recurring": True, "days_of_week": [1, 2]}

        event = event_from_row(row)

        assert isinstance(event, ExternalEvent)
        assert event.source == "google"
        assert event.is_all_day is True

    @pytest.mark.parametrize("flag", [None, True])
    def test_missing_or_true_flag_is_recurring(self, flag):
        row = {"id": "x", "title": "Series", "days_of_week": [1]}
        if flag is not None:
            row["is_recurring"] = flag

        assert isinstance(event_from_row(row), RecurringEvent)

    def test_scalar_weekday_is_wrapped(self):
        event = event_from_row({"id": "x", "title": "Tuesdays", "days_of_week": 1})

        assert event.days_of_week == (1,)

    def test_out_of_range_and_duplicate_weekdays_dropped(self):
        event = event_from_row({"id": "x", "title": "T", "days_of_week": [2, 7, -1, 2, "3", "bad"]})

        assert event.days_of_week == (2, 3)

    def test_scalar_exclusion_is_wrapped(self):
        event = event_from_row({"id": "x", "title": "T", "days_of_week": [0], "excluded_dates": "2024-03-04"})

        assert event.excluded_dates == frozenset({"2024-03-04"})

    def test_unknown_color_falls_back(self):
        event = event_from_row({"id": "x", "title": "T", "color": "chartreuse", "is_recurring": False})

        assert event.color == "blue"

    def test_events_are_immutable(self, sample_event):
        event = event_from_row(sample_event)

        with pytest.raises(dataclasses.FrozenInstanceError):
            event.title = "Changed"


class TestEventToDict:
    def test_recurring_round_shape(self, sample_event):
        data = event_to_dict(event_from_row({**sample_event, "excluded_dates": ["2025-01-08", "2025-01-06"]}))

        assert data["is_recurring"] is True
        assert data["specific_date"] is None
        assert data["days_of_week"] == [0, 2, 4]
        assert data["excluded_dates"] == ["2025-01-06", "2025-01-08"]

    def test_google_fields(self):
        event = ExternalEvent(
            id="gcal_1", title="Lunch", specific_date="2025-01-06", location="Cafe", html_link="https://x"
        )

        data = event_to_dict(event)

        assert data["source"] == "google"
        assert data["is_recurring"] is False
        assert data["location"] == "Cafe"
        assert data["google_html_link"] == "https://x"


def test_placed_event_geometry():
    placed = PlacedEvent(
        event=OneTimeEvent(id="a", title="A", specific_date="2025-01-06"),
        column=1,
        total_columns=4,
        start_minutes=540,
        end_minutes=600,
    )

    assert placed.width_pct == 25
    assert placed.left_pct == 25


def test_normalize_color():
    assert normalize_color(" Red ") == "red"
    assert normalize_color(None) == "blue"
    assert normalize_color(3) == "blue"


def test_as_list():
    assert as_list(None) == []
    assert as_list(3) == [3]
    assert as_list((1, 2)) == [1, 2]
