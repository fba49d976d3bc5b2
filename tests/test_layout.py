"""Tests for overlap packing and grid geometry."""

import pytest

from core.layout import (
    event_height,
    event_span,
    event_top,
    format_hour,
    hour_labels,
    pack_columns,
    time_to_minutes,
)
from models.events import OneTimeEvent


def timed(event_id, start, end=None):
    return OneTimeEvent(
        id=event_id, title=event_id, start_time=start, end_time=end, specific_date="2024-03-04"
    )


def slots(placed):
    return {p.event.id: (p.column, p.total_columns) for p in placed}


class TestTimeToMinutes:
    @pytest.mark.parametrize(
        "value,expected",
        [
            ("00:00", 0),
            ("09:30", 570),
            ("9:05", 545),
            ("23:59", 1439),
            ("14:15:00", 855),
            (None, 0),
            ("", 0),
            ("noon", 0),
        ],
    )
    def test_values(self, value, expected):
        assert time_to_minutes(value) == expected


class TestEventSpan:
    def test_missing_end_is_one_hour(self):
        assert event_span(timed("a", "09:00")) == (540, 600)

    @pytest.mark.parametrize("end", ["09:00", "08:00"])
    def test_end_not_after_start_is_one_hour(self, end):
        assert event_span(timed("a", "09:00", end)) == (540, 600)


class TestPackColumns:
    def test_touching_intervals_share_a_column(self):
        placed = pack_columns([timed("a", "09:00", "10:00"), timed("b", "10:00", "11:00")])

        assert slots(placed) == {"a": (0, 1), "b": (0, 1)}

    def test_overlapping_intervals_side_by_side(self):
        placed = pack_columns([timed("a", "09:00", "10:00"), timed("b", "09:30", "10:30")])

        assert slots(placed) == {"a": (0, 2), "b": (1, 2)}

    def test_total_columns_is_shared_by_whole_day(self):
        placed = pack_columns(
            [
                timed("a", "09:00", "10:00"),
                timed("b", "09:00", "10:00"),
                timed("lunch", "14:00", "15:00"),
            ]
        )

        assert slots(placed) == {"a": (0, 2), "b": (1, 2), "lunch": (0, 2)}
        assert placed[-1].width_pct == 50

    def test_missing_end_occupies_one_hour(self):
        placed = pack_columns([timed("a", "09:00"), timed("b", "09:59", "10:30")])

        assert slots(placed) == {"a": (0, 2), "b": (1, 2)}
        assert placed[0].end_minutes == 600

    def test_missing_end_does_not_reach_next_hour(self):
        placed = pack_columns([timed("a", "09:00"), timed("b", "10:00", "10:30")])

        assert slots(placed) == {"a": (0, 1), "b": (0, 1)}

    def test_missing_start_is_midnight_to_one(self):
        placed = pack_columns(
            [timed("b", "00:30", "01:00"), timed("no-start", None), timed("c", "01:00", "02:00")]
        )

        assert (placed[0].event.id, placed[0].start_minutes, placed[0].end_minutes) == ("no-start", 0, 60)
        assert slots(placed) == {"no-start": (0, 2), "b": (1, 2), "c": (0, 2)}

    def test_output_is_sorted_by_start_then_end(self):
        placed = pack_columns(
            [
                timed("late", "15:00", "16:00"),
                timed("long", "09:00", "12:00"),
                timed("short", "09:00", "09:30"),
            ]
        )

        assert [p.event.id for p in placed] == ["short", "long", "late"]

    def test_exact_ties_keep_input_order(self):
        placed = pack_columns([timed("first", "09:00", "10:00"), timed("second", "09:00", "10:00")])

        assert [(p.event.id, p.column) for p in placed] == [("first", 0), ("second", 1)]

    def test_first_fit_reuses_lowest_free_column(self):
        placed = pack_columns(
            [
                timed("a", "09:00", "11:00"),
                timed("b", "09:30", "10:00"),
                timed("c", "10:00", "10:30"),
            ]
        )

        # c starts when b ends, so it drops back into column 1
        assert slots(placed) == {"a": (0, 2), "b": (1, 2), "c": (1, 2)}

    def test_no_two_overlapping_events_share_a_column(self):
        events = [
            timed("a", "08:00", "09:30"),
            timed("b", "08:30", "09:00"),
            timed("c", "09:00", "10:00"),
            timed("d", "09:15"),
            timed("e", "12:00", "11:00"),
        ]
        placed = pack_columns(events)

        for i, p in enumerate(placed):
            for q in placed[i + 1:]:
                if p.start_minutes < q.end_minutes and p.end_minutes > q.start_minutes:
                    assert p.column != q.column
            assert 0 <= p.column < p.total_columns

    def test_duplicate_ids_are_placed_independently(self):
        placed = pack_columns([timed("same", "09:00", "10:00"), timed("same", "09:00", "10:00")])

        assert sorted(p.column for p in placed) == [0, 1]

    def test_empty(self):
        assert pack_columns([]) == []

    def test_geometry_percentages(self):
        placed = pack_columns(
            [timed("a", "09:00", "10:00"), timed("b", "09:00", "10:00"), timed("c", "09:00", "10:00")]
        )

        assert [round(p.left_pct, 2) for p in placed] == [0, 33.33, 66.67]
        assert all(round(p.width_pct, 2) == 33.33 for p in placed)


class TestGridGeometry:
    def test_event_top(self):
        assert event_top("09:30", 8) == 120
        assert event_top("08:00", 8) == 0
        assert event_top(None, 8) == 0

    def test_event_height(self):
        assert event_height("09:00", "10:30") == 120
        assert event_height("09:00", None) == 80
        assert event_height("10:00", "09:00") == 80

    def test_custom_hour_height(self):
        assert event_top("10:00", 8, hour_height=60) == 120
        assert event_height("10:00", "10:15", hour_height=60) == 15

    @pytest.mark.parametrize(
        "hour,label",
        [(0, "12 AM"), (1, "1 AM"), (11, "11 AM"), (12, "12 PM"), (13, "1 PM"), (23, "11 PM")],
    )
    def test_format_hour(self, hour, label):
        assert format_hour(hour) == label

    def test_hour_labels_inclusive(self):
        assert hour_labels(8, 11) == ["8 AM", "9 AM", "10 AM", "11 AM"]
