"""Tests for the CSV calendar import script."""

from datetime import date
from zoneinfo import ZoneInfo

import pytest

from core.database import create_calendar_event, get_connection, list_calendar_events
from scripts.import_calendar_csv import (
    extract_time,
    get_upcoming_monday,
    main,
    parse_date,
    parse_rows,
)

LA = ZoneInfo("America/Los_Angeles")


@pytest.mark.parametrize(
    "today,expected",
    [
        (date(2025, 1, 6), date(2025, 1, 6)),
        (date(2025, 1, 7), date(2025, 1, 13)),
        (date(2025, 1, 12), date(2025, 1, 13)),
    ],
)
def test_get_upcoming_monday(today, expected):
    assert get_upcoming_monday(today) == expected


@pytest.mark.parametrize(
    "value,expected",
    [
        ("2024-03-05T09:30:00Z", "09:30"),
        ("2024-03-05T09:30:00.000-08:00", "09:30"),
        ("2024-03-05 14:15:00", "14:15"),
        ("14:15:00", "14:15"),
        ("9:15", None),
        ("", None),
        (None, None),
    ],
)
def test_extract_time(value, expected):
    assert extract_time(value) == expected


def test_parse_date():
    assert parse_date("2024-03-05", LA) == date(2024, 3, 5)
    assert parse_date("2024-03-05T23:30:00", LA) == date(2024, 3, 5)
    # 03:00 UTC is still the previous evening in Los Angeles
    assert parse_date("2024-03-06T03:00:00Z", LA) == date(2024, 3, 5)
    assert parse_date("not a date", LA) is None
    assert parse_date("", LA) is None


class TestParseRows:
    def test_maps_onto_target_week(self):
        rows = [
            {"title": "Piano", "start_time": "2024-03-06T16:00:00", "end_time": "2024-03-06T17:00:00", "color": "Purple"},
            {"title": "Holiday", "start_time": "2024-03-10", "is_all_day": "TRUE"},
        ]

        events, skipped = parse_rows(rows, date(2025, 1, 6), LA)

        assert skipped == []
        assert events[0] == {
            "title": "Piano",
            "color": "purple",
            "is_all_day": False,
            "is_recurring": False,
            "start_time": "16:00",
            "end_time": "17:00",
            "specific_date": "2025-01-08",
            "days_of_week": None,
        }
        assert events[1]["specific_date"] == "2025-01-12"
        assert events[1]["is_all_day"] is True
        assert events[1]["start_time"] is None
        assert events[1]["color"] == "blue"

    def test_falls_back_to_created_date(self):
        rows = [{"title": "Chores", "start_time": "", "created_date": "2024-03-04T12:00:00"}]

        events, _ = parse_rows(rows, date(2025, 1, 6), LA)

        assert events[0]["specific_date"] == "2025-01-06"

    def test_skips_rows_without_title_or_date(self):
        rows = [{"title": "  ", "start_time": "2024-03-04"}, {"title": "Mystery", "start_time": "someday"}]

        events, skipped = parse_rows(rows, date(2025, 1, 6), LA)

        assert events == []
        assert skipped == [{"title": "Mystery", "reason": "no valid date"}]


class TestMain:
    def test_replaces_existing_events(self, tmp_path, db_conn, capsys):
        db_path = tmp_path / "test.db"
        create_calendar_event(db_conn, {"title": "Old", "is_recurring": True, "days_of_week": [0]})
        csv_path = tmp_path / "export.csv"
        csv_path.write_text(
            "title,start_time,end_time,is_all_day,color\n"
            "Piano,2024-03-06T16:00:00,2024-03-06T17:00:00,false,purple\n"
            ",,,,\n"
            "Mystery,someday,,false,\n"
        )

        assert main(csv_path, db_path, today=date(2025, 1, 7)) == 0

        conn = get_connection(db_path)
        try:
            events = list_calendar_events(conn)
        finally:
            conn.close()
        assert [(e["title"], e["specific_date"]) for e in events] == [("Piano", "2025-01-15")]
        out = capsys.readouterr().out
        assert "Inserted 1 events" in out
        assert "- Mystery: no valid date" in out

    def test_no_events_aborts(self, tmp_path, db_conn):
        csv_path = tmp_path / "export.csv"
        csv_path.write_text("title,start_time\nMystery,someday\n")

        assert main(csv_path, tmp_path / "test.db", today=date(2025, 1, 7)) == 1
        assert list_calendar_events(db_conn) == []
