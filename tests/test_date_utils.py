"""Tests for timestamp formatting."""

from datetime import datetime, timedelta, timezone

from incident_deck.utils.date_utils import format_date, format_datetime


class TestDateFormatting:
    def test_format_date_from_iso_string(self):
        assert format_date("2026-04-12T15:05:00Z") == "12 April, 2026"

    def test_format_datetime_afternoon(self):
        assert format_datetime("2026-04-12T15:05:00Z") == "12 April, 2026, 3:05 PM"

    def test_midnight_and_noon(self):
        assert format_datetime(datetime(2026, 1, 2, 0, 7)) == "2 January, 2026, 12:07 AM"
        assert format_datetime(datetime(2026, 1, 2, 12, 0)) == "2 January, 2026, 12:00 PM"

    def test_timezone_conversion(self):
        plus_two = timezone(timedelta(hours=2))
        assert format_datetime("2026-04-12T23:30:00Z", tz=plus_two) == "13 April, 2026, 1:30 AM"
