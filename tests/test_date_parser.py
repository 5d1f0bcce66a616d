"""Tests for date parsing utilities."""

from datetime import date

import pytest

from khata.utils.date_parser import (
    last_n_months,
    month_label,
    month_range,
    next_month_day,
    parse_date,
    period_key,
)

TODAY = date(2024, 3, 15)


class TestParseDate:
    """Tests for parse_date."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("2024-01-15", date(2024, 1, 15)),
            ("2024-01-15T10:30:00Z", date(2024, 1, 15)),
            ("15/01/2024", date(2024, 1, 15)),
            ("15-01-2024", date(2024, 1, 15)),
            ("05/02/24", date(2024, 2, 5)),
            ("05-02-24", date(2024, 2, 5)),
        ],
    )
    def test_known_formats(self, raw, expected):
        assert parse_date(raw, today=TODAY) == expected

    def test_day_first_is_preferred(self):
        """03/04/2024 is the 3rd of April, not March 4th."""
        assert parse_date("03/04/2024", today=TODAY) == date(2024, 4, 3)

    def test_free_text_uses_dateutil(self):
        assert parse_date("15 Jan 2024", today=TODAY) == date(2024, 1, 15)

    def test_surrounding_whitespace(self):
        assert parse_date("  2024-01-15  ", today=TODAY) == date(2024, 1, 15)

    @pytest.mark.parametrize("raw", [None, "", "   ", "not a date", "??"])
    def test_unparseable_falls_back_to_today(self, raw):
        assert parse_date(raw, today=TODAY) == TODAY

    def test_fallback_defaults_to_current_date(self):
        assert parse_date("garbage") == date.today()

    def test_invalid_calendar_date_does_not_raise(self):
        assert isinstance(parse_date("31/02/2024", today=TODAY), date)


class TestCalendarHelpers:
    """Tests for period and month helpers."""

    def test_period_key(self):
        assert period_key(date(2024, 1, 31)) == "2024-01"

    def test_month_range_leap_february(self):
        assert month_range(date(2024, 2, 10)) == (date(2024, 2, 1), date(2024, 2, 29))

    def test_month_range_december(self):
        assert month_range(date(2023, 12, 25)) == (date(2023, 12, 1), date(2023, 12, 31))

    def test_last_n_months_oldest_first(self):
        ranges = last_n_months(3, today=TODAY)

        assert [start for start, _ in ranges] == [
            date(2024, 1, 1),
            date(2024, 2, 1),
            date(2024, 3, 1),
        ]
        assert ranges[-1][1] == date(2024, 3, 31)

    def test_last_n_months_crosses_year(self):
        ranges = last_n_months(4, today=date(2024, 2, 1))
        assert ranges[0][0] == date(2023, 11, 1)

    def test_next_month_day(self):
        assert next_month_day(20, today=TODAY) == date(2024, 4, 20)
        assert next_month_day(11, today=date(2024, 12, 31)) == date(2025, 1, 11)

    def test_month_label(self):
        assert month_label(date(2024, 1, 1)) == "Jan 24"
        assert month_label(date(2024, 1, 1), with_year=False) == "Jan"
