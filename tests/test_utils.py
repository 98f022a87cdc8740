"""Tests for date parsing and currency helpers."""

from datetime import date, datetime

import pytest
from utils import calculate_remaining, parse_flexible_date, round_currency


class TestParseFlexibleDate:
    """Test cases for parse_flexible_date function."""

    def test_iso_format(self):
        """Should parse YYYY-MM-DD."""
        assert parse_flexible_date("1985-03-15") == date(1985, 3, 15)

    def test_us_format(self):
        """Should parse MM/DD/YYYY."""
        assert parse_flexible_date("03/15/1985") == date(1985, 3, 15)

    def test_compact_format(self):
        """Should parse YYYYMMDD."""
        assert parse_flexible_date("19850315") == date(1985, 3, 15)

    def test_timestamp_truncated_to_date(self):
        """Should drop the time portion of an ISO timestamp."""
        assert parse_flexible_date("2024-02-01T10:30:00Z") == date(2024, 2, 1)

    def test_surrounding_whitespace(self):
        assert parse_flexible_date("  2024-02-01 ") == date(2024, 2, 1)

    def test_date_and_datetime_pass_through(self):
        assert parse_flexible_date(date(2024, 2, 1)) == date(2024, 2, 1)
        assert parse_flexible_date(datetime(2024, 2, 1, 9, 0)) == date(2024, 2, 1)

    @pytest.mark.parametrize("value", [None, "", "not-a-date", "2024-02-30", "13/01/2024"])
    def test_unparseable_returns_none(self, value):
        assert parse_flexible_date(value) is None

    @pytest.mark.parametrize("value", ["1899-12-31", "2101-01-01", date(1850, 1, 1)])
    def test_out_of_range_years_rejected(self, value):
        assert parse_flexible_date(value) is None


class TestCurrency:
    def test_round_currency(self):
        assert round_currency(14.004) == 14.0
        assert round_currency(1200.456) == 1200.46

    def test_remaining_amount(self):
        assert calculate_remaining(1500.00, 375.25) == 1124.75

    def test_remaining_never_negative(self):
        """Should clamp at zero when more than the total has been met."""
        assert calculate_remaining(500.00, 650.00) == 0.0
