"""Tests for calendar date helpers (month clamping, ISO parsing)."""

from datetime import date, datetime

from cashforecast.sdk.dates import (
    add_days,
    add_months,
    add_years,
    difference_in_days,
    format_month_label,
    month_key,
    parse_iso_date,
    start_of_day,
    to_iso_date,
)


class TestAddMonths:
    """Month arithmetic clamps to the last valid day."""

    def test_leap_year_clamp(self):
        assert add_months(date(2024, 1, 31), 1) == date(2024, 2, 29)

    def test_non_leap_year_clamp(self):
        assert add_months(date(2023, 1, 31), 1) == date(2023, 2, 28)

    def test_preserves_day_when_valid(self):
        assert add_months(date(2024, 3, 15), 2) == date(2024, 5, 15)

    def test_crosses_year_boundary(self):
        assert add_months(date(2024, 11, 30), 3) == date(2025, 2, 28)

    def test_negative_months(self):
        assert add_months(date(2024, 3, 31), -1) == date(2024, 2, 29)

    def test_accepts_datetime(self):
        assert add_months(datetime(2024, 1, 31, 18, 30), 1) == date(2024, 2, 29)


class TestAddYearsAndDays:

    def test_feb_29_clamps_in_non_leap_year(self):
        assert add_years(date(2024, 2, 29), 1) == date(2025, 2, 28)

    def test_add_days_crosses_month(self):
        assert add_days(date(2024, 1, 28), 7) == date(2024, 2, 4)

    def test_difference_in_days(self):
        assert difference_in_days(date(2024, 1, 1), date(2024, 3, 1)) == 60
        assert difference_in_days(date(2024, 3, 1), date(2024, 1, 1)) == -60


class TestParseIsoDate:
    """parse_iso_date returns None instead of raising."""

    def test_valid_date(self):
        assert parse_iso_date("2025-07-04") == date(2025, 7, 4)

    def test_empty_is_none(self):
        assert parse_iso_date("") is None
        assert parse_iso_date(None) is None

    def test_impossible_date_is_none(self):
        assert parse_iso_date("2025-02-30") is None

    def test_garbage_is_none(self):
        assert parse_iso_date("not-a-date") is None

    def test_missing_day_defaults_to_first(self):
        assert parse_iso_date("2025-07") == date(2025, 7, 1)

    def test_round_trips_through_to_iso_date(self):
        assert to_iso_date(parse_iso_date("2024-12-09")) == "2024-12-09"


class TestMonthHelpers:

    def test_start_of_day_drops_time(self):
        assert start_of_day(datetime(2025, 5, 6, 23, 59)) == date(2025, 5, 6)

    def test_month_key(self):
        assert month_key("2025-01-31") == "2025-01"

    def test_format_month_label(self):
        assert format_month_label("2025-01") == "January 2025"

    def test_format_month_label_passes_through_bad_key(self):
        assert format_month_label("bogus") == "bogus"
