"""
Tests for calendar-date normalization and business-day counting.
"""

from datetime import date, datetime, timezone

import pytest

from bidflow.engine.dates import business_days_between, calendar_days_between, to_calendar_date


class TestToCalendarDate:

    def test_date_only_string(self):
        assert to_calendar_date("2024-06-12") == date(2024, 6, 12)

    def test_datetime_string_keeps_its_own_day(self):
        # Late-evening values with an offset must not roll into the next day
        assert to_calendar_date("2024-06-12T23:30:00-05:00") == date(2024, 6, 12)
        assert to_calendar_date("2024-06-12T00:15:00Z") == date(2024, 6, 12)
        assert to_calendar_date("2024-06-12 08:00:00") == date(2024, 6, 12)

    def test_date_and_datetime_objects(self):
        assert to_calendar_date(date(2024, 6, 12)) == date(2024, 6, 12)
        assert to_calendar_date(datetime(2024, 6, 12, 23, 59, tzinfo=timezone.utc)) == date(2024, 6, 12)

    @pytest.mark.parametrize("value", [None, "", "   ", "06/12/2024", "2024-13-01", "2024-02-30", "soon", 20240612])
    def test_unusable_values_become_none(self, value):
        assert to_calendar_date(value) is None


class TestBusinessDays:

    def test_weekdays_in_same_week(self):
        # Monday -> Wednesday
        assert business_days_between(date(2024, 6, 10), date(2024, 6, 12)) == 2

    def test_skips_weekend(self):
        # Friday -> Monday
        assert business_days_between(date(2024, 6, 14), date(2024, 6, 17)) == 1

    def test_weekend_target_from_friday(self):
        assert business_days_between(date(2024, 6, 14), date(2024, 6, 15)) == 0
        assert business_days_between(date(2024, 6, 14), date(2024, 6, 16)) == 0

    def test_full_weeks(self):
        assert business_days_between(date(2024, 6, 10), date(2024, 6, 24)) == 10

    def test_non_forward_ranges_are_zero(self):
        assert business_days_between(date(2024, 6, 10), date(2024, 6, 10)) == 0
        assert business_days_between(date(2024, 6, 12), date(2024, 6, 10)) == 0

    def test_calendar_days_signed(self):
        assert calendar_days_between(date(2024, 6, 10), date(2024, 6, 9)) == -1
        assert calendar_days_between(date(2024, 6, 10), date(2024, 7, 10)) == 30
