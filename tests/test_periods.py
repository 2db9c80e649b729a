"""
Tests for period resolution (monthly / quarterly / yearly intervals).
"""

from datetime import date, datetime

import pytest

from app.services.periods import month_period, resolve_period, shift_month


class TestShiftMonth:

    def test_same_month(self):
        assert shift_month(2024, 3) == (2024, 3)

    def test_rolls_back_over_year_boundary(self):
        assert shift_month(2024, 1, -1) == (2023, 12)
        assert shift_month(2024, 3, -14) == (2023, 1)

    def test_out_of_range_months_roll_over(self):
        assert shift_month(2024, 13) == (2025, 1)
        assert shift_month(2024, 0) == (2023, 12)


class TestMonthly:

    def test_march(self):
        start, end = resolve_period("monthly", 2024, 3)
        assert start == datetime(2024, 3, 1, 0, 0, 0)
        assert end == datetime(2024, 3, 31, 23, 59, 59)

    def test_leap_february(self):
        _, end = resolve_period("monthly", 2024, 2)
        assert end == datetime(2024, 2, 29, 23, 59, 59)

    def test_non_leap_february(self):
        _, end = resolve_period("monthly", 2023, 2)
        assert end == datetime(2023, 2, 28, 23, 59, 59)

    def test_defaults_to_current_month(self):
        start, end = resolve_period(today=date(2024, 11, 20))
        assert start == datetime(2024, 11, 1)
        assert end == datetime(2024, 11, 30, 23, 59, 59)

    def test_unknown_period_type_resolves_as_month(self):
        assert resolve_period("weekly", 2024, 6) == month_period(2024, 6)

    def test_month_13_is_january_next_year(self):
        start, end = resolve_period("monthly", 2024, 13)
        assert start == datetime(2025, 1, 1)
        assert end == datetime(2025, 1, 31, 23, 59, 59)

    def test_month_0_is_december_previous_year(self):
        start, end = resolve_period("monthly", 2024, 0)
        assert start == datetime(2023, 12, 1)
        assert end == datetime(2023, 12, 31, 23, 59, 59)


class TestQuarterly:

    def test_february_is_first_quarter(self):
        start, end = resolve_period("quarterly", 2024, 2)
        assert start == datetime(2024, 1, 1)
        assert end == datetime(2024, 3, 31, 23, 59, 59)

    def test_fourth_quarter(self):
        start, end = resolve_period("quarterly", 2024, 11)
        assert start == datetime(2024, 10, 1)
        assert end == datetime(2024, 12, 31, 23, 59, 59)

    @pytest.mark.parametrize("month", range(1, 13))
    def test_always_spans_three_whole_months(self, month):
        start, end = resolve_period("quarterly", 2023, month)
        assert start.day == 1
        assert end.month - start.month == 2
        assert start.month == (month - 1) // 3 * 3 + 1
        # end is the last second of its month
        assert month_period(end.year, end.month)[1] == end


class TestYearly:

    def test_full_year(self):
        start, end = resolve_period("yearly", 2023, 7)
        assert start == datetime(2023, 1, 1)
        assert end == datetime(2023, 12, 31, 23, 59, 59)

    def test_defaults_to_current_year(self):
        start, _ = resolve_period("yearly", today=date(2022, 5, 5))
        assert start == datetime(2022, 1, 1)


class TestProperties:

    @pytest.mark.parametrize("period_type", ["monthly", "quarterly", "yearly"])
    @pytest.mark.parametrize("month", [1, 2, 6, 12])
    def test_start_not_after_end(self, period_type, month):
        start, end = resolve_period(period_type, 2024, month)
        assert start <= end
        assert (start.hour, start.minute, start.second) == (0, 0, 0)
        assert (end.hour, end.minute, end.second) == (23, 59, 59)

    def test_year_outside_datetime_range_raises(self):
        with pytest.raises(ValueError):
            resolve_period("monthly", 10000, 1)
