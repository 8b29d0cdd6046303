"""Tests for depreciation schedules and positions."""

from datetime import date
from decimal import Decimal

import pytest

from nexus.calculations import (
    depreciation_position,
    depreciation_schedule,
    months_between,
)


class TestDepreciationSchedule:
    """Test year-by-year schedules."""

    def test_straight_line(self):
        entries = depreciation_schedule("1200000", "0", 4, "straight_line", "RWF")

        assert [e.depreciation for e in entries] == [Decimal("300000")] * 4
        assert entries[0].opening_value == Decimal("1200000")
        assert entries[-1].closing_value == Decimal("0")

    def test_declining_balance_closes_on_residual(self):
        entries = depreciation_schedule("10000", "1000", 5, "declining_balance", "USD")

        assert [e.depreciation for e in entries] == [
            Decimal("4000.00"),
            Decimal("2400.00"),
            Decimal("1440.00"),
            Decimal("864.00"),
            Decimal("296.00"),
        ]
        assert entries[-1].closing_value == Decimal("1000.00")

    def test_sum_of_years(self):
        entries = depreciation_schedule("15000", "0", 5, "sum_of_years", "RWF")

        assert [e.depreciation for e in entries] == [
            Decimal("5000"),
            Decimal("4000"),
            Decimal("3000"),
            Decimal("2000"),
            Decimal("1000"),
        ]

    def test_final_year_absorbs_rounding(self):
        entries = depreciation_schedule("1000", "0", 3, "straight_line", "RWF")

        assert sum(e.depreciation for e in entries) == Decimal("1000")
        assert entries[-1].closing_value == Decimal("0")

    def test_each_year_opens_on_previous_close(self):
        entries = depreciation_schedule("9000", "500", 4, "sum_of_years", "USD")

        for previous, current in zip(entries, entries[1:]):
            assert current.opening_value == previous.closing_value

    def test_residual_above_cost_raises(self):
        with pytest.raises(ValueError):
            depreciation_schedule("1000", "2000", 3, "straight_line", "RWF")

    def test_unknown_method_raises(self):
        with pytest.raises(ValueError):
            depreciation_schedule("1000", "0", 3, "units_of_production", "RWF")


class TestDepreciationPosition:
    """Test depreciation to a date."""

    def test_partial_year(self):
        position = depreciation_position(
            "1200000",
            "0",
            4,
            "straight_line",
            date(2024, 1, 1),
            date(2025, 7, 1),
            "RWF",
        )

        assert position.months_used == 18
        assert position.annual_depreciation == Decimal("300000")
        assert position.accumulated_depreciation == Decimal("450000")
        assert position.book_value == Decimal("750000")

    def test_fully_depreciated_stops_at_residual(self):
        position = depreciation_position(
            "10000",
            "1000",
            3,
            "straight_line",
            date(2015, 1, 1),
            date(2025, 1, 1),
            "USD",
        )

        assert position.accumulated_depreciation == Decimal("9000.00")
        assert position.book_value == Decimal("1000.00")

    def test_before_acquisition_is_untouched(self):
        position = depreciation_position(
            "5000",
            "0",
            5,
            "straight_line",
            date(2025, 1, 1),
            date(2024, 6, 1),
            "RWF",
        )

        assert position.months_used == 0
        assert position.accumulated_depreciation == Decimal("0")
        assert position.book_value == Decimal("5000")


def test_months_between():
    assert months_between(date(2024, 1, 15), date(2024, 4, 1)) == 3
    assert months_between(date(2024, 5, 20), date(2024, 3, 1)) == 0
