"""Tests for flat-rate tax and deadline severity."""

from datetime import date
from decimal import Decimal

from nexus.calculations import deadline_severity, flat_tax


class TestFlatTax:
    def test_vat_on_whole_units(self):
        result = flat_tax("1000000", "18", "RWF")

        assert result.tax_amount == Decimal("180000")
        assert result.total_amount == Decimal("1180000")

    def test_rounds_to_cents(self):
        assert flat_tax("99.99", "18", "USD").tax_amount == Decimal("18.00")


class TestDeadlineSeverity:
    def test_levels(self):
        today = date(2026, 3, 10)

        assert deadline_severity(date(2026, 3, 1), today) == "high"
        assert deadline_severity(date(2026, 3, 15), today) == "high"
        assert deadline_severity(date(2026, 3, 30), today) == "medium"
        assert deadline_severity(date(2026, 6, 30), today) == "low"
