"""Tests for exchange rate and currency transaction database operations."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from nexus.errors import RateNotFoundError
from nexus.models import (
    ConversionRequest,
    CurrencyRateCreate,
    CurrencyRateUpdate,
    CurrencyTransactionCreate,
    CurrencyTransactionType,
)


@pytest.fixture
def usd_rates(db, company):
    """USD/RWF at 1300 in January and 1350 from June."""
    return [
        db.currency.create_rate(
            company.id,
            CurrencyRateCreate(
                from_currency="usd", to_currency="RWF", rate=rate, rate_date=rate_date
            ),
        )
        for rate, rate_date in (
            (Decimal("1300"), date(2026, 1, 1)),
            (Decimal("1350"), date(2026, 6, 1)),
        )
    ]


class TestCurrencyModels:
    """Test currency input validation."""

    def test_unsupported_currency(self):
        with pytest.raises(ValidationError):
            ConversionRequest(from_currency="XYZ", to_currency="RWF", amount=1)

    def test_rate_needs_two_currencies(self):
        with pytest.raises(ValidationError):
            CurrencyRateCreate(
                from_currency="RWF",
                to_currency="RWF",
                rate=Decimal("1"),
                rate_date=date(2026, 1, 1),
            )


class TestCurrencyOperations:
    """Test exchange rate and transaction database operations."""

    def test_codes_are_uppercased(self, usd_rates):
        assert usd_rates[0].from_currency == "USD"

    def test_duplicate_rate_rejected(self, db, company, usd_rates):
        with pytest.raises(ValueError):
            db.currency.create_rate(
                company.id,
                CurrencyRateCreate(
                    from_currency="USD",
                    to_currency="RWF",
                    rate=Decimal("1301"),
                    rate_date=date(2026, 1, 1),
                ),
            )

    def test_convert_uses_latest_rate(self, db, company, usd_rates):
        result = db.currency.convert(
            company.id,
            ConversionRequest(from_currency="USD", to_currency="RWF", amount=100),
        )

        assert result.rate == Decimal("1350")
        assert result.converted_amount == Decimal("135000")
        assert result.rate_date == date(2026, 6, 1)
        assert result.inverse is False

    def test_convert_on_date(self, db, company, usd_rates):
        result = db.currency.convert(
            company.id,
            ConversionRequest(
                from_currency="USD",
                to_currency="RWF",
                amount=100,
                rate_date=date(2026, 3, 1),
            ),
        )

        assert result.converted_amount == Decimal("130000")

    def test_convert_inverse(self, db, company, usd_rates):
        result = db.currency.convert(
            company.id,
            ConversionRequest(from_currency="RWF", to_currency="USD", amount=1000000),
        )

        assert result.inverse is True
        assert result.rate == Decimal("0.000741")
        assert result.converted_amount == Decimal("740.74")

    def test_convert_inverse_large_amount(self, db, company, usd_rates):
        result = db.currency.convert(
            company.id,
            ConversionRequest(
                from_currency="RWF",
                to_currency="USD",
                amount=1300000000,
                rate_date=date(2026, 3, 1),
            ),
        )

        assert result.converted_amount == Decimal("1000000.00")
        assert result.rate == Decimal("0.000769")

    def test_convert_same_currency(self, db, company):
        result = db.currency.convert(
            company.id,
            ConversionRequest(from_currency="RWF", to_currency="RWF", amount=5000),
        )

        assert result.rate == Decimal("1")
        assert result.converted_amount == Decimal("5000")

    def test_convert_without_rate(self, db, company, usd_rates):
        with pytest.raises(RateNotFoundError):
            db.currency.convert(
                company.id,
                ConversionRequest(from_currency="EUR", to_currency="KES", amount=10),
            )

    def test_deactivated_rate_is_ignored(self, db, company, usd_rates):
        db.currency.deactivate_rate(company.id, usd_rates[1].id)

        result = db.currency.convert(
            company.id,
            ConversionRequest(from_currency="USD", to_currency="RWF", amount=1),
        )
        assert result.rate == Decimal("1300")

    def test_update_rate(self, db, company, usd_rates):
        updated = db.currency.update_rate(
            company.id, usd_rates[0].id, CurrencyRateUpdate(rate=Decimal("1310"))
        )
        assert updated.rate == Decimal("1310")

    def test_latest_rates(self, db, company, usd_rates):
        latest = db.currency.latest_rates(company.id, "rwf")

        assert latest.base_currency == "RWF"
        assert latest.rates == {"USD": Decimal("0.000741")}
        assert latest.as_of == {"USD": date(2026, 6, 1)}

    def test_transaction_derives_rate_and_amount(self, db, company, usd_rates):
        transaction = db.currency.create_transaction(
            company.id,
            CurrencyTransactionCreate(
                transaction_type=CurrencyTransactionType.EXCHANGE,
                from_currency="USD",
                to_currency="RWF",
                from_amount=Decimal("200"),
                transaction_date=date(2026, 7, 15),
            ),
        )

        assert transaction.exchange_rate == Decimal("1350")
        assert transaction.to_amount == Decimal("270000")

    def test_transaction_rate_from_amounts(self, db, company):
        transaction = db.currency.create_transaction(
            company.id,
            CurrencyTransactionCreate(
                transaction_type=CurrencyTransactionType.SETTLEMENT,
                from_currency="USD",
                to_currency="RWF",
                from_amount=Decimal("100"),
                to_amount=Decimal("132500"),
                transaction_date=date(2026, 7, 15),
            ),
        )

        assert transaction.exchange_rate == Decimal("1325")

    def test_transaction_without_rate(self, db, company):
        with pytest.raises(RateNotFoundError):
            db.currency.create_transaction(
                company.id,
                CurrencyTransactionCreate(
                    transaction_type=CurrencyTransactionType.EXCHANGE,
                    from_currency="GBP",
                    to_currency="RWF",
                    from_amount=Decimal("10"),
                    transaction_date=date(2026, 7, 15),
                ),
            )

    def test_statistics(self, db, company, usd_rates):
        db.currency.create_transaction(
            company.id,
            CurrencyTransactionCreate(
                transaction_type=CurrencyTransactionType.EXCHANGE,
                from_currency="USD",
                to_currency="RWF",
                from_amount=Decimal("200"),
                transaction_date=date(2026, 7, 15),
            ),
        )

        stats = db.currency.statistics(company.id)

        assert stats.total_rates == 2
        assert stats.active_rates == 2
        assert stats.currency_pairs == ["USD/RWF"]
        assert stats.total_transactions == 1
        assert stats.volume_by_currency == {"USD": Decimal("200")}
        assert stats.by_type == {"exchange": 1}
