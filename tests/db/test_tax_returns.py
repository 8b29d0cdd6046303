"""Tests for tax return database operations."""

from datetime import date
from decimal import Decimal

import pytest

from nexus.errors import BusinessRuleError, InvalidStatusError
from nexus.models import (
    TaxPayment,
    TaxReturnCreate,
    TaxReturnStatus,
    TaxReturnUpdate,
    TaxType,
)

TODAY = date(2026, 10, 18)


def _create(
    db,
    company_id,
    tax_type=TaxType.VAT,
    period="2026-09",
    amount="900000",
    due_date=date(2026, 10, 15),
    **kwargs,
):
    return db.tax_returns.create_return(
        company_id,
        TaxReturnCreate(
            tax_type=tax_type,
            period=period,
            amount=Decimal(amount),
            due_date=due_date,
            **kwargs,
        ),
    )


@pytest.fixture
def vat_return(db, company):
    return _create(db, company.id)


class TestTaxReturnOperations:
    """Test tax return database operations."""

    def test_create_assigns_reference(self, db, company, vat_return):
        assert vat_return.reference == "VAT-2026-001"
        assert vat_return.status == TaxReturnStatus.PENDING
        assert vat_return.paid_amount == Decimal("0")

        second = _create(db, company.id, period="2026-10", due_date=date(2026, 11, 15))
        paye = _create(db, company.id, tax_type=TaxType.PAYE, amount="462000")
        assert second.reference == "VAT-2026-002"
        assert paye.reference == "PAYE-2026-001"

    def test_duplicate_reference(self, db, company, vat_return):
        with pytest.raises(ValueError):
            _create(db, company.id, reference="VAT-2026-001")

    def test_period_format(self):
        with pytest.raises(ValueError):
            TaxReturnCreate(
                tax_type=TaxType.CIT,
                period="2026-13",
                amount=Decimal("1"),
                due_date=TODAY,
            )
        assert TaxReturnCreate(
            tax_type=TaxType.QIT, period="2026-Q3", amount=Decimal("1"), due_date=TODAY
        ).period == "2026-Q3"

    def test_list_filters(self, db, company, vat_return):
        _create(
            db,
            company.id,
            tax_type=TaxType.CIT,
            period="2025",
            amount="3000000",
            due_date=date(2026, 3, 31),
        )

        returns, total = db.tax_returns.list_returns(company.id)
        assert total == 2
        assert returns[0].id == vat_return.id

        returns, total = db.tax_returns.list_returns(company.id, period="2025")
        assert [r.tax_type for r in returns] == [TaxType.CIT]

        returns, total = db.tax_returns.list_returns(company.id, tax_type=TaxType.VAT)
        assert total == 1

    def test_submit_once(self, db, company, vat_return):
        submitted = db.tax_returns.submit_return(company.id, vat_return.id, TODAY)
        assert submitted.status == TaxReturnStatus.SUBMITTED
        assert submitted.submission_date == TODAY

        with pytest.raises(InvalidStatusError) as exc:
            db.tax_returns.submit_return(company.id, vat_return.id)
        assert exc.value.code == "ALREADY_SUBMITTED"

    def test_edit_only_pending(self, db, company, vat_return):
        updated = db.tax_returns.update_return(
            company.id, vat_return.id, TaxReturnUpdate(amount=Decimal("950000"))
        )
        assert updated.amount == Decimal("950000")

        db.tax_returns.submit_return(company.id, vat_return.id)
        with pytest.raises(InvalidStatusError):
            db.tax_returns.update_return(
                company.id, vat_return.id, TaxReturnUpdate(amount=Decimal("1"))
            )
        with pytest.raises(InvalidStatusError):
            db.tax_returns.delete_return(company.id, vat_return.id)

    def test_payments_settle_return(self, db, company, vat_return):
        with pytest.raises(InvalidStatusError):
            db.tax_returns.record_payment(
                company.id, vat_return.id, TaxPayment(amount=Decimal("100"))
            )

        db.tax_returns.submit_return(company.id, vat_return.id, TODAY)
        partial = db.tax_returns.record_payment(
            company.id, vat_return.id, TaxPayment(amount=Decimal("400000"))
        )
        assert partial.status == TaxReturnStatus.SUBMITTED
        assert partial.paid_amount == Decimal("400000")

        with pytest.raises(BusinessRuleError) as exc:
            db.tax_returns.record_payment(
                company.id, vat_return.id, TaxPayment(amount=Decimal("600000"))
            )
        assert exc.value.code == "OVERPAYMENT"

        paid = db.tax_returns.record_payment(
            company.id,
            vat_return.id,
            TaxPayment(amount=Decimal("500000"), paid_on=TODAY),
        )
        assert paid.status == TaxReturnStatus.PAID
        assert paid.paid_date == TODAY

    def test_deadlines_and_overdue(self, db, company, vat_return):
        november = _create(db, company.id, period="2026-10", due_date=date(2026, 11, 15))
        december = _create(db, company.id, period="2026-11", due_date=date(2026, 12, 15))
        submitted = _create(
            db, company.id, tax_type=TaxType.PAYE, due_date=date(2026, 11, 1)
        )
        db.tax_returns.submit_return(company.id, submitted.id, TODAY)

        deadlines = db.tax_returns.deadlines(company.id, today=TODAY)
        assert [r.id for r in deadlines] == [november.id, december.id]

        overdue = db.tax_returns.overdue(company.id, today=TODAY)
        assert [r.id for r in overdue] == [vat_return.id]

    def test_statistics(self, db, company, vat_return):
        paye = _create(
            db,
            company.id,
            tax_type=TaxType.PAYE,
            amount="462000",
            due_date=date(2026, 11, 15),
        )
        db.tax_returns.submit_return(company.id, paye.id, TODAY)
        db.tax_returns.record_payment(
            company.id, paye.id, TaxPayment(amount=Decimal("462000"))
        )

        stats = db.tax_returns.statistics(company.id, today=TODAY)

        assert stats.total == 2
        assert stats.pending == 1
        assert stats.paid == 1
        assert stats.overdue == 1
        assert stats.total_amount == Decimal("1362000")
        assert stats.total_paid == Decimal("462000")
        assert stats.by_type == {"VAT": Decimal("900000"), "PAYE": Decimal("462000")}

    def test_missing_return(self, db, company):
        assert db.tax_returns.get_return(company.id, 999) is None
        assert db.tax_returns.submit_return(company.id, 999) is None
        assert db.tax_returns.delete_return(company.id, 999) is False
