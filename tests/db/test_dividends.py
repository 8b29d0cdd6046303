"""Tests for dividend database operations."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import update

from nexus.calculations import Holding
from nexus.db.schema import dividend_declarations
from nexus.errors import BusinessRuleError, InvalidStatusError, NoShareholdersError
from nexus.models import (
    CompanyCreate,
    DeclarationStatus,
    DistributionPayment,
    DividendDeclarationCreate,
    PaymentMethod,
)


def _holdings(db, company_id):
    return [
        Holding(s.id, s.shareholder_name, s.shares_held)
        for s in db.shareholders.active_holdings(company_id)
    ]


@pytest.fixture
def declaration(db, company):
    """10% of a one million RWF profit."""
    return db.dividends.create_declaration(
        company.id,
        DividendDeclarationCreate(
            profit_amount=Decimal("1000000"),
            dividend_percentage=Decimal("10"),
            approved_by="Board of Directors",
            declaration_date=date(2026, 3, 31),
            financial_year="2025-2026",
        ),
    )


@pytest.fixture
def distributed(db, company, shareholders, declaration):
    """Declaration confirmed and allocated over the register."""
    db.dividends.confirm_declaration(company.id, declaration.id)
    return db.dividends.calculate_distributions(
        company.id, declaration.id, _holdings(db, company.id)
    )


class TestDividendOperations:
    """Test dividend database operations."""

    def test_create_declaration(self, declaration):
        assert declaration.status == DeclarationStatus.DRAFT
        assert declaration.dividend_pool == Decimal("100000")
        assert declaration.tax_rate == Decimal("5")

    def test_confirm_only_drafts(self, db, company, declaration):
        confirmed = db.dividends.confirm_declaration(company.id, declaration.id)
        assert confirmed.status == DeclarationStatus.CONFIRMED

        with pytest.raises(InvalidStatusError):
            db.dividends.confirm_declaration(company.id, declaration.id)

    def test_calculate_requires_confirmation(self, db, company, shareholders, declaration):
        with pytest.raises(InvalidStatusError):
            db.dividends.calculate_distributions(
                company.id, declaration.id, _holdings(db, company.id)
            )

    def test_calculate_distributions(self, db, company, declaration, distributed):
        assert [d.shares_held_at_time for d in distributed] == [600, 400]
        assert [d.gross_amount for d in distributed] == [Decimal("60000"), Decimal("40000")]
        assert [d.tax_amount for d in distributed] == [Decimal("3000"), Decimal("2000")]
        assert [d.net_amount for d in distributed] == [Decimal("57000"), Decimal("38000")]
        assert sum(d.gross_amount for d in distributed) == declaration.dividend_pool

        current = db.dividends.get_declaration(company.id, declaration.id)
        assert current.status == DeclarationStatus.DISTRIBUTED

    def test_recalculate_replaces_distributions(self, db, company, declaration, distributed):
        again = db.dividends.calculate_distributions(
            company.id, declaration.id, _holdings(db, company.id)
        )

        assert len(again) == 2
        assert len(db.dividends.list_distributions(company.id, declaration.id)) == 2

    def test_calculate_without_holders(self, db, company, declaration):
        db.dividends.confirm_declaration(company.id, declaration.id)

        with pytest.raises(NoShareholdersError):
            db.dividends.calculate_distributions(company.id, declaration.id, [])

    def test_pay_all_marks_declaration_paid(self, db, company, declaration, distributed):
        first = db.dividends.mark_distribution_paid(
            company.id,
            distributed[0].id,
            DistributionPayment(
                payment_method=PaymentMethod.MOBILE_MONEY,
                payment_reference="MOMO-123",
                paid_on=date(2026, 4, 15),
            ),
        )
        assert first.is_paid is True
        assert first.paid_on == date(2026, 4, 15)
        assert (
            db.dividends.get_declaration(company.id, declaration.id).status
            == DeclarationStatus.DISTRIBUTED
        )

        db.dividends.mark_distribution_paid(
            company.id, distributed[1].id, DistributionPayment()
        )
        assert (
            db.dividends.get_declaration(company.id, declaration.id).status
            == DeclarationStatus.PAID
        )

    def test_pay_twice_rejected(self, db, company, distributed):
        db.dividends.mark_distribution_paid(
            company.id, distributed[0].id, DistributionPayment()
        )

        with pytest.raises(InvalidStatusError):
            db.dividends.mark_distribution_paid(
                company.id, distributed[0].id, DistributionPayment()
            )

    def test_recalculate_after_payment_rejected(self, db, company, declaration, distributed):
        db.dividends.mark_distribution_paid(
            company.id, distributed[0].id, DistributionPayment()
        )

        with pytest.raises(InvalidStatusError):
            db.dividends.calculate_distributions(
                company.id, declaration.id, _holdings(db, company.id)
            )

    def test_cancel_blocked_by_payment(self, db, company, declaration, distributed):
        db.dividends.mark_distribution_paid(
            company.id, distributed[0].id, DistributionPayment()
        )

        with pytest.raises(InvalidStatusError):
            db.dividends.cancel_declaration(company.id, declaration.id)

    def test_cancel_draft(self, db, company, declaration):
        cancelled = db.dividends.cancel_declaration(company.id, declaration.id)
        assert cancelled.status == DeclarationStatus.CANCELLED

    def test_list_unpaid_distributions(self, db, company, declaration, distributed):
        db.dividends.mark_distribution_paid(
            company.id, distributed[0].id, DistributionPayment()
        )

        unpaid = db.dividends.list_distributions(
            company.id, declaration.id, is_paid=False
        )
        assert [d.id for d in unpaid] == [distributed[1].id]

    def test_statistics(self, db, company, declaration, distributed):
        db.dividends.mark_distribution_paid(
            company.id, distributed[0].id, DistributionPayment()
        )

        stats = db.dividends.statistics(company.id)

        assert stats.total_declarations == 1
        assert stats.total_pool == Decimal("100000")
        assert stats.total_paid == Decimal("57000")
        assert stats.total_outstanding == Decimal("38000")
        assert stats.by_year == {"2025-2026": Decimal("100000")}

    def test_cancel_removes_unpaid_distributions(
        self, db, company, declaration, distributed
    ):
        cancelled = db.dividends.cancel_declaration(company.id, declaration.id)

        assert cancelled.status == DeclarationStatus.CANCELLED
        assert db.dividends.list_distributions(company.id, declaration.id) == []
        assert (
            db.dividends.mark_distribution_paid(
                company.id, distributed[0].id, DistributionPayment()
            )
            is None
        )
        assert (
            db.dividends.get_declaration(company.id, declaration.id).status
            == DeclarationStatus.CANCELLED
        )

    def test_pay_requires_distributed_declaration(
        self, db, company, declaration, distributed
    ):
        with db.manager.engine.connect() as conn:
            conn.execute(
                update(dividend_declarations)
                .where(dividend_declarations.c.id == declaration.id)
                .values(status=DeclarationStatus.CANCELLED.value)
            )
            conn.commit()

        with pytest.raises(InvalidStatusError):
            db.dividends.mark_distribution_paid(
                company.id, distributed[0].id, DistributionPayment()
            )
        assert (
            db.dividends.get_declaration(company.id, declaration.id).status
            == DeclarationStatus.CANCELLED
        )

    def test_calculate_rejects_unknown_shareholder(
        self, db, company, shareholders, declaration
    ):
        db.dividends.confirm_declaration(company.id, declaration.id)

        with pytest.raises(BusinessRuleError) as exc:
            db.dividends.calculate_distributions(
                company.id, declaration.id, [Holding(9999, "Ghost Holder", 10)]
            )
        assert exc.value.code == "SHAREHOLDER_NOT_FOUND"

    def test_calculate_rejects_other_company_shareholder(
        self, db, company, shareholders, declaration
    ):
        other = db.companies.create_company(CompanyCreate(name="Huye Millers Ltd"))
        db.dividends.confirm_declaration(company.id, declaration.id)
        outsider = db.shareholders.active_holdings(company.id)[0]

        other_declaration = db.dividends.create_declaration(
            other.id,
            DividendDeclarationCreate(
                profit_amount=Decimal("500000"),
                dividend_percentage=Decimal("10"),
                approved_by="Board of Directors",
                declaration_date=date(2026, 3, 31),
            ),
        )
        db.dividends.confirm_declaration(other.id, other_declaration.id)

        with pytest.raises(BusinessRuleError):
            db.dividends.calculate_distributions(
                other.id,
                other_declaration.id,
                [Holding(outsider.id, outsider.shareholder_name, 100)],
            )
        assert db.dividends.list_distributions(other.id, other_declaration.id) == []
