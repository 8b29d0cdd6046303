"""Tests for shareholder register database operations."""

from datetime import date
from decimal import Decimal

import pytest

from nexus.errors import BusinessRuleError, InsufficientSharesError
from nexus.models import (
    PersonCreate,
    ShareholderCreate,
    ShareholderStatus,
    ShareholderUpdate,
    ShareTransfer,
)


class TestShareholderOperations:
    """Test shareholder register database operations."""

    def test_create_shareholder_uses_person_name(self, db, company, person):
        holder = db.shareholders.create_shareholder(
            company.id,
            ShareholderCreate(
                person_id=person.id, shares_held=100, acquisition_date=date(2024, 1, 1)
            ),
        )

        assert holder.shareholder_name == "Alice Uwase"
        assert holder.share_percentage == Decimal("100")
        assert holder.status == ShareholderStatus.ACTIVE

    def test_create_shareholder_unknown_person(self, db, company):
        with pytest.raises(BusinessRuleError) as exc_info:
            db.shareholders.create_shareholder(
                company.id,
                ShareholderCreate(
                    person_id=99999, shares_held=10, acquisition_date=date(2024, 1, 1)
                ),
            )
        assert exc_info.value.code == "PERSON_NOT_FOUND"

    def test_percentages_rebalance(self, db, company, shareholders):
        """Percentages are recomputed over the active total."""
        holders = db.shareholders.list_shareholders(company.id)

        assert [h.shares_held for h in holders] == [600, 400]
        assert [h.share_percentage for h in holders] == [Decimal("60"), Decimal("40")]

    def test_update_shares_rebalances(self, db, company, shareholders):
        updated = db.shareholders.update_shareholder(
            company.id, shareholders[1].id, ShareholderUpdate(shares_held=1400)
        )

        assert updated.share_percentage == Decimal("70")
        first = db.shareholders.get_shareholder(company.id, shareholders[0].id)
        assert first.share_percentage == Decimal("30")

    def test_update_shareholder_not_found(self, db, company):
        result = db.shareholders.update_shareholder(
            company.id, 99999, ShareholderUpdate(shares_held=5)
        )
        assert result is None

    def test_transfer_to_existing_holder(self, db, company, second_person, shareholders):
        result = db.shareholders.transfer_shares(
            company.id,
            shareholders[0].id,
            ShareTransfer(to_person_id=second_person.id, shares_to_transfer=100),
        )

        assert result.from_shareholder.shares_held == 500
        assert result.to_shareholder.id == shareholders[1].id
        assert result.to_shareholder.shares_held == 500
        assert result.to_shareholder.share_percentage == Decimal("50")

    def test_transfer_creates_new_holding(self, db, company, shareholders):
        newcomer = db.persons.create_person(
            company.id, PersonCreate(first_name="Grace", last_name="Ingabire")
        )

        result = db.shareholders.transfer_shares(
            company.id,
            shareholders[1].id,
            ShareTransfer(
                to_person_id=newcomer.id,
                shares_to_transfer=400,
                transfer_date=date(2026, 6, 30),
            ),
        )

        assert result.to_shareholder.shareholder_name == "Grace Ingabire"
        assert result.to_shareholder.shares_held == 400
        assert result.to_shareholder.acquisition_date == date(2026, 6, 30)
        # The source gave away everything it held
        assert result.from_shareholder.status == ShareholderStatus.TRANSFERRED
        assert result.from_shareholder.transfer_date == date(2026, 6, 30)
        assert result.from_shareholder.share_percentage == Decimal("0")

    def test_transfer_insufficient_shares(self, db, company, second_person, shareholders):
        with pytest.raises(InsufficientSharesError):
            db.shareholders.transfer_shares(
                company.id,
                shareholders[0].id,
                ShareTransfer(to_person_id=second_person.id, shares_to_transfer=601),
            )

        # Nothing moved
        holder = db.shareholders.get_shareholder(company.id, shareholders[0].id)
        assert holder.shares_held == 600

    def test_transfer_to_same_person(self, db, company, person, shareholders):
        with pytest.raises(BusinessRuleError):
            db.shareholders.transfer_shares(
                company.id,
                shareholders[0].id,
                ShareTransfer(to_person_id=person.id, shares_to_transfer=10),
            )

    def test_transfer_unknown_source(self, db, company, second_person):
        result = db.shareholders.transfer_shares(
            company.id,
            99999,
            ShareTransfer(to_person_id=second_person.id, shares_to_transfer=10),
        )
        assert result is None

    def test_ownership_statistics(self, db, company, shareholders):
        stats = db.shareholders.ownership_statistics(company.id, top=1)

        assert stats.total_shares == 1000
        assert stats.total_shareholders == 2
        assert stats.by_type == {"individual": {"count": 2, "shares": 1000}}
        assert [h.shares_held for h in stats.top_holders] == [600]
