"""Tests for the directors register, beneficial owners and share certificates."""

from datetime import date
from decimal import Decimal

import pytest

from nexus.errors import BusinessRuleError, InvalidStatusError
from nexus.models import (
    BeneficialOwnerCessation,
    BeneficialOwnerCreate,
    BeneficialOwnerStatus,
    CertificateCancellation,
    CertificateStatus,
    CompanyCreate,
    DirectorCreate,
    DirectorResignation,
    DirectorStatus,
    DirectorType,
    DirectorUpdate,
    OwnershipType,
    ShareCertificateCreate,
    ShareholderStatus,
    ShareholderUpdate,
)


@pytest.fixture
def chairman(db, company, person):
    return db.directors.appoint_director(
        company.id,
        DirectorCreate(
            person_id=person.id,
            director_type=DirectorType.CHAIRMAN,
            appointment_date=date(2024, 1, 15),
            board_committees=["audit", "remuneration"],
            remuneration=Decimal("2000000"),
        ),
    )


@pytest.fixture
def independent(db, company, second_person):
    return db.directors.appoint_director(
        company.id,
        DirectorCreate(
            person_id=second_person.id,
            director_type=DirectorType.INDEPENDENT,
            appointment_date=date(2025, 3, 1),
            board_committees=["audit"],
            remuneration=Decimal("1500000"),
        ),
    )


def _certificate(db, company_id, shareholder_id, number, shares):
    return db.directors.issue_certificate(
        company_id,
        ShareCertificateCreate(
            shareholder_id=shareholder_id,
            certificate_number=number,
            shares_represented=shares,
            issue_date=date(2024, 1, 1),
        ),
    )


class TestDirectorOperations:
    """Test the directors register."""

    def test_appoint_director(self, chairman):
        assert chairman.director_name == "Alice Uwase"
        assert chairman.status == DirectorStatus.ACTIVE
        assert chairman.board_committees == ["audit", "remuneration"]
        assert chairman.currency == "RWF"

    def test_appoint_unknown_person(self, db, company):
        with pytest.raises(BusinessRuleError) as exc:
            db.directors.appoint_director(
                company.id,
                DirectorCreate(
                    person_id=999,
                    director_type=DirectorType.EXECUTIVE,
                    appointment_date=date(2026, 1, 1),
                ),
            )
        assert exc.value.code == "PERSON_NOT_FOUND"

    def test_person_holds_one_seat(self, db, company, person, chairman):
        with pytest.raises(BusinessRuleError) as exc:
            db.directors.appoint_director(
                company.id,
                DirectorCreate(
                    person_id=person.id,
                    director_type=DirectorType.EXECUTIVE,
                    appointment_date=date(2026, 1, 1),
                ),
            )
        assert exc.value.code == "DIRECTOR_EXISTS"

    def test_single_chairman(self, db, company, chairman, second_person):
        with pytest.raises(BusinessRuleError) as exc:
            db.directors.appoint_director(
                company.id,
                DirectorCreate(
                    person_id=second_person.id,
                    director_type=DirectorType.CHAIRMAN,
                    appointment_date=date(2026, 1, 1),
                ),
            )
        assert exc.value.code == "CHAIRMAN_EXISTS"

    def test_promotion_to_chairman_checked(self, db, company, chairman, independent):
        with pytest.raises(BusinessRuleError) as exc:
            db.directors.update_director(
                company.id,
                independent.id,
                DirectorUpdate(director_type=DirectorType.CHAIRMAN),
            )
        assert exc.value.code == "CHAIRMAN_EXISTS"

        updated = db.directors.update_director(
            company.id, chairman.id, DirectorUpdate(board_committees=["audit"])
        )
        assert updated.board_committees == ["audit"]
        assert updated.director_type == DirectorType.CHAIRMAN

    def test_update_cannot_resign(self):
        with pytest.raises(ValueError):
            DirectorUpdate(status=DirectorStatus.RESIGNED)

    def test_resign(self, db, company, chairman, second_person):
        resigned = db.directors.resign_director(
            company.id,
            chairman.id,
            DirectorResignation(resignation_date=date(2026, 6, 30)),
        )
        assert resigned.status == DirectorStatus.RESIGNED
        assert resigned.resignation_date == date(2026, 6, 30)

        with pytest.raises(InvalidStatusError):
            db.directors.resign_director(company.id, chairman.id, DirectorResignation())
        with pytest.raises(InvalidStatusError):
            db.directors.update_director(
                company.id, chairman.id, DirectorUpdate(remuneration=Decimal("1"))
            )

        # The chair is free once the previous chairman has resigned.
        successor = db.directors.appoint_director(
            company.id,
            DirectorCreate(
                person_id=second_person.id,
                director_type=DirectorType.CHAIRMAN,
                appointment_date=date(2026, 7, 1),
            ),
        )
        assert successor.status == DirectorStatus.ACTIVE

    def test_resign_before_appointment(self, db, company, chairman):
        with pytest.raises(ValueError):
            db.directors.resign_director(
                company.id,
                chairman.id,
                DirectorResignation(resignation_date=date(2023, 12, 31)),
            )

    def test_list_directors(self, db, company, chairman, independent):
        found, total = db.directors.list_directors(company.id)
        assert total == 2
        assert [d.id for d in found] == [independent.id, chairman.id]

        found, total = db.directors.list_directors(
            company.id, director_type=DirectorType.CHAIRMAN
        )
        assert [d.id for d in found] == [chairman.id]

    def test_board_composition(self, db, company, chairman, independent):
        composition = db.directors.board_composition(company.id)

        assert composition.total_directors == 2
        assert composition.active_directors == 2
        assert composition.chairman == "Alice Uwase"
        assert composition.independent_ratio == Decimal("50.00")
        assert composition.committees == {
            "audit": ["Alice Uwase", "Jean Mugisha"],
            "remuneration": ["Alice Uwase"],
        }
        assert composition.total_remuneration == Decimal("3500000")

    def test_board_composition_skips_resigned(self, db, company, chairman, independent):
        db.directors.resign_director(company.id, chairman.id, DirectorResignation())

        composition = db.directors.board_composition(company.id)

        assert composition.active_directors == 1
        assert composition.chairman is None
        assert composition.by_status == {"resigned": 1, "active": 1}
        assert composition.independent_ratio == Decimal("100.00")

    def test_missing_director(self, db, company):
        assert db.directors.get_director(company.id, 999) is None
        assert (
            db.directors.resign_director(company.id, 999, DirectorResignation())
            is None
        )


class TestBeneficialOwnerOperations:
    """Test the beneficial ownership register."""

    def test_add_owner(self, db, company, person):
        owner = db.directors.add_beneficial_owner(
            company.id,
            BeneficialOwnerCreate(
                person_id=person.id,
                ownership_percentage=Decimal("60"),
                acquisition_date=date(2024, 1, 1),
            ),
        )

        assert owner.owner_name == "Alice Uwase"
        assert owner.ownership_type == OwnershipType.DIRECT
        assert owner.status == BeneficialOwnerStatus.ACTIVE

    def test_ownership_capped_at_hundred(self, db, company, person, second_person):
        first = db.directors.add_beneficial_owner(
            company.id,
            BeneficialOwnerCreate(
                person_id=person.id, ownership_percentage=Decimal("70")
            ),
        )
        with pytest.raises(BusinessRuleError) as exc:
            db.directors.add_beneficial_owner(
                company.id,
                BeneficialOwnerCreate(
                    person_id=second_person.id, ownership_percentage=Decimal("30.5")
                ),
            )
        assert exc.value.code == "OWNERSHIP_EXCEEDED"

        # Ceased ownership no longer counts towards the cap.
        ceased = db.directors.cease_beneficial_owner(
            company.id, first.id, BeneficialOwnerCessation()
        )
        assert ceased.status == BeneficialOwnerStatus.CEASED
        assert ceased.cessation_date == date.today()

        db.directors.add_beneficial_owner(
            company.id,
            BeneficialOwnerCreate(
                person_id=second_person.id, ownership_percentage=Decimal("100")
            ),
        )

    def test_cease_only_active(self, db, company, person):
        owner = db.directors.add_beneficial_owner(
            company.id,
            BeneficialOwnerCreate(
                person_id=person.id, ownership_percentage=Decimal("10")
            ),
        )
        db.directors.cease_beneficial_owner(
            company.id,
            owner.id,
            BeneficialOwnerCessation(status=BeneficialOwnerStatus.TRANSFERRED),
        )

        with pytest.raises(InvalidStatusError):
            db.directors.cease_beneficial_owner(
                company.id, owner.id, BeneficialOwnerCessation()
            )

    def test_list_by_percentage(self, db, company, person, second_person):
        for holder, pct in ((person, "25"), (second_person, "55")):
            db.directors.add_beneficial_owner(
                company.id,
                BeneficialOwnerCreate(
                    person_id=holder.id,
                    ownership_percentage=Decimal(pct),
                    ownership_type=OwnershipType.INDIRECT,
                ),
            )

        owners, total = db.directors.list_beneficial_owners(company.id)

        assert total == 2
        assert [o.owner_name for o in owners] == ["Jean Mugisha", "Alice Uwase"]


class TestShareCertificateOperations:
    """Test share certificate issue and cancellation."""

    def test_issue_certificate(self, db, company, shareholders):
        certificate = _certificate(db, company.id, shareholders[0].id, "SC-001", 600)

        assert certificate.status == CertificateStatus.ACTIVE
        assert certificate.shares_represented == 600

    def test_certificates_limited_to_holding(self, db, company, shareholders):
        _certificate(db, company.id, shareholders[1].id, "SC-002", 300)

        with pytest.raises(BusinessRuleError) as exc:
            _certificate(db, company.id, shareholders[1].id, "SC-003", 101)
        assert exc.value.code == "CERTIFICATE_EXCEEDS_HOLDING"

        _certificate(db, company.id, shareholders[1].id, "SC-003", 100)

    def test_duplicate_number(self, db, company, shareholders):
        _certificate(db, company.id, shareholders[0].id, "SC-001", 100)

        with pytest.raises(ValueError):
            _certificate(db, company.id, shareholders[1].id, "SC-001", 100)

    def test_unknown_or_foreign_holder(self, db, company, shareholders):
        other = db.companies.create_company(CompanyCreate(name="Huye Farmers Ltd"))

        with pytest.raises(BusinessRuleError) as exc:
            _certificate(db, company.id, 999, "SC-001", 100)
        assert exc.value.code == "SHAREHOLDER_NOT_FOUND"

        with pytest.raises(BusinessRuleError) as exc:
            _certificate(db, other.id, shareholders[0].id, "SC-001", 100)
        assert exc.value.code == "SHAREHOLDER_NOT_FOUND"

    def test_inactive_holder(self, db, company, shareholders):
        db.shareholders.update_shareholder(
            company.id,
            shareholders[1].id,
            ShareholderUpdate(status=ShareholderStatus.INACTIVE),
        )

        with pytest.raises(InvalidStatusError):
            _certificate(db, company.id, shareholders[1].id, "SC-009", 10)

    def test_cancel_frees_shares(self, db, company, shareholders):
        first = _certificate(db, company.id, shareholders[1].id, "SC-010", 400)

        lost = db.directors.cancel_certificate(
            company.id,
            first.id,
            CertificateCancellation(
                status=CertificateStatus.LOST, cancellation_reason="Misplaced"
            ),
        )
        assert lost.status == CertificateStatus.LOST
        assert lost.cancellation_date == date.today()

        replacement = _certificate(db, company.id, shareholders[1].id, "SC-011", 400)
        assert replacement.status == CertificateStatus.ACTIVE

        with pytest.raises(InvalidStatusError):
            db.directors.cancel_certificate(
                company.id, first.id, CertificateCancellation()
            )

    def test_list_certificates(self, db, company, shareholders):
        _certificate(db, company.id, shareholders[0].id, "SC-001", 600)
        _certificate(db, company.id, shareholders[1].id, "SC-002", 400)

        found, total = db.directors.list_certificates(
            company.id, shareholder_id=shareholders[1].id
        )

        assert total == 1
        assert found[0].certificate_number == "SC-002"
