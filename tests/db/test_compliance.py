"""Tests for compliance alerts drawn from the company registers."""

import io
from datetime import date
from decimal import Decimal

import pytest

from nexus.models import (
    ActivityContext,
    AlertSeverity,
    AlertType,
    ComplianceStatus,
    DocumentCategoryCreate,
    DocumentMetadata,
    DocumentType,
    LockedCapitalCreate,
    PayrollPeriodCreate,
    TaxPayment,
    TaxReturnCreate,
    TaxType,
)

TODAY = date(2026, 10, 18)


def _tax_return(db, company_id, tax_type, due_date, amount="100000"):
    return db.tax_returns.create_return(
        company_id,
        TaxReturnCreate(
            tax_type=tax_type,
            period="2026-09",
            amount=Decimal(amount),
            due_date=due_date,
        ),
    )


@pytest.fixture
def obligations(db, company, person, storage):
    """One open item per register, plus a return outside the horizon."""
    vat = _tax_return(db, company.id, TaxType.VAT, date(2026, 10, 15))
    paye = _tax_return(db, company.id, TaxType.PAYE, date(2026, 10, 22))
    _tax_return(db, company.id, TaxType.CIT, date(2027, 3, 31))

    period = db.payroll.create_period(
        company.id,
        PayrollPeriodCreate(
            period_name="October 2026",
            start_date=date(2026, 10, 1),
            end_date=date(2026, 10, 31),
            pay_date=date(2026, 10, 31),
        ),
    )

    category = db.documents.create_category(
        company.id, DocumentCategoryCreate(name="Licences")
    )
    stored = storage.save(
        company.id, io.BytesIO(b"Trading licence"), "licence.txt", "text/plain"
    )
    licence = db.documents.create_document(
        company.id,
        DocumentMetadata(
            title="Trading Licence",
            category_id=category.id,
            document_type=DocumentType.LICENSE,
            expiry_date=date(2026, 11, 1),
        ),
        stored,
        ActivityContext(user_id=1),
    )

    capital = db.capital.create_capital(
        company.id,
        LockedCapitalCreate(
            investor_id=person.id,
            investor_name="Alice Uwase",
            amount=Decimal("1000000"),
            lock_period_months=12,
            lock_date=date(2025, 11, 30),
            base_roi_rate=Decimal("10"),
        ),
    )
    return {
        "vat": vat,
        "paye": paye,
        "period": period,
        "licence": licence,
        "capital": capital,
    }


class TestComplianceOperations:
    """Test compliance alerts."""

    def test_alerts_ordered_by_due_date(self, db, company, obligations):
        alerts = db.compliance.alerts(company.id, today=TODAY)

        assert [(a.alert_type, a.reference_id) for a in alerts] == [
            (AlertType.TAX_RETURN, obligations["vat"].id),
            (AlertType.TAX_RETURN, obligations["paye"].id),
            (AlertType.PAYROLL, obligations["period"].id),
            (AlertType.DOCUMENT_EXPIRY, obligations["licence"].id),
            (AlertType.CAPITAL_UNLOCK, obligations["capital"].id),
        ]
        assert [a.severity for a in alerts] == [
            AlertSeverity.HIGH,
            AlertSeverity.HIGH,
            AlertSeverity.MEDIUM,
            AlertSeverity.MEDIUM,
            AlertSeverity.LOW,
        ]
        assert alerts[0].days_left == -3
        assert alerts[0].title == "VAT return VAT-2026-001"

    def test_filters(self, db, company, obligations):
        high = db.compliance.alerts(
            company.id, today=TODAY, severity=AlertSeverity.HIGH
        )
        documents = db.compliance.alerts(
            company.id, today=TODAY, alert_type=AlertType.DOCUMENT_EXPIRY
        )

        assert {a.reference_id for a in high} == {
            obligations["vat"].id,
            obligations["paye"].id,
        }
        assert [a.title for a in documents] == ["Trading Licence"]

    def test_deadlines_and_overdue(self, db, company, obligations):
        overdue = db.compliance.overdue(company.id, today=TODAY)
        deadlines = db.compliance.deadlines(company.id, today=TODAY)

        assert [a.reference_id for a in overdue] == [obligations["vat"].id]
        assert len(deadlines) == 4
        assert all(a.days_left >= 0 for a in deadlines)

    def test_overview(self, db, company, obligations):
        overview = db.compliance.overview(company.id, today=TODAY)

        assert overview.status == ComplianceStatus.NON_COMPLIANT
        assert overview.overdue == 1
        assert overview.due_soon == 1
        assert overview.by_type == {
            "tax_return": 2,
            "payroll": 1,
            "document_expiry": 1,
            "capital_unlock": 1,
        }

    def test_settled_return_clears_alert(self, db, company, obligations):
        vat = obligations["vat"]
        db.tax_returns.submit_return(company.id, vat.id, TODAY)
        db.tax_returns.record_payment(
            company.id, vat.id, TaxPayment(amount=Decimal("100000"))
        )

        overview = db.compliance.overview(company.id, today=TODAY)

        assert overview.status == ComplianceStatus.ATTENTION
        assert overview.overdue == 0

    def test_submitted_return_still_owes_payment(self, db, company, obligations):
        paye = obligations["paye"]
        db.tax_returns.submit_return(company.id, paye.id, TODAY)
        db.tax_returns.record_payment(
            company.id, paye.id, TaxPayment(amount=Decimal("40000"))
        )

        alerts = db.compliance.alerts(
            company.id, today=TODAY, alert_type=AlertType.TAX_RETURN
        )

        assert "60000" in alerts[1].message

    def test_clean_company_is_compliant(self, db, company):
        overview = db.compliance.overview(company.id, today=TODAY)

        assert overview.status == ComplianceStatus.COMPLIANT
        assert overview.alerts == []
