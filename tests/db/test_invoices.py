"""Tests for invoice and receipt database operations."""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from nexus.errors import InvalidStatusError
from nexus.models import InvoiceCreate, InvoiceStatus, InvoiceStatusUpdate, InvoiceType


def _invoice(**overrides) -> InvoiceCreate:
    values = {
        "type": InvoiceType.INVOICE,
        "party_name": "Nyarugenge Supplies",
        "description": "Office chairs",
        "amount": Decimal("100000"),
        "vat": Decimal("18000"),
        "date": date(2026, 2, 14),
    }
    values.update(overrides)
    return InvoiceCreate(**values)


class TestInvoiceOperations:
    """Test invoice and receipt database operations."""

    def test_total_defaults_to_amount_plus_vat(self):
        assert _invoice().total == Decimal("118000")

    def test_inconsistent_total_rejected(self):
        with pytest.raises(ValidationError):
            _invoice(total=Decimal("100000"))

    def test_numbering_per_type_and_year(self, db, company):
        first = db.invoices.create_invoice(company.id, _invoice())
        second = db.invoices.create_invoice(company.id, _invoice())
        receipt = db.invoices.create_invoice(
            company.id, _invoice(type=InvoiceType.RECEIPT)
        )
        next_year = db.invoices.create_invoice(
            company.id, _invoice(date=date(2027, 1, 3))
        )

        assert first.number == "INV-2026-001"
        assert second.number == "INV-2026-002"
        assert receipt.number == "REC-2026-001"
        assert next_year.number == "INV-2027-001"
        assert first.status == InvoiceStatus.DRAFT

    def test_duplicate_number_rejected(self, db, company):
        db.invoices.create_invoice(company.id, _invoice(number="INV-CUSTOM-1"))

        with pytest.raises(ValueError):
            db.invoices.create_invoice(company.id, _invoice(number="INV-CUSTOM-1"))

    def test_status_transitions(self, db, company):
        invoice = db.invoices.create_invoice(company.id, _invoice())

        issued = db.invoices.update_status(
            company.id, invoice.id, InvoiceStatusUpdate(status=InvoiceStatus.ISSUED)
        )
        assert issued.status == InvoiceStatus.ISSUED

        paid = db.invoices.update_status(
            company.id,
            invoice.id,
            InvoiceStatusUpdate(
                status=InvoiceStatus.PAID,
                payment_method="mobile_money",
                momo_reference="MP260214.1200.A1",
            ),
        )
        assert paid.status == InvoiceStatus.PAID
        assert paid.momo_reference == "MP260214.1200.A1"

        with pytest.raises(InvalidStatusError):
            db.invoices.update_status(
                company.id,
                invoice.id,
                InvoiceStatusUpdate(status=InvoiceStatus.CANCELLED),
            )

    def test_draft_cannot_be_paid(self, db, company):
        invoice = db.invoices.create_invoice(company.id, _invoice())

        with pytest.raises(InvalidStatusError):
            db.invoices.update_status(
                company.id, invoice.id, InvoiceStatusUpdate(status=InvoiceStatus.PAID)
            )

    def test_delete_only_drafts(self, db, company):
        draft = db.invoices.create_invoice(company.id, _invoice())
        issued = db.invoices.create_invoice(company.id, _invoice())
        db.invoices.update_status(
            company.id, issued.id, InvoiceStatusUpdate(status=InvoiceStatus.ISSUED)
        )

        assert db.invoices.delete_invoice(company.id, draft.id) is True
        assert db.invoices.delete_invoice(company.id, draft.id) is False
        with pytest.raises(InvalidStatusError):
            db.invoices.delete_invoice(company.id, issued.id)

    def test_list_filters(self, db, company):
        db.invoices.create_invoice(company.id, _invoice())
        db.invoices.create_invoice(company.id, _invoice(type=InvoiceType.RECEIPT))

        receipts, total = db.invoices.list_invoices(
            company.id, invoice_type=InvoiceType.RECEIPT
        )
        assert total == 1
        assert receipts[0].number == "REC-2026-001"
