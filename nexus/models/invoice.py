"""Invoice and receipt pydantic models."""

import datetime as dt
from decimal import Decimal
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import Money


class InvoiceType(str, Enum):
    """Record type."""

    INVOICE = "invoice"
    RECEIPT = "receipt"


class InvoiceStatus(str, Enum):
    """Invoice status."""

    DRAFT = "draft"
    ISSUED = "issued"
    PAID = "paid"
    CANCELLED = "cancelled"


# Allowed status moves; paid and cancelled are terminal.
INVOICE_TRANSITIONS: Dict[InvoiceStatus, tuple] = {
    InvoiceStatus.DRAFT: (InvoiceStatus.ISSUED, InvoiceStatus.CANCELLED),
    InvoiceStatus.ISSUED: (InvoiceStatus.PAID, InvoiceStatus.CANCELLED),
    InvoiceStatus.PAID: (),
    InvoiceStatus.CANCELLED: (),
}

NUMBER_PREFIXES = {InvoiceType.INVOICE: "INV", InvoiceType.RECEIPT: "REC"}


class InvoiceCreate(BaseModel):
    """Model for creating an invoice or receipt."""

    type: InvoiceType
    number: Optional[str] = Field(None, max_length=50)
    transaction_id: Optional[str] = None
    party_name: str = Field(..., min_length=1, max_length=255)
    tin: Optional[str] = Field(None, pattern=r"^[0-9]{9,20}$")
    description: str = Field(..., min_length=1)
    amount: Money = Field(..., ge=0)
    vat: Money = Field(Decimal("0"), ge=0)
    total: Optional[Money] = Field(None, ge=0)
    attachment_url: Optional[str] = None
    date: dt.date
    status: InvoiceStatus = InvoiceStatus.DRAFT
    payment_method: Optional[str] = None
    phone_number: Optional[str] = None
    momo_reference: Optional[str] = None
    tax_category: Optional[str] = None

    @model_validator(mode="after")
    def check_total(self):
        """Total defaults to amount plus VAT and must agree with it."""
        expected = self.amount + self.vat
        if self.total is None:
            self.total = expected
        elif abs(self.total - expected) > Decimal("0.01"):
            raise ValueError("total must equal amount + vat")
        return self


class InvoiceStatusUpdate(BaseModel):
    """Requested status change."""

    status: InvoiceStatus
    payment_method: Optional[str] = None
    momo_reference: Optional[str] = None


class Invoice(BaseModel):
    """Complete invoice or receipt model."""

    id: int
    company_id: int
    transaction_id: Optional[str] = None
    type: InvoiceType
    number: str
    party_name: str
    tin: Optional[str] = None
    description: str
    amount: Money
    vat: Money
    total: Money
    attachment_url: Optional[str] = None
    date: dt.date
    status: InvoiceStatus
    payment_method: Optional[str] = None
    phone_number: Optional[str] = None
    momo_reference: Optional[str] = None
    tax_category: Optional[str] = None
    created_at: dt.datetime
    updated_at: dt.datetime

    model_config = ConfigDict(from_attributes=True)
