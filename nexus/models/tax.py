"""Tax return pydantic models."""

from datetime import date, datetime
from enum import Enum
from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import Money, currency_code

# ``2026``, ``2026-Q1`` or ``2026-01``
PERIOD_PATTERN = r"^[0-9]{4}(-(0[1-9]|1[0-2]|Q[1-4]))?$"


class TaxType(str, Enum):
    """Filing types handled by the tax module."""

    VAT = "VAT"
    PAYE = "PAYE"
    CIT = "CIT"
    QIT = "QIT"
    WITHHOLDING = "WITHHOLDING"
    RSSB = "RSSB"


class TaxReturnStatus(str, Enum):
    """Filing status: pending until submitted, paid once settled."""

    PENDING = "pending"
    SUBMITTED = "submitted"
    PAID = "paid"


class TaxReturnCreate(BaseModel):
    """Model for recording a return to be filed."""

    tax_type: TaxType
    period: str = Field(..., pattern=PERIOD_PATTERN)
    amount: Money = Field(..., ge=0)
    currency: str = Field("RWF", min_length=3, max_length=3)
    due_date: date
    reference: Optional[str] = Field(None, max_length=50)
    description: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return currency_code(v)


class TaxReturnUpdate(BaseModel):
    period: Optional[str] = Field(None, pattern=PERIOD_PATTERN)
    amount: Optional[Money] = Field(None, ge=0)
    due_date: Optional[date] = None
    description: Optional[str] = None


class TaxPayment(BaseModel):
    """Payment made against a return."""

    amount: Money = Field(..., gt=0)
    paid_on: Optional[date] = None


class TaxReturn(BaseModel):
    """Complete tax return model."""

    id: int
    company_id: int
    tax_type: TaxType
    period: str
    amount: Money
    paid_amount: Money
    currency: str
    due_date: date
    submission_date: Optional[date] = None
    paid_date: Optional[date] = None
    status: TaxReturnStatus
    reference: str
    description: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    def is_overdue(self, today: date) -> bool:
        return self.status == TaxReturnStatus.PENDING and self.due_date < today


class TaxStatistics(BaseModel):
    """Aggregates over a company's returns."""

    total: int
    pending: int
    submitted: int
    paid: int
    overdue: int
    total_amount: Money
    total_paid: Money
    by_type: Dict[str, Money]


class TaxCalculationRequest(BaseModel):
    """Amount to tax at the configured rate for ``tax_type``."""

    tax_type: str = Field(..., min_length=2, max_length=20)
    amount: Money = Field(..., ge=0)
    currency: str = Field("RWF", min_length=3, max_length=3)
    is_vat_registered: bool = True

    @field_validator("tax_type")
    @classmethod
    def upper(cls, v: str) -> str:
        return v.upper()

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return currency_code(v)


class TaxCalculation(BaseModel):
    """Result of a flat-rate tax calculation."""

    tax_type: str
    base_amount: Money
    rate: Money
    tax_amount: Money
    total_amount: Money
    currency: str
