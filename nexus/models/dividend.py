"""Dividend declaration and distribution pydantic models."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import CAPITAL_CURRENCIES, Money


class DividendType(str, Enum):
    """Dividend type."""

    INTERIM = "interim"
    FINAL = "final"
    SPECIAL = "special"


class DeclarationStatus(str, Enum):
    """Dividend declaration lifecycle."""

    DRAFT = "draft"
    CONFIRMED = "confirmed"
    DISTRIBUTED = "distributed"
    PAID = "paid"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    """How a distribution was paid."""

    BANK_TRANSFER = "bank_transfer"
    CHECK = "check"
    CASH = "cash"
    MOBILE_MONEY = "mobile_money"
    OTHER = "other"


class DividendDeclarationCreate(BaseModel):
    """Model for declaring a dividend."""

    profit_amount: Money = Field(..., ge=0)
    dividend_percentage: Money = Field(..., gt=0, le=100)
    approved_by: str = Field(..., min_length=2, max_length=255)
    declaration_date: date
    financial_year: Optional[str] = Field(None, pattern=r"^\d{4}-\d{4}$")
    dividend_type: DividendType = DividendType.FINAL
    currency: str = "RWF"
    tax_rate: Money = Field(Decimal("5.00"), ge=0, le=50)
    document_url: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Restrict to the currencies dividends can be paid in."""
        v = v.upper()
        if v not in CAPITAL_CURRENCIES:
            raise ValueError(f"currency must be one of {', '.join(CAPITAL_CURRENCIES)}")
        return v


class DividendDeclaration(BaseModel):
    """Complete dividend declaration model."""

    id: int
    company_id: int
    declaration_date: date
    financial_year: Optional[str] = None
    dividend_type: DividendType
    profit_amount: Money
    dividend_percentage: Money
    dividend_pool: Money
    currency: str
    tax_rate: Money
    approved_by: str
    document_url: Optional[str] = None
    status: DeclarationStatus
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ShareholderHolding(BaseModel):
    """A holder's position at the record date, input to an allocation."""

    shareholder_id: Optional[int] = None
    shareholder_name: str
    shares_held_at_time: int = Field(..., ge=0)


class DistributionCalculationRequest(BaseModel):
    """Holdings to allocate over; the register is used when omitted."""

    shareholders: Optional[List[ShareholderHolding]] = None


class DividendDistribution(BaseModel):
    """Complete dividend distribution model."""

    id: int
    company_id: int
    declaration_id: int
    shareholder_id: Optional[int] = None
    shareholder_name: str
    shares_held_at_time: int
    gross_amount: Money
    tax_amount: Money
    net_amount: Money
    is_paid: bool
    paid_on: Optional[date] = None
    payment_method: Optional[PaymentMethod] = None
    payment_reference: Optional[str] = None
    payment_proof_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DistributionPayment(BaseModel):
    """Payment details recorded when a distribution is paid."""

    payment_proof_url: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None
    payment_reference: Optional[str] = None
    paid_on: Optional[date] = None


class DividendStatistics(BaseModel):
    """Aggregate view over a company's dividends."""

    total_declarations: int
    total_pool: Money
    total_paid: Money
    total_outstanding: Money
    by_status: Dict[str, int]
    by_type: Dict[str, int]
    by_year: Dict[str, Money]
