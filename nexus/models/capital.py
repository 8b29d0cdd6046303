"""Locked capital and early withdrawal pydantic models."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .common import CAPITAL_CURRENCIES, Money


class LockedCapitalStatus(str, Enum):
    """Locked capital lifecycle status."""

    LOCKED = "locked"
    UNLOCKED = "unlocked"
    EARLY_WITHDRAWAL_REQUESTED = "early_withdrawal_requested"
    PENALTY_APPLIED = "penalty_applied"


class WithdrawalRequestStatus(str, Enum):
    """Early withdrawal request status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class LockedCapitalCreate(BaseModel):
    """Model for locking investor capital."""

    investor_id: int
    investor_name: str = Field(..., min_length=2, max_length=255)
    amount: Money = Field(..., gt=0, decimal_places=2)
    currency: str = "RWF"
    lock_period_months: int = Field(..., ge=1, le=60)
    lock_date: date
    base_roi_rate: Money = Field(Decimal("8.00"), ge=0, le=50)
    bonus_rate: Money = Field(Decimal("0.00"), ge=0, le=10)
    early_withdrawal_penalty_rate: Money = Field(Decimal("2.00"), ge=0, le=20)
    notes: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        """Restrict to the currencies capital can be held in."""
        v = v.upper()
        if v not in CAPITAL_CURRENCIES:
            raise ValueError(f"currency must be one of {', '.join(CAPITAL_CURRENCIES)}")
        return v


class LockedCapitalUpdate(BaseModel):
    """Model for updating a locked capital record."""

    investor_name: Optional[str] = Field(None, min_length=2, max_length=255)
    base_roi_rate: Optional[Money] = Field(None, ge=0, le=50)
    bonus_rate: Optional[Money] = Field(None, ge=0, le=10)
    notes: Optional[str] = None


class LockedCapital(BaseModel):
    """Complete locked capital model."""

    id: int
    company_id: int
    investor_id: int
    investor_name: str
    amount: Money
    currency: str
    lock_period_months: int
    lock_date: date
    unlock_date: date
    status: LockedCapitalStatus
    base_roi_rate: Money
    bonus_rate: Money
    total_roi_rate: Money
    accrued_interest: Money
    early_withdrawal_penalty_rate: Money
    penalty_amount: Money
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class EarlyWithdrawalCreate(BaseModel):
    """Model for requesting an early withdrawal."""

    reason: str = Field(..., min_length=10, max_length=1000)


class EarlyWithdrawalReview(BaseModel):
    """Decision on a pending withdrawal request."""

    status: WithdrawalRequestStatus
    review_notes: Optional[str] = None

    @field_validator("status")
    @classmethod
    def validate_decision(cls, v: WithdrawalRequestStatus) -> WithdrawalRequestStatus:
        """A review must approve or reject."""
        if v == WithdrawalRequestStatus.PENDING:
            raise ValueError("status must be approved or rejected")
        return v


class EarlyWithdrawalRequest(BaseModel):
    """Complete early withdrawal request model."""

    id: int
    company_id: int
    locked_capital_id: int
    request_date: date
    reason: str
    penalty_amount: Money
    status: WithdrawalRequestStatus
    reviewed_by: Optional[int] = None
    reviewed_at: Optional[datetime] = None
    review_notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class RoiProjection(BaseModel):
    """Expected return over the whole lock period."""

    capital_id: int
    principal: Money
    total_roi_rate: Money
    lock_period_months: int
    expected_interest: Money
    maturity_value: Money
    early_withdrawal_penalty: Money
    unlock_date: date


class CapitalStatistics(BaseModel):
    """Aggregate view over a company's locked capital."""

    total_locked: int
    total_amount: Money
    total_accrued_interest: Money
    by_status: Dict[str, int]
    by_currency: Dict[str, Money]
    upcoming_unlocks: int
    upcoming_unlock_ids: List[int] = []
