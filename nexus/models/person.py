"""Person and shareholder pydantic models."""

from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .common import Money


class PersonBase(BaseModel):
    """Base person model."""

    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    middle_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    nationality: Optional[str] = None
    national_id: Optional[str] = None
    passport_number: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    occupation: Optional[str] = None
    tax_id: Optional[str] = None
    is_active: bool = True
    notes: Optional[str] = None


class PersonCreate(PersonBase):
    """Model for creating a person."""

    pass


class PersonUpdate(BaseModel):
    """Model for updating a person."""

    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    middle_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    gender: Optional[str] = None
    nationality: Optional[str] = None
    national_id: Optional[str] = None
    passport_number: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    occupation: Optional[str] = None
    tax_id: Optional[str] = None
    is_active: Optional[bool] = None
    notes: Optional[str] = None


class Person(PersonBase):
    """Complete person model with ID."""

    id: int
    company_id: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @property
    def full_name(self) -> str:
        """Display name."""
        parts = [self.first_name, self.middle_name, self.last_name]
        return " ".join(p for p in parts if p)


class ShareholderType(str, Enum):
    """Kind of shareholder."""

    INDIVIDUAL = "individual"
    CORPORATE = "corporate"
    INSTITUTIONAL = "institutional"
    GOVERNMENT = "government"


class ShareholderStatus(str, Enum):
    """Shareholder register status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    TRANSFERRED = "transferred"


class ShareholderBase(BaseModel):
    """Base shareholder model."""

    person_id: int
    shareholder_type: ShareholderType = ShareholderType.INDIVIDUAL
    shares_held: int = Field(..., ge=1)
    acquisition_date: date
    acquisition_price_per_share: Optional[Money] = Field(None, ge=0)
    currency: str = Field("RWF", min_length=3, max_length=3)
    notes: Optional[str] = None


class ShareholderCreate(ShareholderBase):
    """Model for creating a shareholder."""

    pass


class ShareholderUpdate(BaseModel):
    """Model for updating a shareholder."""

    shareholder_type: Optional[ShareholderType] = None
    shares_held: Optional[int] = Field(None, ge=1)
    acquisition_date: Optional[date] = None
    acquisition_price_per_share: Optional[Money] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    status: Optional[ShareholderStatus] = None
    notes: Optional[str] = None


class Shareholder(BaseModel):
    """Complete shareholder model with ID."""

    id: int
    company_id: int
    person_id: int
    shareholder_name: str
    shareholder_type: ShareholderType
    shares_held: int
    share_percentage: Money
    acquisition_date: date
    acquisition_price_per_share: Optional[Money] = None
    currency: str
    status: ShareholderStatus
    transfer_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ShareTransfer(BaseModel):
    """Request to move shares from one holder to a person."""

    to_person_id: int
    shares_to_transfer: int = Field(..., gt=0)
    transfer_date: Optional[date] = None
    transfer_price_per_share: Optional[Money] = Field(None, ge=0)
    notes: Optional[str] = None


class ShareTransferResult(BaseModel):
    """Both sides of a completed transfer."""

    from_shareholder: Shareholder
    to_shareholder: Shareholder


class OwnershipStatistics(BaseModel):
    """Aggregate view of a company's shareholder register."""

    total_shares: int
    total_shareholders: int
    by_type: dict
    top_holders: List[Shareholder]
