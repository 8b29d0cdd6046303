"""Board of directors, beneficial ownership and share certificate models."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import Money, currency_code


class DirectorType(str, Enum):
    """Seat held on the board."""

    EXECUTIVE = "executive"
    NON_EXECUTIVE = "non_executive"
    INDEPENDENT = "independent"
    CHAIRMAN = "chairman"
    VICE_CHAIRMAN = "vice_chairman"


class DirectorStatus(str, Enum):
    """Director appointment status."""

    ACTIVE = "active"
    RESIGNED = "resigned"
    REMOVED = "removed"
    SUSPENDED = "suspended"


class DirectorCreate(BaseModel):
    """Model for appointing a director."""

    person_id: int
    director_type: DirectorType
    appointment_date: date
    board_committees: List[str] = Field(default_factory=list)
    remuneration: Money = Field(Decimal("0"), ge=0)
    currency: str = Field("RWF", min_length=3, max_length=3)
    notes: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: str) -> str:
        return currency_code(v)


class DirectorUpdate(BaseModel):
    """Model for updating a director. Resignation has its own operation."""

    director_type: Optional[DirectorType] = None
    status: Optional[DirectorStatus] = None
    board_committees: Optional[List[str]] = None
    remuneration: Optional[Money] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    notes: Optional[str] = None

    @field_validator("currency")
    @classmethod
    def validate_currency(cls, v: Optional[str]) -> Optional[str]:
        return currency_code(v) if v is not None else v

    @model_validator(mode="after")
    def check_status(self):
        if self.status == DirectorStatus.RESIGNED:
            raise ValueError("use the resign operation to end a directorship")
        return self


class DirectorResignation(BaseModel):
    resignation_date: Optional[date] = None
    notes: Optional[str] = None


class Director(BaseModel):
    """Complete director model."""

    id: int
    company_id: int
    person_id: int
    director_name: str
    director_type: DirectorType
    appointment_date: date
    resignation_date: Optional[date] = None
    status: DirectorStatus
    board_committees: List[str] = Field(default_factory=list)
    remuneration: Money
    currency: str
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)

    @field_validator("board_committees", mode="before")
    @classmethod
    def committees_or_empty(cls, v):
        return v or []


class BoardComposition(BaseModel):
    """Who sits on the board and in which committees."""

    total_directors: int
    active_directors: int
    independent_ratio: Money
    chairman: Optional[str] = None
    by_type: Dict[str, int]
    by_status: Dict[str, int]
    committees: Dict[str, List[str]]
    total_remuneration: Money


class OwnershipType(str, Enum):
    DIRECT = "direct"
    INDIRECT = "indirect"
    BENEFICIAL = "beneficial"


class ControlType(str, Enum):
    VOTING = "voting"
    ECONOMIC = "economic"
    BOTH = "both"


class BeneficialOwnerStatus(str, Enum):
    ACTIVE = "active"
    CEASED = "ceased"
    TRANSFERRED = "transferred"


class BeneficialOwnerCreate(BaseModel):
    """Model for declaring a beneficial owner."""

    person_id: int
    ownership_percentage: Money = Field(..., gt=0, le=100)
    ownership_type: OwnershipType = OwnershipType.DIRECT
    control_type: ControlType = ControlType.BOTH
    acquisition_date: Optional[date] = None
    notes: Optional[str] = None


class BeneficialOwnerCessation(BaseModel):
    cessation_date: Optional[date] = None
    status: BeneficialOwnerStatus = BeneficialOwnerStatus.CEASED
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_status(self):
        if self.status == BeneficialOwnerStatus.ACTIVE:
            raise ValueError("cessation status must be ceased or transferred")
        return self


class BeneficialOwner(BaseModel):
    """Complete beneficial owner model."""

    id: int
    company_id: int
    person_id: int
    owner_name: str
    ownership_percentage: Money
    ownership_type: OwnershipType
    control_type: ControlType
    acquisition_date: date
    status: BeneficialOwnerStatus
    cessation_date: Optional[date] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CertificateStatus(str, Enum):
    """Share certificate status."""

    ACTIVE = "active"
    CANCELLED = "cancelled"
    REPLACED = "replaced"
    LOST = "lost"


class ShareCertificateCreate(BaseModel):
    """Model for issuing a share certificate."""

    shareholder_id: int
    certificate_number: str = Field(..., min_length=1, max_length=50)
    shares_represented: int = Field(..., ge=1)
    issue_date: date
    notes: Optional[str] = None


class CertificateCancellation(BaseModel):
    """Retire a certificate as cancelled, replaced or lost."""

    status: CertificateStatus = CertificateStatus.CANCELLED
    cancellation_date: Optional[date] = None
    cancellation_reason: Optional[str] = Field(None, max_length=255)

    @model_validator(mode="after")
    def check_status(self):
        if self.status == CertificateStatus.ACTIVE:
            raise ValueError("a retired certificate cannot stay active")
        return self


class ShareCertificate(BaseModel):
    """Complete share certificate model."""

    id: int
    company_id: int
    shareholder_id: int
    certificate_number: str
    shares_represented: int
    issue_date: date
    status: CertificateStatus
    cancellation_date: Optional[date] = None
    cancellation_reason: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
