"""Company pydantic models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class CompanyStatus(str, Enum):
    """Company lifecycle status."""

    ACTIVE = "active"
    INACTIVE = "inactive"
    SUSPENDED = "suspended"


class CompanyBase(BaseModel):
    """Base company model."""

    name: str = Field(..., min_length=2, max_length=255)
    tin: Optional[str] = Field(None, pattern=r"^[0-9]{9,20}$")
    currency: str = Field("RWF", min_length=3, max_length=3)
    address: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    sector: Optional[str] = None
    cell: Optional[str] = None
    country: str = "Rwanda"
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None


class CompanyCreate(CompanyBase):
    """Model for creating a company."""

    pass


class CompanyUpdate(BaseModel):
    """Model for updating a company."""

    name: Optional[str] = Field(None, min_length=2, max_length=255)
    tin: Optional[str] = Field(None, pattern=r"^[0-9]{9,20}$")
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    address: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    sector: Optional[str] = None
    cell: Optional[str] = None
    country: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    website: Optional[str] = None
    status: Optional[CompanyStatus] = None


class Company(CompanyBase):
    """Complete company model with ID."""

    id: int
    status: CompanyStatus
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
