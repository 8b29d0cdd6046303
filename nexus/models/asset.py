"""Fixed asset and depreciation pydantic models."""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .common import Money


class DepreciationMethod(str, Enum):
    """Depreciation method."""

    STRAIGHT_LINE = "straight_line"
    DECLINING_BALANCE = "declining_balance"
    SUM_OF_YEARS = "sum_of_years"


class AssetStatus(str, Enum):
    """Fixed asset status."""

    ACTIVE = "active"
    DISPOSED = "disposed"
    TRANSFERRED = "transferred"
    UNDER_MAINTENANCE = "under_maintenance"
    LOST = "lost"


class DisposalMethod(str, Enum):
    """How an asset left the register."""

    SALE = "sale"
    SCRAP = "scrap"
    DONATION = "donation"
    TRADE_IN = "trade_in"


class AssetCategoryCreate(BaseModel):
    """Model for creating an asset category."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    depreciation_method: DepreciationMethod = DepreciationMethod.STRAIGHT_LINE
    default_useful_life_years: int = Field(5, ge=1, le=50)
    default_residual_value_rate: Money = Field(Decimal("10.00"), ge=0, le=100)


class AssetCategoryUpdate(BaseModel):
    """Model for updating an asset category."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    depreciation_method: Optional[DepreciationMethod] = None
    default_useful_life_years: Optional[int] = Field(None, ge=1, le=50)
    default_residual_value_rate: Optional[Money] = Field(None, ge=0, le=100)
    is_active: Optional[bool] = None


class AssetCategory(AssetCategoryCreate):
    """Complete asset category model."""

    id: int
    company_id: int
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FixedAssetCreate(BaseModel):
    """Model for registering a fixed asset."""

    category_id: Optional[int] = None
    asset_tag: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    serial_number: Optional[str] = None
    location: str = Field(..., min_length=1, max_length=255)
    department: Optional[str] = None
    custodian: Optional[str] = None
    acquisition_date: date
    acquisition_cost: Money = Field(..., gt=0)
    currency: str = Field("RWF", min_length=3, max_length=3)
    useful_life_years: int = Field(..., ge=1, le=50)
    residual_value: Money = Field(Decimal("0"), ge=0)
    depreciation_method: DepreciationMethod = DepreciationMethod.STRAIGHT_LINE
    notes: Optional[str] = None

    @model_validator(mode="after")
    def check_residual(self):
        """Residual value cannot exceed cost."""
        if self.residual_value > self.acquisition_cost:
            raise ValueError("residual_value cannot exceed acquisition_cost")
        return self


class FixedAssetUpdate(BaseModel):
    """Model for updating a fixed asset."""

    category_id: Optional[int] = None
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    serial_number: Optional[str] = None
    location: Optional[str] = Field(None, min_length=1, max_length=255)
    department: Optional[str] = None
    custodian: Optional[str] = None
    useful_life_years: Optional[int] = Field(None, ge=1, le=50)
    residual_value: Optional[Money] = Field(None, ge=0)
    depreciation_method: Optional[DepreciationMethod] = None
    status: Optional[AssetStatus] = None
    notes: Optional[str] = None


class FixedAsset(BaseModel):
    """Complete fixed asset model."""

    id: int
    company_id: int
    category_id: Optional[int] = None
    asset_tag: str
    name: str
    description: Optional[str] = None
    serial_number: Optional[str] = None
    location: str
    department: Optional[str] = None
    custodian: Optional[str] = None
    acquisition_date: date
    acquisition_cost: Money
    currency: str
    useful_life_years: int
    residual_value: Money
    depreciation_method: DepreciationMethod
    accumulated_depreciation: Money
    book_value: Money
    status: AssetStatus
    disposal_date: Optional[date] = None
    disposal_value: Optional[Money] = None
    disposal_method: Optional[DisposalMethod] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DepreciationResult(BaseModel):
    """Depreciation position of an asset at a date."""

    asset_id: int
    as_of: date
    method: DepreciationMethod
    months_used: int
    annual_depreciation: Money
    accumulated_depreciation: Money
    book_value: Money


class ScheduleEntry(BaseModel):
    """One year of a depreciation schedule."""

    year: int
    opening_value: Money
    depreciation: Money
    closing_value: Money


class DepreciationSchedule(BaseModel):
    """Full-life depreciation schedule."""

    asset_id: int
    method: DepreciationMethod
    acquisition_cost: Money
    residual_value: Money
    useful_life_years: int
    entries: List[ScheduleEntry]


class AssetDisposal(BaseModel):
    """Model for disposing of an asset."""

    disposal_date: date
    disposal_value: Money = Field(..., ge=0)
    disposal_method: DisposalMethod
    notes: Optional[str] = None


class DisposalResult(BaseModel):
    """Disposed asset with the realised gain or loss."""

    asset: FixedAsset
    book_value_at_disposal: Money
    gain_loss: Money


class AssetSummary(BaseModel):
    """Aggregate view over a company's fixed assets."""

    total_assets: int
    active_assets: int
    disposed_assets: int
    total_cost: Money
    total_book_value: Money
    total_depreciation: Money
    by_status: Dict[str, int]
    by_method: Dict[str, int]
