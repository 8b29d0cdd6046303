"""Currency rate and transaction pydantic models."""

from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import Money, currency_code


class RateSource(str, Enum):
    """Where a rate came from."""

    MANUAL = "manual"
    API = "api"
    BANK = "bank"


class CurrencyTransactionType(str, Enum):
    """Currency transaction type."""

    EXCHANGE = "exchange"
    CONVERSION = "conversion"
    HEDGE = "hedge"
    SETTLEMENT = "settlement"


class CurrencyPair(BaseModel):
    """Two supported currency codes."""

    from_currency: str
    to_currency: str

    @field_validator("from_currency", "to_currency")
    @classmethod
    def validate_code(cls, v: str) -> str:
        return currency_code(v)


class CurrencyRateCreate(CurrencyPair):
    """Model for recording an exchange rate."""

    rate: Money = Field(..., gt=0)
    rate_date: date
    source: RateSource = RateSource.MANUAL

    @model_validator(mode="after")
    def check_pair(self):
        """A rate needs two different currencies."""
        if self.from_currency == self.to_currency:
            raise ValueError("from_currency and to_currency must differ")
        return self


class CurrencyRateUpdate(BaseModel):
    """Model for updating a rate."""

    rate: Optional[Money] = Field(None, gt=0)
    source: Optional[RateSource] = None
    is_active: Optional[bool] = None


class CurrencyRate(BaseModel):
    """Complete currency rate model."""

    id: int
    company_id: int
    from_currency: str
    to_currency: str
    rate: Money
    rate_date: date
    source: RateSource
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ConversionRequest(CurrencyPair):
    """Amount to convert between two currencies."""

    amount: Money = Field(..., ge=0)
    rate_date: Optional[date] = None


class ConversionResult(BaseModel):
    """Converted amount and the rate used."""

    from_currency: str
    to_currency: str
    amount: Money
    converted_amount: Money
    rate: Money
    rate_date: Optional[date] = None
    inverse: bool = False


class LatestRates(BaseModel):
    """Latest known rates from a base currency."""

    base_currency: str
    rates: Dict[str, Money]
    as_of: Dict[str, date]


class CurrencyTransactionCreate(CurrencyPair):
    """Model for recording a currency transaction."""

    transaction_type: CurrencyTransactionType
    from_amount: Money = Field(..., gt=0)
    to_amount: Optional[Money] = Field(None, gt=0)
    exchange_rate: Optional[Money] = Field(None, gt=0)
    transaction_date: date
    reference_id: Optional[str] = None
    notes: Optional[str] = None


class CurrencyTransaction(BaseModel):
    """Complete currency transaction model."""

    id: int
    company_id: int
    transaction_type: CurrencyTransactionType
    from_currency: str
    to_currency: str
    from_amount: Money
    to_amount: Money
    exchange_rate: Money
    transaction_date: date
    reference_id: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CurrencyStatistics(BaseModel):
    """Aggregate view over rates and transactions."""

    total_rates: int
    active_rates: int
    currency_pairs: List[str]
    total_transactions: int
    volume_by_currency: Dict[str, Money]
    by_type: Dict[str, int]
