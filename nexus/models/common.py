"""Shared pydantic types."""

import math
from decimal import Decimal
from typing import Annotated, List

from pydantic import BaseModel, PlainSerializer

# Amounts stay Decimal in Python and render as JSON numbers.
Money = Annotated[
    Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")
]

SUPPORTED_CURRENCIES: List[str] = [
    "RWF",
    "USD",
    "EUR",
    "GBP",
    "JPY",
    "CAD",
    "AUD",
    "KES",
    "UGX",
    "TZS",
]

# Currencies accepted for capital and dividend records.
CAPITAL_CURRENCIES: List[str] = ["RWF", "USD", "EUR", "GBP"]


class Pagination(BaseModel):
    """Pagination block returned by list endpoints."""

    total: int
    page: int
    limit: int
    pages: int

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        """Build pagination metadata for a result set."""
        return cls(
            total=total,
            page=page,
            limit=limit,
            pages=math.ceil(total / limit) if limit else 0,
        )


def currency_code(v: str) -> str:
    """Upper-case a currency code and check it is supported."""
    v = v.upper()
    if v not in SUPPORTED_CURRENCIES:
        raise ValueError(f"unsupported currency {v}")
    return v
