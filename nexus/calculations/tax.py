"""Flat-rate tax arithmetic and deadline classification."""

from datetime import date
from decimal import Decimal
from typing import NamedTuple

from .currency import round_amount

HUNDRED = Decimal("100")

# Days before a due date at which a deadline is treated as urgent.
URGENT_DAYS = 7
SOON_DAYS = 30


class TaxAmount(NamedTuple):
    base_amount: Decimal
    rate: Decimal
    tax_amount: Decimal
    total_amount: Decimal


def flat_tax(base_amount, rate, currency: str) -> TaxAmount:
    """Tax at a flat percentage, rounded to the currency quantum."""
    base = Decimal(base_amount)
    tax = round_amount(base * Decimal(rate) / HUNDRED, currency)
    return TaxAmount(base, Decimal(rate), tax, base + tax)


def deadline_severity(due_date: date, today: date) -> str:
    """``high`` when overdue or within a week, ``medium`` within a month."""
    days_left = (due_date - today).days
    if days_left <= URGENT_DAYS:
        return "high"
    if days_left <= SOON_DAYS:
        return "medium"
    return "low"
