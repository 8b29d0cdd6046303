"""Locked capital date, return and penalty arithmetic."""

import calendar
from datetime import date
from decimal import Decimal
from typing import Optional

from .currency import round_amount

HUNDRED = Decimal("100")
MONTHS_PER_YEAR = Decimal("12")
DAYS_PER_MONTH = Decimal("30")


def add_months(start: date, months: int) -> date:
    """Shift a date by whole months, clamping the day to the month's end.

    31 January plus one month is 28 or 29 February.
    """
    month_index = start.month - 1 + months
    year = start.year + month_index // 12
    month = month_index % 12 + 1
    day = min(start.day, calendar.monthrange(year, month)[1])
    return date(year, month, day)


def total_roi_rate(base_roi_rate, bonus_rate) -> Decimal:
    return Decimal(base_roi_rate) + Decimal(bonus_rate)


def penalty_amount(amount, penalty_rate, currency: str) -> Decimal:
    """Early withdrawal penalty: amount x rate / 100."""
    return round_amount(Decimal(amount) * Decimal(penalty_rate) / HUNDRED, currency)


def accrued_interest(
    amount,
    roi_rate,
    lock_date: date,
    unlock_date: date,
    as_of: date,
    currency: str,
) -> Decimal:
    """Simple interest earned between the lock date and ``as_of``.

    Months are counted as elapsed days / 30 and interest stops accruing at
    the unlock date.
    """
    end = min(as_of, unlock_date)
    days = (end - lock_date).days
    if days <= 0:
        return round_amount(Decimal("0"), currency)
    months = Decimal(days) / DAYS_PER_MONTH
    monthly_rate = Decimal(roi_rate) / HUNDRED / MONTHS_PER_YEAR
    return round_amount(Decimal(amount) * monthly_rate * months, currency)


def expected_interest(amount, roi_rate, lock_period_months: int, currency: str):
    """Interest earned if the capital stays locked for the full period."""
    monthly_rate = Decimal(roi_rate) / HUNDRED / MONTHS_PER_YEAR
    return round_amount(
        Decimal(amount) * monthly_rate * Decimal(lock_period_months), currency
    )


def days_until(target: date, today: Optional[date] = None) -> int:
    today = today or date.today()
    return (target - today).days
