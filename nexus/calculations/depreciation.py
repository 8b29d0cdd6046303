"""Fixed asset depreciation.

Three methods are supported:

* ``straight_line``: (cost - residual) / life each year.
* ``declining_balance``: double declining balance, rate 2 / life applied to
  the opening book value, never going below the residual value; the last
  year writes the asset down to its residual value.
* ``sum_of_years``: (cost - residual) x remaining life / sum of the years'
  digits.

Depreciation inside a year accrues evenly per month. Months used are the
calendar month difference between acquisition and the valuation date.
"""

from datetime import date
from decimal import Decimal
from typing import List, NamedTuple

from .currency import round_amount

STRAIGHT_LINE = "straight_line"
DECLINING_BALANCE = "declining_balance"
SUM_OF_YEARS = "sum_of_years"

METHODS = (STRAIGHT_LINE, DECLINING_BALANCE, SUM_OF_YEARS)


class YearEntry(NamedTuple):
    year: int
    opening_value: Decimal
    depreciation: Decimal
    closing_value: Decimal


class DepreciationPosition(NamedTuple):
    months_used: int
    annual_depreciation: Decimal
    accumulated_depreciation: Decimal
    book_value: Decimal


def months_between(start: date, end: date) -> int:
    """Calendar month difference, zero when ``end`` precedes ``start``."""
    months = (end.year - start.year) * 12 + (end.month - start.month)
    return max(months, 0)


def _annual_amounts(cost: Decimal, residual: Decimal, life: int, method: str):
    depreciable = cost - residual
    if depreciable <= 0:
        return [Decimal("0")] * life

    if method == STRAIGHT_LINE:
        return [depreciable / life] * life

    if method == SUM_OF_YEARS:
        digits = Decimal(life * (life + 1) // 2)
        return [depreciable * Decimal(life - year) / digits for year in range(life)]

    if method == DECLINING_BALANCE:
        rate = Decimal(2) / Decimal(life)
        amounts = []
        opening = cost
        for year in range(life):
            if year == life - 1:
                amount = opening - residual
            else:
                amount = min(opening * rate, opening - residual)
            amount = max(amount, Decimal("0"))
            amounts.append(amount)
            opening -= amount
        return amounts

    raise ValueError(f"Unknown depreciation method: {method}")


def depreciation_schedule(
    cost, residual, useful_life_years: int, method: str, currency: str
) -> List[YearEntry]:
    """Year-by-year schedule over the useful life.

    Amounts are rounded to the currency; the final year absorbs rounding so
    the schedule closes on the residual value.
    """
    cost = Decimal(cost)
    residual = Decimal(residual)
    if useful_life_years < 1:
        raise ValueError("useful_life_years must be at least 1")
    if residual > cost:
        raise ValueError("residual_value cannot exceed acquisition_cost")

    amounts = _annual_amounts(cost, residual, useful_life_years, method)
    entries = []
    opening = round_amount(cost, currency)
    floor = round_amount(residual, currency)
    for year, amount in enumerate(amounts, start=1):
        if year == useful_life_years:
            depreciation = opening - floor
        else:
            depreciation = min(round_amount(amount, currency), opening - floor)
        closing = opening - depreciation
        entries.append(YearEntry(year, opening, depreciation, closing))
        opening = closing
    return entries


def depreciation_position(
    cost,
    residual,
    useful_life_years: int,
    method: str,
    acquisition_date: date,
    as_of: date,
    currency: str,
) -> DepreciationPosition:
    """Accumulated depreciation and book value at ``as_of``."""
    cost = Decimal(cost)
    residual = Decimal(residual)
    months_used = months_between(acquisition_date, as_of)
    amounts = _annual_amounts(cost, residual, useful_life_years, method)

    full_years, extra_months = divmod(months_used, 12)
    if full_years >= useful_life_years:
        accumulated = cost - residual
        current_year = useful_life_years - 1
    else:
        accumulated = sum(amounts[:full_years], Decimal("0"))
        accumulated += amounts[full_years] * Decimal(extra_months) / Decimal(12)
        accumulated = min(accumulated, cost - residual)
        current_year = full_years

    accumulated = round_amount(max(accumulated, Decimal("0")), currency)
    book_value = max(
        round_amount(cost, currency) - accumulated, round_amount(residual, currency)
    )
    return DepreciationPosition(
        months_used=months_used,
        annual_depreciation=round_amount(amounts[current_year], currency),
        accumulated_depreciation=accumulated,
        book_value=book_value,
    )
