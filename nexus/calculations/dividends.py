"""Dividend pool, allocation and withholding arithmetic."""

from decimal import ROUND_DOWN, Decimal
from typing import List, NamedTuple, Optional, Sequence

from ..errors import NoShareholdersError
from .currency import currency_quantum, round_amount

HUNDRED = Decimal("100")


class Holding(NamedTuple):
    """A shareholder position used as allocation input."""

    shareholder_id: Optional[int]
    shareholder_name: str
    shares: int


class Allocation(NamedTuple):
    """One holder's share of a dividend pool."""

    shareholder_id: Optional[int]
    shareholder_name: str
    shares: int
    gross_amount: Decimal
    tax_amount: Decimal
    net_amount: Decimal


def dividend_pool(profit_amount, dividend_percentage, currency: str) -> Decimal:
    """Pool distributed to shareholders: profit x percentage / 100."""
    return round_amount(
        Decimal(profit_amount) * Decimal(dividend_percentage) / HUNDRED, currency
    )


def withholding(gross_amount: Decimal, tax_rate, currency: str):
    """Split a gross amount into (tax, net)."""
    tax = round_amount(gross_amount * Decimal(tax_rate) / HUNDRED, currency)
    return tax, gross_amount - tax


def allocate_pool(
    pool,
    holdings: Sequence[Holding],
    currency: str,
    tax_rate=Decimal("0"),
) -> List[Allocation]:
    """Allocate a pool pro rata to shares held.

    Each holder gets pool x shares / total shares rounded down to the
    currency quantum; the leftover quanta go to the largest remainders so
    the gross amounts add up to the pool exactly. Holders without shares are
    dropped.
    """
    active = [h for h in holdings if h.shares and h.shares > 0]
    total_shares = sum(h.shares for h in active)
    if not active or total_shares <= 0:
        raise NoShareholdersError("No shareholders with shares to distribute to")

    quantum = currency_quantum(currency)
    pool = round_amount(pool, currency)

    exact = [pool * Decimal(h.shares) / Decimal(total_shares) for h in active]
    floored = [amount.quantize(quantum, rounding=ROUND_DOWN) for amount in exact]

    leftover_units = int((pool - sum(floored)) / quantum)
    # Ties go to the holder listed first.
    order = sorted(
        range(len(active)), key=lambda i: (exact[i] - floored[i], -i), reverse=True
    )
    for i in order[:leftover_units]:
        floored[i] += quantum

    allocations = []
    for holding, gross in zip(active, floored):
        tax, net = withholding(gross, tax_rate, currency)
        allocations.append(
            Allocation(
                shareholder_id=holding.shareholder_id,
                shareholder_name=holding.shareholder_name,
                shares=holding.shares,
                gross_amount=gross,
                tax_amount=tax,
                net_amount=net,
            )
        )
    return allocations
