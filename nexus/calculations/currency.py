"""Currency rounding and conversion helpers."""

from decimal import ROUND_HALF_UP, Decimal

# Currencies without a minor unit in everyday use.
WHOLE_UNIT_CURRENCIES = {"RWF", "JPY", "UGX"}

RATE_QUANTUM = Decimal("0.000001")


def currency_quantum(currency: str) -> Decimal:
    """Smallest amount that is paid out in the given currency."""
    if currency and currency.upper() in WHOLE_UNIT_CURRENCIES:
        return Decimal("1")
    return Decimal("0.01")


def round_amount(amount, currency: str) -> Decimal:
    """Round an amount half-up to the currency's quantum."""
    return Decimal(amount).quantize(currency_quantum(currency), rounding=ROUND_HALF_UP)


def inverse_rate(rate) -> Decimal:
    """Rate for the reverse direction of a pair."""
    rate = Decimal(rate)
    if rate <= 0:
        raise ValueError("Exchange rate must be positive")
    return (Decimal("1") / rate).quantize(RATE_QUANTUM, rounding=ROUND_HALF_UP)


def convert_amount(amount, rate, to_currency: str, inverse: bool = False) -> Decimal:
    """Convert an amount at a rate, rounded for the target currency.

    With ``inverse`` the rate is quoted for the reverse pair and the amount
    is divided by it, so no rounded reciprocal enters the result.
    """
    amount = Decimal(amount)
    rate = Decimal(rate)
    if inverse:
        if rate <= 0:
            raise ValueError("Exchange rate must be positive")
        return round_amount(amount / rate, to_currency)
    return round_amount(amount * rate, to_currency)
