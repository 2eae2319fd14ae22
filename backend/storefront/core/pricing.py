"""Pricing — markup arithmetic for local listings.

Invariants:
    - selling_price = cost * (1 + markup / 100), rounded half-up to cents
    - All arithmetic in Decimal; floats are converted via str() to avoid binary noise
"""

from decimal import Decimal, ROUND_HALF_UP

CENTS = Decimal("0.01")


def to_decimal(value) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def selling_price(cost_price, markup_percentage) -> Decimal:
    """Price shown to shoppers for a given supplier cost and markup."""
    cost = to_decimal(cost_price)
    markup = to_decimal(markup_percentage)
    price = cost * (Decimal(1) + markup / Decimal(100))
    return price.quantize(CENTS, rounding=ROUND_HALF_UP)


def money(value) -> float | None:
    """Serialize a Numeric column for JSON."""
    if value is None:
        return None
    return float(to_decimal(value).quantize(CENTS, rounding=ROUND_HALF_UP))
