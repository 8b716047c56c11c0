"""
Money helpers.

Amounts are held as integer cents. Decimal is used only at the edges
(parsing input, rendering output, applying a percentage rate).
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation

CENT = Decimal("0.01")


def to_cents(amount: Decimal | float | int | str) -> int:
    """
    Convert a major-unit amount to integer cents, rounding half-up.

    Floats are routed through str() so 89.99 becomes 8999, not 8998.

    Raises:
        ValueError: If the amount is not a number or is negative
    """
    try:
        value = Decimal(str(amount))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {amount!r}")
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount!r}")
    if value < 0:
        raise ValueError(f"Amount must not be negative: {amount!r}")
    return int((value * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_cents(cents: int) -> Decimal:
    return (Decimal(cents) / 100).quantize(CENT)


def apply_rate(cents: int, rate: Decimal) -> int:
    """Return cents * rate rounded half-up to a whole cent."""
    return int((Decimal(cents) * rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_amount(cents: int, symbol: str = "Rs") -> str:
    return f"{symbol} {from_cents(cents):,.2f}"
