"""Number coercion and display formatting shared by services and the API."""

from decimal import Decimal, InvalidOperation
from typing import Any, Optional

CENT = Decimal("0.01")

_LARGE_NUMBER_STEPS = (
    (Decimal("1000000000000"), "T"),
    (Decimal("1000000000"), "B"),
    (Decimal("1000000"), "M"),
    (Decimal("1000"), "K"),
)


def to_decimal(value: Any) -> Optional[Decimal]:
    """Convert a JSON number/string to Decimal; None, bools and junk -> None.

    Floats go through str() so 0.1 becomes Decimal("0.1"), not its binary expansion.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        result = value
    else:
        try:
            result = Decimal(str(value))
        except (InvalidOperation, ValueError):
            return None
    if not result.is_finite():
        return None
    return result


def round2(value: Decimal) -> Decimal:
    """Round to 2 decimal places for monetary values."""
    return value.quantize(CENT)


def format_price(value: Optional[Decimal], currency_symbol: str = "$") -> str:
    """Format a unit price; sub-dollar prices keep more precision."""
    if value is None:
        return "unknown"
    if abs(value) < 1:
        return f"{currency_symbol}{value:.6f}"
    return f"{currency_symbol}{value:,.2f}"


def format_price_change(change: Optional[Decimal]) -> str:
    """Format a percentage change with a direction arrow, e.g. '↑ 2.50%'."""
    if change is None:
        return "unknown"
    sign = "↑" if change >= 0 else "↓"
    return f"{sign} {abs(change):.2f}%"


def format_large_number(value: Optional[Decimal], currency_symbol: str = "$") -> str:
    """Abbreviate large amounts: 1_234_000_000 -> '$1.23B'."""
    if value is None:
        return "unknown"
    for threshold, suffix in _LARGE_NUMBER_STEPS:
        if abs(value) >= threshold:
            return f"{currency_symbol}{value / threshold:.2f}{suffix}"
    return f"{currency_symbol}{value:.2f}"
