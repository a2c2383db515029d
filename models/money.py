"""Helpers for handling monetary amounts as Decimal."""

from decimal import Decimal, InvalidOperation

ZERO = Decimal("0")


def to_decimal(value) -> Decimal:
    """Convert an amount read from the database, a CLI argument or a record to Decimal.

    Floats go through str() so that 0.1 becomes Decimal("0.1") and not its
    binary expansion.

    Raises:
        ValueError: If the value is None, not a number, NaN or infinite.
    """
    if value is None or isinstance(value, bool):
        raise ValueError(f"Invalid amount: {value!r}")
    try:
        result = Decimal(str(value).strip().replace(",", ""))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}") from None
    if not result.is_finite():
        raise ValueError(f"Invalid amount: {value!r}")
    return result
