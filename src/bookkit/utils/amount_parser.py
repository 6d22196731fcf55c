"""Amount parsing utilities."""

import re
from decimal import Decimal, InvalidOperation

CENT = Decimal("0.01")


def parse_amount(amount_str: str, allow_negative: bool = False) -> Decimal:
    """Parse a money string into a Decimal rounded to cents.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "1,234.56"
    - "(123.45)" and "-123.45" (only when allow_negative is True)

    Args:
        amount_str: Amount string
        allow_negative: Accept negative values (balances can be overdrawn,
            transaction amounts cannot)

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed or is negative when not allowed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = amount_str.strip()

    is_negative = False
    if cleaned.startswith("(") and cleaned.endswith(")"):
        is_negative = True
        cleaned = cleaned[1:-1]

    cleaned = re.sub(r"[$€£¥,\s]", "", cleaned)
    if cleaned.startswith("-"):
        is_negative = not is_negative
        cleaned = cleaned[1:]

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if is_negative:
        amount = -amount
    if amount < 0 and not allow_negative:
        raise ValueError(f"Amount must not be negative: '{amount_str}'")

    return amount.quantize(CENT)
