"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a non-negative Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45"
    - "R$ 1,234.56"
    - "1,234.56"

    Line item amounts are never negative: the item kind carries the
    direction.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount rounded to cents

    Raises:
        ValueError: If amount string cannot be parsed or is negative
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    # Remove currency symbols
    cleaned = re.sub(r"R\$|[$€£¥]", "", amount_str.strip())

    # Remove thousands separators and whitespace
    cleaned = cleaned.replace(",", "").strip()

    try:
        amount = Decimal(cleaned)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if amount < 0:
        raise ValueError(f"Amount must be zero or greater, got '{amount_str}'")
    return amount.quantize(Decimal("0.01"))
