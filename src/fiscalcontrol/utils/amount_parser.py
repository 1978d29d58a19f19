"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re

CENT = Decimal("0.01")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "$123.45", "Bs 123.45", "Bs.S 123.45"
    - "-123.45"
    - "1,234.56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount rounded to cents

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if amount_str is None or not str(amount_str).strip():
        raise ValueError("Empty amount string")

    amount_str = str(amount_str).strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols
    amount_str = re.sub(r"(?i)bs\.?s?\.?|[$€£¥]", "", amount_str)
    amount_str = amount_str.replace(",", "").strip()

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")

    if is_negative:
        amount = -amount
    return to_cents(amount)


def to_cents(amount: Decimal) -> Decimal:
    """Round an amount to cents.

    Raises:
        ValueError: If the amount is not finite or has too many digits
    """
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount}'")
    try:
        return amount.quantize(CENT)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount}': too many digits")


def require_non_negative(amount: Decimal) -> Decimal:
    """Return amount unchanged.

    Raises:
        ValueError: If amount is below zero
    """
    if amount < 0:
        raise ValueError(f"Amount must not be negative, got {amount}")
    return amount
