"""Amount parsing utilities."""

import math
import re


def parse_amount(amount_str: str) -> float:
    """Parse an amount string into a float.

    Handles various formats:
    - "123.45"
    - "123,45" (Portuguese decimal comma)
    - "€123.45" / "123,45 €"
    - "1.234,56" and "1,234.56" (the last separator is the decimal one)
    - "1 234,56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Float amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    # Handle parentheses notation (negative)
    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    # Remove currency symbols and grouping spaces
    amount_str = re.sub(r"[$€£\s]", "", amount_str)
    amount_str = amount_str.replace("EUR", "").replace("eur", "")

    last_comma = amount_str.rfind(",")
    last_dot = amount_str.rfind(".")
    if last_comma > last_dot:
        # Comma is the decimal separator
        amount_str = amount_str.replace(".", "").replace(",", ".")
    else:
        amount_str = amount_str.replace(",", "")

    try:
        amount = float(amount_str)
    except ValueError as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")

    if not math.isfinite(amount):
        raise ValueError(f"Could not parse amount '{amount_str}': not a finite number")

    return -amount if is_negative else amount
