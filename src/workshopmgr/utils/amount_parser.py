"""Amount parsing utilities."""

from decimal import Decimal, InvalidOperation
import re


def _normalize_separators(amount_str: str) -> str:
    """Rewrite thousands and decimal separators to plain "1234.56".

    When both "." and "," appear, the rightmost one is the decimal separator.
    A lone "," followed by one or two digits is a decimal comma ("12,50").
    """
    if "," in amount_str and "." in amount_str:
        if amount_str.rfind(",") > amount_str.rfind("."):
            return amount_str.replace(".", "").replace(",", ".")
        return amount_str.replace(",", "")
    if amount_str.count(",") == 1 and re.search(r",\d{1,2}$", amount_str):
        return amount_str.replace(",", ".")
    return amount_str.replace(",", "")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Handles various formats:
    - "123.45"
    - "€123.45", "123,45 €"
    - "-123.45"
    - "1,234.56"
    - "1.234,56"
    - "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

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

    amount_str = re.sub(r"[$€£¥\s]", "", amount_str)
    amount_str = _normalize_separators(amount_str)

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount
