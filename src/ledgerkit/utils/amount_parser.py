"""Money parsing utilities."""

from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import re

_CURRENCY = re.compile(r"(ARS|USD|EUR|[$€£])", re.IGNORECASE)


def _normalize_separators(amount_str: str) -> str:
    """Turn ``1.234,56`` / ``1,234.56`` / ``1234,5`` into a plain decimal string."""
    has_comma = "," in amount_str
    has_dot = "." in amount_str

    if has_comma and has_dot:
        # Whichever separator comes last is the decimal point
        if amount_str.rfind(",") > amount_str.rfind("."):
            return amount_str.replace(".", "").replace(",", ".")
        return amount_str.replace(",", "")

    if has_comma:
        head, _, tail = amount_str.rpartition(",")
        if amount_str.count(",") == 1 and 1 <= len(tail) <= 2:
            return f"{head}.{tail}"
        return amount_str.replace(",", "")

    if amount_str.count(".") > 1:
        return amount_str.replace(".", "")

    return amount_str


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal rounded to cents.

    Handles various formats:
    - "123.45", "$123.45", "ARS 123.45"
    - "1,234.56" and "1.234,56"
    - "-123.45" and "(123.45)" (negative in parentheses)

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount with two decimal places

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = _CURRENCY.sub("", amount_str).replace(" ", "")
    if amount_str.startswith("-"):
        is_negative = not is_negative
        amount_str = amount_str[1:]

    amount_str = _normalize_separators(amount_str)

    try:
        amount = Decimal(amount_str)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}'") from e

    amount = amount.quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    return -amount if is_negative else amount


def parse_non_negative_amount(amount_str: str) -> Decimal:
    """Parse an amount that must not be negative (debit/credit columns)."""
    if not amount_str or not amount_str.strip():
        return Decimal("0.00")
    amount = parse_amount(amount_str)
    if amount < 0:
        raise ValueError(f"Amount must not be negative: '{amount_str}'")
    return amount
