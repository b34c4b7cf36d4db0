"""Output formatting shared by CLI commands."""

from decimal import Decimal


def money(amount: Decimal) -> str:
    """Format an amount with thousands separators and two decimals."""
    return f"{amount:,.2f}"


def money_or_blank(amount: Decimal) -> str:
    return money(amount) if amount else ""
