"""Utility functions for ledgerkit."""

from ledgerkit.utils.date_parser import parse_date, get_date_range
from ledgerkit.utils.amount_parser import parse_amount
from ledgerkit.utils.account_code import level_from_code, parent_code
from ledgerkit.utils.account_resolver import resolve_account

__all__ = [
    "parse_date",
    "get_date_range",
    "parse_amount",
    "level_from_code",
    "parent_code",
    "resolve_account",
]
