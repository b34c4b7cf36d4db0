"""Utility for resolving account codes or IDs to accounts."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ledgerkit.domain.chart import ChartOfAccountsService
    from ledgerkit.domain.entities import Account


def resolve_account(chart_service: ChartOfAccountsService, account: str | int) -> Account:
    """Resolve an account code or ID to an account.

    Codes are tried first, so a root code such as "5" resolves to the
    account coded "5" rather than the account with ID 5. A "#" prefix
    ("#12") forces lookup by ID.

    Args:
        chart_service: ChartOfAccountsService instance
        account: Account code, ID, or "#ID"

    Returns:
        Account entity

    Raises:
        ValueError: If no account matches
    """
    if isinstance(account, int):
        found = chart_service.get_account(account)
        if found is None:
            raise ValueError(f"Account ID {account} not found")
        return found

    account = account.strip()
    if account.startswith("#"):
        try:
            account_id = int(account[1:])
        except ValueError:
            raise ValueError(f"Invalid account ID '{account}'")
        found = chart_service.get_account(account_id)
        if found is None:
            raise ValueError(f"Account ID {account_id} not found")
        return found

    found = chart_service.get_account_by_code(account)
    if found is not None:
        return found

    if account.isdigit():
        found = chart_service.get_account(int(account))
        if found is not None:
            return found

    raise ValueError(f"Account '{account}' not found")
