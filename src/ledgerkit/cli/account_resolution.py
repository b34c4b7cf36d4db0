"""CLI helpers for account resolution."""

from __future__ import annotations

import click
from ledgerkit.domain.chart import ChartOfAccountsService
from ledgerkit.domain.entities import Account
from ledgerkit.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, chart_service: ChartOfAccountsService, account: str | int
) -> Account:
    """Resolve account code or ID, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    try:
        return resolve_account(chart_service, account)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
