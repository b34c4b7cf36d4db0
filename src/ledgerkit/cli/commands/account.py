"""Chart of accounts commands."""

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.chart import ChartOfAccountsService
from ledgerkit.domain.entities import AccountType
from ledgerkit.domain.errors import DomainError

ACCOUNT_TYPES = click.Choice([t.value for t in AccountType], case_sensitive=False)


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="NAME")
@click.option("--type", "account_type", type=ACCOUNT_TYPES, required=True, help="Account type")
@click.option(
    "--header",
    is_flag=True,
    help="Summary account that does not accept journal lines",
)
@click.pass_context
def create_account(ctx, code: str, name: str, account_type: str, header: bool):
    """Create an account.

    The level and parent are derived from CODE: 1.1.01.001 sits under 1.1.01.

    Examples:
        ledgerkit account create 1.1.01.010 "Bank USD Account" --type ASSET
        ledgerkit account create 5.5 "Other Expenses" --type EXPENSE --header
    """
    service = ChartOfAccountsService(ctx.obj["db"])
    try:
        account = service.create_account(
            code=code,
            name=name,
            account_type=AccountType(account_type.upper()),
            accepts_entries=not header,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created account {account.code} '{account.name}' (ID: {account.id}, level {account.level})")


@account_group.command("list")
@click.option("--type", "account_type", type=ACCOUNT_TYPES, help="Only accounts of this type")
@click.option("--level", type=int, help="Only accounts at this level")
@click.option("--postable", is_flag=True, help="Only active accounts that accept entries")
@click.option("--include-inactive", is_flag=True, help="Include inactive accounts")
@click.pass_context
def list_accounts(ctx, account_type: str | None, level: int | None, postable: bool, include_inactive: bool):
    """List accounts ordered by code."""
    service = ChartOfAccountsService(ctx.obj["db"])
    accounts = service.list_accounts(
        account_type=AccountType(account_type.upper()) if account_type else None,
        level=level,
        is_active=None if include_inactive else True,
        postable_only=postable,
    )
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo(f"\n{'Code':<14} {'Name':<45} {'Type':<10} Flags")
    click.echo("-" * 80)
    for acc in accounts:
        flags = []
        if not acc.accepts_entries:
            flags.append("header")
        if not acc.is_active:
            flags.append("inactive")
        click.echo(f"{acc.code:<14} {acc.name:<45} {acc.account_type.value:<10} {', '.join(flags)}")


@account_group.command("tree")
@click.option("--include-inactive", is_flag=True, help="Include inactive accounts")
@click.pass_context
def account_tree(ctx, include_inactive: bool):
    """Show the chart of accounts as a tree."""
    service = ChartOfAccountsService(ctx.obj["db"])
    roots = service.get_account_tree(active_only=not include_inactive)
    if not roots:
        click.echo("No accounts found.")
        return

    def show(node, depth):
        marker = "" if node.account.accepts_entries else " [header]"
        click.echo(f"{'    ' * depth}{node.account.code} {node.account.name}{marker}")
        for child in node.children:
            show(child, depth + 1)

    for root in roots:
        show(root, 0)


@account_group.command("show")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def show_account(ctx, account: str):
    """Show one account. ACCOUNT is a code or #ID."""
    service = ChartOfAccountsService(ctx.obj["db"])
    acc = resolve_account_or_exit(ctx, service, account)
    parent = service.get_account(acc.parent_id) if acc.parent_id else None

    click.echo(f"Code:            {acc.code}")
    click.echo(f"Name:            {acc.name}")
    click.echo(f"Type:            {acc.account_type.value}")
    click.echo(f"Level:           {acc.level}")
    click.echo(f"Parent:          {parent.code + ' ' + parent.name if parent else '-'}")
    click.echo(f"Accepts entries: {'yes' if acc.accepts_entries else 'no'}")
    click.echo(f"Active:          {'yes' if acc.is_active else 'no'}")


@account_group.command("update")
@click.argument("account", metavar="ACCOUNT")
@click.option("--name", help="New name")
@click.option("--type", "account_type", type=ACCOUNT_TYPES, help="New account type")
@click.option("--accepts-entries/--header", default=None, help="Allow or forbid journal lines")
@click.option("--active/--inactive", default=None, help="Activate or deactivate")
@click.pass_context
def update_account(
    ctx,
    account: str,
    name: str | None,
    account_type: str | None,
    accepts_entries: bool | None,
    active: bool | None,
):
    """Update an account. The code cannot be changed.

    Examples:
        ledgerkit account update 1.1.01.002 --name "Petty Cash Office"
        ledgerkit account update 1.1.01.005 --inactive
    """
    service = ChartOfAccountsService(ctx.obj["db"])
    acc = resolve_account_or_exit(ctx, service, account)
    try:
        updated = service.update_account(
            acc.id,
            name=name,
            account_type=AccountType(account_type.upper()) if account_type else None,
            accepts_entries=accepts_entries,
            is_active=active,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated account {updated.code} '{updated.name}'")


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_account(ctx, account: str, yes: bool):
    """Delete an account with no children and no journal lines."""
    service = ChartOfAccountsService(ctx.obj["db"])
    acc = resolve_account_or_exit(ctx, service, account)

    if not yes and not click.confirm(f"Are you sure you want to delete account {acc.code} '{acc.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(acc.id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted account {acc.code} '{acc.name}'")


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
