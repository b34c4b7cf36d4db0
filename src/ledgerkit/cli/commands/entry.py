"""Journal entry commands."""

from datetime import date

import click
from ledgerkit.cli.account_resolution import resolve_account_or_exit
from ledgerkit.cli.date_filters import (
    collect_period_flags,
    parse_date_or_exit,
    period_options,
    resolve_cli_date_range,
)
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.formatting import money, money_or_blank
from ledgerkit.domain.chart import ChartOfAccountsService
from ledgerkit.domain.entities import EntryLineInput, EntryStatus, JournalEntry
from ledgerkit.domain.errors import DomainError, UnbalancedEntryError
from ledgerkit.domain.journal import JournalService
from ledgerkit.utils.amount_parser import parse_non_negative_amount


def parse_line_spec(ctx, chart: ChartOfAccountsService, spec: str) -> EntryLineInput:
    """Parse ``ACCOUNT:DEBIT:CREDIT[:DESCRIPTION]`` into an entry line."""
    parts = spec.split(":", 3)
    if len(parts) < 3:
        click.echo(f"Error: Invalid line '{spec}': expected ACCOUNT:DEBIT:CREDIT[:DESCRIPTION]", err=True)
        ctx.exit(1)

    account = resolve_account_or_exit(ctx, chart, parts[0])
    try:
        debit = parse_non_negative_amount(parts[1])
        credit = parse_non_negative_amount(parts[2])
    except ValueError as e:
        click.echo(f"Error: Invalid line '{spec}': {e}", err=True)
        ctx.exit(1)

    return EntryLineInput(
        account_id=account.id,
        debit=debit,
        credit=credit,
        description=parts[3] if len(parts) > 3 and parts[3] else None,
    )


def echo_entry(entry: JournalEntry) -> None:
    kind = "automatic" if entry.is_automatic else "manual"
    click.echo(f"Entry #{entry.entry_number} (ID: {entry.id})  {entry.date}  {entry.status.value}  [{kind}]")
    click.echo(f"  {entry.description}")
    if entry.reference:
        click.echo(f"  Reference: {entry.reference}")
    if entry.template_code:
        click.echo(f"  Template: {entry.template_code} ({entry.trigger_type.value if entry.trigger_type else '-'})")
    click.echo("-" * 90)
    for line in entry.lines:
        label = f"{line.account_code} {line.account_name}"
        click.echo(f"  {label:<50} {money_or_blank(line.debit):>16} {money_or_blank(line.credit):>16}")
    click.echo("-" * 90)
    click.echo(f"  {'Totals':<50} {money(entry.total_debit):>16} {money(entry.total_credit):>16}")


@click.group()
def entry_group():
    """Record, review and post journal entries."""
    pass


@entry_group.command("create")
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.option("--description", required=True, help="Entry description")
@click.option(
    "--line",
    "lines",
    multiple=True,
    required=True,
    help="ACCOUNT:DEBIT:CREDIT[:DESCRIPTION]; repeat for each line",
)
@click.option("--reference", help="Document reference")
@click.option("--post", is_flag=True, help="Post immediately (must balance)")
@click.pass_context
def create_entry(
    ctx,
    entry_date: str | None,
    description: str,
    lines: tuple[str, ...],
    reference: str | None,
    post: bool,
):
    """Create a journal entry (DRAFT unless --post).

    Examples:
        ledgerkit entry create --description "Owner contribution" \\
            --line 1.1.01.003:1000:0 --line 3.1.01:0:1000
        ledgerkit entry create --date 2024-03-31 --description "Rent" --post \\
            --line 5.2.05:500:0 --line 1.1.01.001:0:500
    """
    db = ctx.obj["db"]
    chart = ChartOfAccountsService(db)
    service = JournalService(db)

    when = parse_date_or_exit(ctx, entry_date, "date") if entry_date else date.today()
    line_inputs = [parse_line_spec(ctx, chart, spec) for spec in lines]

    try:
        entry = service.create_entry(
            entry_date=when,
            description=description,
            lines=line_inputs,
            status=EntryStatus.POSTED if post else EntryStatus.DRAFT,
            reference=reference,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created entry #{entry.entry_number} (ID: {entry.id}) as {entry.status.value}")


@entry_group.command("list")
@click.option("--status", type=click.Choice([s.value for s in EntryStatus], case_sensitive=False))
@click.option("--start-date", help="Start date (YYYY-MM-DD or relative like 'start of month')")
@click.option("--end-date", help="End date (YYYY-MM-DD or relative like 'today')")
@period_options
@click.option("--automatic/--manual", default=None, help="Only automatic or manual entries")
@click.option("--page", type=int, default=1, show_default=True)
@click.option("--limit", type=int, default=20, show_default=True)
@click.pass_context
def list_entries(ctx, status, start_date, end_date, automatic, page, limit, **period_kwargs):
    """List journal entries, newest first."""
    service = JournalService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=collect_period_flags(period_kwargs),
    )
    try:
        result = service.list_entries(
            status=EntryStatus(status.upper()) if status else None,
            start_date=start,
            end_date=end,
            is_automatic=automatic,
            page=page,
            limit=limit,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    if not result.entries:
        click.echo("No entries found.")
        return

    click.echo(f"\n{'#':>6}  {'Date':<10}  {'Status':<6}  {'Description':<40} {'Debit':>14} {'Credit':>14}")
    click.echo("-" * 100)
    for entry in result.entries:
        click.echo(
            f"{entry.entry_number:>6}  {entry.date!s:<10}  {entry.status.value:<6}  "
            f"{entry.description[:40]:<40} {money(entry.total_debit):>14} {money(entry.total_credit):>14}"
        )
    click.echo(f"\nPage {result.page} of {result.pages} ({result.total} entries)")


@entry_group.command("show")
@click.argument("entry_id", type=int)
@click.option("--number", is_flag=True, help="Treat the argument as an entry number")
@click.pass_context
def show_entry(ctx, entry_id: int, number: bool):
    """Show a journal entry with its lines."""
    service = JournalService(ctx.obj["db"])
    entry = service.get_entry_by_number(entry_id) if number else service.get_entry(entry_id)
    if entry is None:
        click.echo(f"Error: Journal entry {entry_id} not found", err=True)
        ctx.exit(1)
    echo_entry(entry)


@entry_group.command("confirm")
@click.argument("entry_id", type=int)
@click.pass_context
def confirm_entry(ctx, entry_id: int):
    """Post a draft entry. Fails if debits and credits differ."""
    service = JournalService(ctx.obj["db"])
    try:
        entry = service.confirm_entry(entry_id)
    except UnbalancedEntryError as e:
        click.echo(f"Error: {e}", err=True)
        click.echo("The entry remains a DRAFT.", err=True)
        ctx.exit(1)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Posted entry #{entry.entry_number}")


@entry_group.command("delete")
@click.argument("entry_id", type=int)
@click.option("--yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_entry(ctx, entry_id: int, yes: bool):
    """Delete a draft entry."""
    service = JournalService(ctx.obj["db"])
    entry = service.get_entry(entry_id)
    if entry is None:
        click.echo(f"Error: Journal entry {entry_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete entry #{entry.entry_number}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_entry(entry_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted entry #{entry.entry_number}")


def register_commands(cli: click.Group) -> None:
    """Register entry commands with main CLI."""
    cli.add_command(entry_group, name="entry")
