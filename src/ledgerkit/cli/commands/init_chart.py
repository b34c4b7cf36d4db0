"""Initialize chart of accounts command."""

import click
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.chart import ChartOfAccountsService
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.templates import TemplateService


@click.command("init-chart")
@click.option("--with-templates", is_flag=True, help="Also seed the default posting templates")
@click.pass_context
def init_chart(ctx, with_templates: bool):
    """Seed the standard chart of accounts into an empty ledger."""
    db = ctx.obj["db"]
    service = ChartOfAccountsService(db)

    try:
        summary = service.bulk_initialize()
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {summary.count} accounts:")
    for account_type, count in summary.by_type.items():
        click.echo(f"  {account_type.value:<10} {count}")

    if with_templates:
        created = TemplateService(db, currency=ctx.obj["currency"]).seed_default_templates()
        click.echo(f"Seeded {len(created)} templates")


def register_commands(cli):
    """Register init-chart command with main CLI."""
    cli.add_command(init_chart)
