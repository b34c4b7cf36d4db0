"""Main CLI entry point."""

import click
from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.logging_config import configure_logging

# Import and register all commands at module level
from ledgerkit.cli.commands import (
    account,
    init_chart,
    entry,
    template,
    post,
    report,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides LEDGERKIT_DB_PATH environment variable)",
    envvar="LEDGERKIT_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    envvar="LEDGERKIT_LOG_LEVEL",
    help="Log to stderr at this level",
)
@click.option("--log-json", is_flag=True, envvar="LEDGERKIT_LOG_JSON", help="Emit log records as JSON lines")
@click.option(
    "--currency",
    default="ARS",
    show_default=True,
    envvar="LEDGERKIT_CURRENCY",
    help="Functional currency of the ledger",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None, log_json: bool, currency: str):
    """Ledgerkit - double-entry accounting ledger.

    Maintain a chart of accounts, record and post journal entries, generate
    entries from business events through templates, and produce trial
    balance, balance sheet, income statement and general ledger reports.
    """
    ctx.ensure_object(dict)

    if log_level or log_json:
        configure_logging(level=log_level or "INFO", json_format=log_json)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["currency"] = currency.upper()


# Register all commands
account.register_commands(cli)
init_chart.register_commands(cli)
entry.register_commands(cli)
template.register_commands(cli)
post.register_commands(cli)
report.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
