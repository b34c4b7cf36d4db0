"""Financial report commands."""

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
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.reports import ReportService
from ledgerkit.utils.date_parser import get_date_range

WIDTH = 96


def _statement_section(title: str, lines, total) -> None:
    click.echo(f"\n{title}")
    for line in lines:
        label = f"{line.account.code} {line.account.name}"
        click.echo(f"  {label:<60} {money(line.balance):>18}")
    click.echo(f"  {'Total ' + title.lower():<60} {money(total):>18}")


@click.group()
def report_group():
    """Financial statements from posted entries."""
    pass


@report_group.command("trial-balance")
@click.option("--as-of", help="Last date included (default: today)")
@click.option("--start-date", help="First date included (default: since inception)")
@click.option("--end-date", help="Alias for --as-of")
@period_options
@click.option("--include-zero", is_flag=True, help="List postable accounts without movements")
@click.pass_context
def trial_balance(ctx, as_of, start_date, end_date, include_zero, **period_kwargs):
    """Trial balance: sums and balances per account."""
    service = ReportService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date or as_of,
        period_flags=collect_period_flags(period_kwargs),
    )
    report = service.trial_balance(as_of=end or date.today(), start_date=start, include_zero=include_zero)

    click.echo(f"\nTrial balance as of {report.as_of}" + (f" from {report.start_date}" if report.start_date else ""))
    click.echo(f"{'Account':<44} {'Debits':>12} {'Credits':>12} {'Debit bal.':>12} {'Credit bal.':>12}")
    click.echo("-" * WIDTH)
    for row in report.rows:
        label = f"{row.account.code} {row.account.name}"[:44]
        click.echo(
            f"{label:<44} {money(row.sum_debit):>12} {money(row.sum_credit):>12} "
            f"{money_or_blank(row.debit_balance):>12} {money_or_blank(row.credit_balance):>12}"
        )
    click.echo("-" * WIDTH)
    t = report.totals
    click.echo(
        f"{'Totals':<44} {money(t.sum_debit):>12} {money(t.sum_credit):>12} {money(t.debit):>12} {money(t.credit):>12}"
    )
    if not report.is_balanced:
        click.echo("Warning: debit and credit balances do not tie.", err=True)


@report_group.command("balance-sheet")
@click.option("--as-of", help="Balance date (default: today)")
@click.option("--result-from", help="Accumulate income/expense from this date (default: since inception)")
@click.pass_context
def balance_sheet(ctx, as_of, result_from):
    """Balance sheet with the accumulated result line."""
    service = ReportService(ctx.obj["db"])
    when = parse_date_or_exit(ctx, as_of, "as-of date") if as_of else date.today()
    since = parse_date_or_exit(ctx, result_from, "result-from date") if result_from else None
    report = service.balance_sheet(as_of=when, result_from=since)

    click.echo(f"\nBalance sheet as of {report.as_of}")
    _statement_section("Assets", report.assets, report.totals.assets)
    _statement_section("Liabilities", report.liabilities, report.totals.liabilities)
    _statement_section("Equity", report.equity, report.totals.equity)
    click.echo(f"\n  {'Result for the period':<60} {money(report.totals.result):>18}")
    click.echo(f"  {'Liabilities + equity + result':<60} {money(report.totals.liabilities_and_equity):>18}")
    if not report.is_balanced:
        click.echo("Warning: assets do not equal liabilities + equity + result.", err=True)


@report_group.command("income-statement")
@click.option("--start-date", help="Period start")
@click.option("--end-date", help="Period end")
@period_options
@click.pass_context
def income_statement(ctx, start_date, end_date, **period_kwargs):
    """Income statement for a period (default: this year to date)."""
    service = ReportService(ctx.obj["db"])
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=collect_period_flags(period_kwargs),
        default_range=get_date_range("this-year"),
    )
    if start is None:
        start = date.today().replace(month=1, day=1) if end is None else end.replace(month=1, day=1)
    if end is None:
        end = date.today()

    try:
        report = service.income_statement(start, end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nIncome statement {report.start_date} to {report.end_date}")
    _statement_section("Income", report.income, report.totals.income)
    _statement_section("Expenses", report.expenses, report.totals.expense)
    click.echo(f"\n  {'Result':<60} {money(report.totals.result):>18}")


@report_group.command("ledger")
@click.argument("account", metavar="ACCOUNT")
@click.option("--start-date", help="First date included")
@click.option("--end-date", help="Last date included")
@period_options
@click.pass_context
def general_ledger(ctx, account, start_date, end_date, **period_kwargs):
    """General ledger of one account. ACCOUNT is a code or #ID."""
    db = ctx.obj["db"]
    acc = resolve_account_or_exit(ctx, ChartOfAccountsService(db), account)
    start, end = resolve_cli_date_range(
        ctx,
        start_date=start_date,
        end_date=end_date,
        period_flags=collect_period_flags(period_kwargs),
    )
    try:
        report = ReportService(db).general_ledger(acc.id, start_date=start, end_date=end)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"\nGeneral ledger {report.account.code} {report.account.name}")
    click.echo(f"{'Date':<10} {'#':>6}  {'Description':<36} {'Debit':>12} {'Credit':>12} {'Balance':>14}")
    click.echo("-" * WIDTH)
    for mov in report.movements:
        text = (mov.line_description or mov.entry_description)[:36]
        click.echo(
            f"{mov.date!s:<10} {mov.entry_number:>6}  {text:<36} {money_or_blank(mov.debit):>12} "
            f"{money_or_blank(mov.credit):>12} {money(mov.balance):>14}"
        )
    click.echo("-" * WIDTH)
    t = report.totals
    click.echo(f"{'Totals':<55} {money(t.debit):>12} {money(t.credit):>12} {money(t.balance):>14}")


def register_commands(cli: click.Group) -> None:
    """Register report commands with main CLI."""
    cli.add_command(report_group, name="report")
