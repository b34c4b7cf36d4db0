"""CLI helpers for date and period resolution."""

from datetime import date

import click

from ledgerkit.utils.date_parser import PERIODS, get_date_range, parse_date

_PERIOD_LIST = ", ".join(f"--{period}" for period in PERIODS)


def period_options(command):
    """Add --this-month, --last-quarter, ... flags to a command."""
    for period in reversed(PERIODS):
        label = period.replace("-", " ")
        command = click.option(
            f"--{period}", "period_" + period.replace("-", "_"), is_flag=True, help=f"Limit to {label}"
        )(command)
    return command


def collect_period_flags(kwargs: dict) -> dict[str, bool]:
    """Pop the period flag values added by ``period_options`` out of kwargs."""
    return {period: kwargs.pop("period_" + period.replace("-", "_"), False) for period in PERIODS}


def parse_date_or_exit(ctx: click.Context, value: str, label: str) -> date:
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period_flags: dict[str, bool],
    default_range: tuple[date | None, date | None] | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from period flags or explicit dates."""
    period_count = sum(1 for is_set in period_flags.values() if is_set)

    if period_count > 1:
        click.echo(
            f"Error: Only one period option ({_PERIOD_LIST}) can be specified at a time.",
            err=True,
        )
        ctx.exit(1)

    if period_count > 0 and (start_date or end_date):
        click.echo(
            "Error: Period options (--this-month, --last-year, etc.) cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)

    start = None
    end = None

    if period_count == 1:
        for period, is_set in period_flags.items():
            if is_set:
                start, end = get_date_range(period)
                break
    else:
        if start_date:
            start = parse_date_or_exit(ctx, start_date, "start date")
        if end_date:
            end = parse_date_or_exit(ctx, end_date, "end date")

        if start is None and end is None and default_range is not None:
            start, end = default_range

    return start, end
