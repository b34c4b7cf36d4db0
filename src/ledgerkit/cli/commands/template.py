"""Journal entry template commands."""

from datetime import date
from decimal import Decimal

import click
from ledgerkit.cli.commands.entry import echo_entry
from ledgerkit.cli.date_filters import parse_date_or_exit
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.cli.formatting import money, money_or_blank
from ledgerkit.domain.entities import DynamicAccount, PostingContext, TriggerType
from ledgerkit.domain.errors import DomainError
from ledgerkit.domain.templates import TemplateService
from ledgerkit.utils.amount_parser import parse_amount

TRIGGER_TYPES = click.Choice([t.value for t in TriggerType], case_sensitive=False)


def _service(ctx) -> TemplateService:
    return TemplateService(ctx.obj["db"], currency=ctx.obj["currency"])


def _pairs(ctx, values: tuple[str, ...], option: str) -> dict[str, str]:
    pairs = {}
    for value in values:
        key, sep, val = value.partition("=")
        if not sep or not key:
            click.echo(f"Error: Invalid {option} '{value}': expected KEY=VALUE", err=True)
            ctx.exit(1)
        pairs[key.strip()] = val.strip()
    return pairs


@click.group()
def template_group():
    """Manage auto-posting templates."""
    pass


@template_group.command("seed")
@click.pass_context
def seed_templates(ctx):
    """Insert the built-in templates that are not yet present."""
    created = _service(ctx).seed_default_templates()
    if not created:
        click.echo("All default templates already exist.")
        return
    click.echo(f"Seeded {len(created)} templates: {', '.join(created)}")


@template_group.command("list")
@click.option("--trigger", type=TRIGGER_TYPES, help="Only templates for this trigger")
@click.option("--active-only", is_flag=True, help="Hide inactive templates")
@click.pass_context
def list_templates(ctx, trigger: str | None, active_only: bool):
    """List templates."""
    templates = _service(ctx).list_templates(
        trigger_type=TriggerType(trigger.upper()) if trigger else None,
        active_only=active_only,
    )
    if not templates:
        click.echo("No templates found.")
        return

    click.echo(f"\n{'Code':<22} {'Trigger':<18} {'Active':<6} Name")
    click.echo("-" * 80)
    for tpl in templates:
        click.echo(
            f"{tpl.code:<22} {tpl.trigger_type.value:<18} {'yes' if tpl.is_active else 'no':<6} {tpl.name}"
        )


@template_group.command("show")
@click.argument("code")
@click.pass_context
def show_template(ctx, code: str):
    """Show a template's line rules."""
    try:
        tpl = _service(ctx).get_template(code)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"{tpl.code}: {tpl.name}")
    click.echo(f"  Trigger: {tpl.trigger_type.value}   Active: {'yes' if tpl.is_active else 'no'}")
    for line in tpl.lines:
        if isinstance(line.account, DynamicAccount):
            account = f"<{line.account.context_key}>"
        else:
            account = line.account.code
        click.echo(f"  {line.line_number:>2}. {line.side.value:<6} {account:<20} {line.amount_type.value}")


@template_group.command("validate")
@click.argument("code", required=False)
@click.pass_context
def validate_template(ctx, code: str | None):
    """Check that a template (or every template) is well formed and balances."""
    service = _service(ctx)
    try:
        codes = [code] if code else [tpl.code for tpl in service.list_templates()]
        reports = [service.validate_template(c) for c in codes]
    except DomainError as e:
        handle_domain_error(ctx, e)

    failed = False
    for report in reports:
        status = "OK" if report.valid else "INVALID"
        click.echo(f"{report.code}: {status} (debit {report.total_debit}, credit {report.total_credit})")
        for error in report.errors:
            click.echo(f"  error: {error}")
        for warning in report.warnings:
            click.echo(f"  warning: {warning}")
        failed = failed or not report.valid
    if failed:
        ctx.exit(1)


def _toggle(ctx, code: str, is_active: bool) -> None:
    try:
        tpl = _service(ctx).set_template_active(code, is_active)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Template {tpl.code} {'enabled' if tpl.is_active else 'disabled'}")


@template_group.command("enable")
@click.argument("code")
@click.pass_context
def enable_template(ctx, code: str):
    """Activate a template."""
    _toggle(ctx, code, True)


@template_group.command("disable")
@click.argument("code")
@click.pass_context
def disable_template(ctx, code: str):
    """Deactivate a template."""
    _toggle(ctx, code, False)


@template_group.command("apply")
@click.argument("code")
@click.option("--amount", required=True, help="Event total amount")
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.option("--description", required=True, help="Entry description")
@click.option("--document-id", help="Id of the originating business document")
@click.option("--account", "hints", multiple=True, help="KEY=ACCOUNT for dynamic accounts, e.g. treasury_account=1.1.01.003")
@click.option("--component", "components", multiple=True, help="NAME=AMOUNT, e.g. tax=21")
@click.option("--draft", is_flag=True, help="Create the entry as a DRAFT instead of posting it")
@click.option("--preview", is_flag=True, help="Show the computed lines without writing an entry")
@click.pass_context
def apply_template(ctx, code, amount, entry_date, description, document_id, hints, components, draft, preview):
    """Generate a journal entry from a template.

    Examples:
        ledgerkit template apply EXPENSE --amount 150 --description "Fuel" \\
            --account expense_account=5.3.04 --account treasury_account=1.1.01.001
    """
    service = _service(ctx)
    try:
        tpl = service.get_template(code)
        context = PostingContext(
            trigger_type=tpl.trigger_type,
            amount=parse_amount(amount),
            date=parse_date_or_exit(ctx, entry_date, "date") if entry_date else date.today(),
            description=description,
            currency=ctx.obj["currency"],
            reference_document_id=document_id,
            account_hints=_pairs(ctx, hints, "--account"),
            components={k: parse_amount(v) for k, v in _pairs(ctx, components, "--component").items()},
        )
        if preview:
            lines = service.preview_template(code, context)
        else:
            entry = service.apply_template(code, context, post=not draft)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if preview:
        click.echo(f"Preview of {code} ({context.date}):")
        for line in lines:
            click.echo(f"  {line.account_code:<14} {money_or_blank(line.debit):>14} {money_or_blank(line.credit):>14}")
        total_debit = sum((line.debit for line in lines), Decimal("0"))
        total_credit = sum((line.credit for line in lines), Decimal("0"))
        click.echo(f"  {'Total':<14} {money(total_debit):>14} {money(total_credit):>14}")
        return
    echo_entry(entry)


def register_commands(cli: click.Group) -> None:
    """Register template commands with main CLI."""
    cli.add_command(template_group, name="template")
