"""Business event posting commands."""

from datetime import date

import click
from ledgerkit.cli.commands.entry import echo_entry
from ledgerkit.cli.date_filters import parse_date_or_exit
from ledgerkit.cli.error_handling import handle_domain_error
from ledgerkit.domain.posting import AutoPostingService
from ledgerkit.utils.amount_parser import parse_amount


def _service(ctx) -> AutoPostingService:
    return AutoPostingService(ctx.obj["db"], currency=ctx.obj["currency"])


def _date(ctx, value: str | None) -> date:
    return parse_date_or_exit(ctx, value, "date") if value else date.today()


def _amount(ctx, value: str | None, label: str):
    if value is None:
        return None
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def post_group():
    """Post business events through their templates."""
    pass


@post_group.command("receipt")
@click.argument("receipt_id")
@click.option("--total", required=True, help="Amount applied to the customer balance")
@click.option("--treasury", required=True, help="Account code where the funds were received")
@click.option("--retention", help="Withholdings suffered")
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.option("--reference", help="Receipt number")
@click.pass_context
def post_receipt(ctx, receipt_id, total, treasury, retention, entry_date, reference):
    """Post a customer receipt."""
    try:
        entry = _service(ctx).register_customer_receipt(
            receipt_id=receipt_id,
            total=_amount(ctx, total, "total"),
            treasury_account=treasury,
            entry_date=_date(ctx, entry_date),
            retention=_amount(ctx, retention, "retention"),
            reference=reference,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    echo_entry(entry)


@post_group.command("payment")
@click.argument("payment_id")
@click.option("--total", required=True, help="Amount applied to the supplier balance")
@click.option("--treasury", required=True, help="Account code the funds were paid from")
@click.option("--retention", help="Withholdings applied")
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.option("--reference", help="Payment order number")
@click.pass_context
def post_payment(ctx, payment_id, total, treasury, retention, entry_date, reference):
    """Post a supplier payment."""
    try:
        entry = _service(ctx).register_supplier_payment(
            payment_id=payment_id,
            total=_amount(ctx, total, "total"),
            treasury_account=treasury,
            entry_date=_date(ctx, entry_date),
            retention=_amount(ctx, retention, "retention"),
            reference=reference,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    echo_entry(entry)


@post_group.command("purchase-invoice")
@click.argument("invoice_id")
@click.option("--subtotal", required=True, help="Net amount of goods")
@click.option("--tax", required=True, help="VAT amount")
@click.option("--perception", help="Perceptions charged by the supplier")
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.option("--reference", help="Invoice number")
@click.pass_context
def post_purchase_invoice(ctx, invoice_id, subtotal, tax, perception, entry_date, reference):
    """Post an approved purchase invoice."""
    try:
        entry = _service(ctx).approve_purchase_invoice(
            invoice_id=invoice_id,
            subtotal=_amount(ctx, subtotal, "subtotal"),
            tax=_amount(ctx, tax, "tax"),
            perception=_amount(ctx, perception, "perception"),
            entry_date=_date(ctx, entry_date),
            reference=reference,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    echo_entry(entry)


@post_group.command("credit-note")
@click.argument("credit_note_id")
@click.option("--subtotal", required=True, help="Net amount of goods returned")
@click.option("--tax", required=True, help="VAT amount")
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.option("--reference", help="Credit note number")
@click.pass_context
def post_credit_note(ctx, credit_note_id, subtotal, tax, entry_date, reference):
    """Post a supplier credit note."""
    try:
        entry = _service(ctx).issue_credit_note(
            credit_note_id=credit_note_id,
            subtotal=_amount(ctx, subtotal, "subtotal"),
            tax=_amount(ctx, tax, "tax"),
            entry_date=_date(ctx, entry_date),
            reference=reference,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    echo_entry(entry)


@post_group.command("sale-invoice")
@click.argument("invoice_id")
@click.option("--subtotal", required=True, help="Net sale amount")
@click.option("--tax", default="0", help="VAT amount")
@click.option("--template", "template_code", help="Template to use (default SALE_INVOICE_A)")
@click.option("--date", "entry_date", help="Entry date (default: today)")
@click.option("--reference", help="Invoice number")
@click.pass_context
def post_sale_invoice(ctx, invoice_id, subtotal, tax, template_code, entry_date, reference):
    """Post an issued sale invoice."""
    try:
        entry = _service(ctx).register_sale_invoice(
            invoice_id=invoice_id,
            subtotal=_amount(ctx, subtotal, "subtotal"),
            tax=_amount(ctx, tax, "tax"),
            template_code=template_code,
            entry_date=_date(ctx, entry_date),
            reference=reference,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)
    echo_entry(entry)


def register_commands(cli: click.Group) -> None:
    """Register post commands with main CLI."""
    cli.add_command(post_group, name="post")
