"""Tests for journal entry templates."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.default_templates import DEFAULT_TEMPLATES
from ledgerkit.domain.entities import (
    AmountType,
    DynamicAccount,
    EntryStatus,
    FixedAccount,
    JournalEntryTemplate,
    LineSide,
    PostingContext,
    TemplateLine,
    TriggerType,
)
from ledgerkit.domain.errors import (
    AccountResolutionError,
    ConflictError,
    DuplicatePostingError,
    TemplateInactiveError,
    TemplateNotFoundError,
    UnbalancedTemplateOutputError,
    ValidationError,
)
from ledgerkit.domain.templates import compute_line_amount


def _context(trigger=TriggerType.EXPENSE, amount="150", **kwargs):
    kwargs.setdefault("description", "Event")
    kwargs.setdefault("date", date(2024, 4, 2))
    return PostingContext(trigger_type=trigger, amount=Decimal(amount), **kwargs)


def _line(amount_type, **kwargs):
    return TemplateLine(
        line_number=1,
        account=FixedAccount("1.1.01.001"),
        side=LineSide.DEBIT,
        amount_type=amount_type,
        **kwargs,
    )


class TestComputeLineAmount:
    def test_total(self):
        assert compute_line_amount(_line(AmountType.TOTAL), _context(amount="121")) == Decimal("121.00")

    def test_subtotal_defaults_to_total_minus_taxes(self):
        context = _context(amount="121", components={"tax": Decimal("21")})
        assert compute_line_amount(_line(AmountType.SUBTOTAL), context) == Decimal("100.00")

    def test_net_payment_defaults_to_total_minus_retention(self):
        context = _context(amount="100", components={"retention": Decimal("3.5")})
        assert compute_line_amount(_line(AmountType.NET_PAYMENT), context) == Decimal("96.50")

    def test_missing_component_is_zero(self):
        assert compute_line_amount(_line(AmountType.RETENTION), _context()) == Decimal("0.00")

    def test_percentage(self):
        line = _line(AmountType.PERCENTAGE, percentage=Decimal("21"))
        assert compute_line_amount(line, _context(amount="100")) == Decimal("21.00")

    def test_fixed(self):
        line = _line(AmountType.FIXED, fixed_amount=Decimal("12.5"))
        assert compute_line_amount(line, _context()) == Decimal("12.50")

    def test_custom_field(self):
        line = _line(AmountType.CUSTOM, custom_field="freight")
        context = _context(components={"freight": Decimal("7.333")})
        assert compute_line_amount(line, context) == Decimal("7.33")


def test_seed_default_templates(template_service, seeded_chart):
    assert {t.code for t in template_service.list_templates()} == {t.code for t in DEFAULT_TEMPLATES}
    assert template_service.seed_default_templates() == []


def test_template_round_trips_dynamic_accounts(template_service, seeded_chart):
    template = template_service.get_template("CUSTOMER_RECEIPT")

    assert template.trigger_type == TriggerType.CUSTOMER_RECEIPT
    assert template.lines[0].account == DynamicAccount("treasury_account")
    assert template.lines[2].account == FixedAccount("1.1.03.001")


@pytest.mark.parametrize("code", [t.code for t in DEFAULT_TEMPLATES])
def test_default_templates_validate(template_service, seeded_chart, code):
    report = template_service.validate_template(code)

    assert report.valid, report.errors
    assert report.balanced
    assert report.total_debit == report.total_credit


def test_validate_reports_missing_account(template_service, seeded_chart):
    template_service.create_template(
        JournalEntryTemplate(
            code="BROKEN",
            name="Broken",
            trigger_type=TriggerType.EXPENSE,
            is_active=True,
            lines=(
                TemplateLine(1, FixedAccount("9.9.9"), LineSide.DEBIT, AmountType.TOTAL),
                TemplateLine(2, FixedAccount("1.1.01"), LineSide.CREDIT, AmountType.SUBTOTAL),
            ),
        )
    )

    report = template_service.validate_template("BROKEN")

    assert not report.valid
    assert any("9.9.9" in error for error in report.errors)
    assert any("does not accept entries" in error for error in report.errors)


def test_validate_reports_unbalanced_template(template_service, seeded_chart):
    template_service.create_template(
        JournalEntryTemplate(
            code="LOPSIDED",
            name="Lopsided",
            trigger_type=TriggerType.EXPENSE,
            is_active=True,
            lines=(
                TemplateLine(1, FixedAccount("5.2.05"), LineSide.DEBIT, AmountType.TOTAL),
                TemplateLine(2, FixedAccount("1.1.01.001"), LineSide.CREDIT, AmountType.TAX),
            ),
        )
    )

    report = template_service.validate_template("LOPSIDED")
    assert not report.balanced
    assert not report.valid


def test_create_template_rejects_duplicate_code(template_service, seeded_chart):
    with pytest.raises(ConflictError):
        template_service.create_template(DEFAULT_TEMPLATES[0])


def test_create_template_requires_field_for_fixed_amount(template_service):
    with pytest.raises(ValidationError):
        template_service.create_template(
            JournalEntryTemplate(
                code="FIXED",
                name="Fixed",
                trigger_type=TriggerType.EXPENSE,
                is_active=True,
                lines=(TemplateLine(1, FixedAccount("5.2.05"), LineSide.DEBIT, AmountType.FIXED),),
            )
        )


def test_get_missing_template(template_service):
    with pytest.raises(TemplateNotFoundError):
        template_service.get_template("NOPE")


def test_apply_expense_template(template_service, seeded_chart):
    context = _context(
        description="Fuel",
        reference_document_id="EXP-1",
        account_hints={"expense_account": "5.3.04", "treasury_account": "1.1.01.001"},
    )

    entry = template_service.apply_template("EXPENSE", context)

    assert entry.status == EntryStatus.POSTED
    assert entry.is_automatic
    assert entry.template_code == "EXPENSE"
    assert entry.trigger_type == TriggerType.EXPENSE
    assert entry.reference_document_id == "EXP-1"
    assert [(l.account_code, l.debit, l.credit) for l in entry.lines] == [
        ("5.3.04", Decimal("150.00"), Decimal("0.00")),
        ("1.1.01.001", Decimal("0.00"), Decimal("150.00")),
    ]


def test_apply_template_as_draft(template_service, seeded_chart):
    context = _context(account_hints={"expense_account": "5.3.04", "treasury_account": seeded_chart["1.1.01.001"].id})
    entry = template_service.apply_template("EXPENSE", context, post=False)
    assert entry.status == EntryStatus.DRAFT


def test_apply_template_missing_hint(template_service, seeded_chart):
    context = _context(account_hints={"expense_account": "5.3.04"})

    with pytest.raises(AccountResolutionError) as excinfo:
        template_service.apply_template("EXPENSE", context)
    assert excinfo.value.context_key == "treasury_account"


def test_apply_template_unknown_hint_account(template_service, seeded_chart):
    context = _context(account_hints={"expense_account": "5.9.99", "treasury_account": "1.1.01.001"})
    with pytest.raises(AccountResolutionError):
        template_service.apply_template("EXPENSE", context)


def test_apply_template_into_header_account(template_service, seeded_chart):
    context = _context(account_hints={"expense_account": "5.2", "treasury_account": "1.1.01.001"})
    with pytest.raises(ValueError, match="do not accept entries"):
        template_service.apply_template("EXPENSE", context)


def test_apply_inactive_template(template_service, seeded_chart):
    template_service.set_template_active("EXPENSE", False)
    context = _context(account_hints={"expense_account": "5.3.04", "treasury_account": "1.1.01.001"})

    with pytest.raises(TemplateInactiveError):
        template_service.apply_template("EXPENSE", context)
    assert template_service.get_templates_by_trigger(TriggerType.EXPENSE) == []


def test_apply_template_trigger_mismatch(template_service, seeded_chart):
    context = _context(trigger=TriggerType.SALE_INVOICE)
    with pytest.raises(ValidationError):
        template_service.apply_template("EXPENSE", context)


def test_apply_template_currency_mismatch(template_service, seeded_chart):
    context = _context(
        currency="USD",
        account_hints={"expense_account": "5.3.04", "treasury_account": "1.1.01.001"},
    )
    with pytest.raises(ValidationError, match="currency"):
        template_service.apply_template("EXPENSE", context)


def test_apply_template_unbalanced_output(template_service, seeded_chart):
    template_service.create_template(
        JournalEntryTemplate(
            code="LOPSIDED",
            name="Lopsided",
            trigger_type=TriggerType.EXPENSE,
            is_active=True,
            lines=(
                TemplateLine(1, FixedAccount("5.2.05"), LineSide.DEBIT, AmountType.TOTAL),
                TemplateLine(2, FixedAccount("1.1.01.001"), LineSide.CREDIT, AmountType.TAX),
            ),
        )
    )
    context = _context(components={"tax": Decimal("20")})

    with pytest.raises(UnbalancedTemplateOutputError) as excinfo:
        template_service.apply_template("LOPSIDED", context)
    assert excinfo.value.difference == Decimal("130.00")


def test_apply_template_twice_for_same_document(template_service, seeded_chart):
    context = _context(
        reference_document_id="EXP-7",
        account_hints={"expense_account": "5.3.04", "treasury_account": "1.1.01.001"},
    )
    template_service.apply_template("EXPENSE", context)

    with pytest.raises(DuplicatePostingError):
        template_service.apply_template("EXPENSE", context)


def test_preview_drops_zero_lines(template_service, seeded_chart):
    context = _context(
        trigger=TriggerType.CUSTOMER_RECEIPT,
        amount="500",
        account_hints={"treasury_account": "1.1.01.003"},
    )

    lines = template_service.preview_template("CUSTOMER_RECEIPT", context)

    assert [(l.account_code, l.debit, l.credit) for l in lines] == [
        ("1.1.01.003", Decimal("500.00"), Decimal("0.00")),
        ("1.1.03.001", Decimal("0.00"), Decimal("500.00")),
    ]
