"""Mapper functions to convert SQLAlchemy models into domain entities.

Enum-valued columns are stored as plain strings; conversion to the domain
enums happens here and nowhere else.
"""

from decimal import Decimal

from ledgerkit.domain import entities as domain
from ledgerkit.database.models import (
    Account as ORMAccount,
    JournalEntry as ORMJournalEntry,
    JournalEntryLine as ORMJournalEntryLine,
    JournalEntryTemplate as ORMTemplate,
    TemplateLine as ORMTemplateLine,
)


def _money(value) -> Decimal:
    return Decimal(value if value is not None else 0)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        code=orm_account.code,
        name=orm_account.name,
        account_type=domain.AccountType(orm_account.account_type),
        level=orm_account.level,
        parent_id=orm_account.parent_id,
        accepts_entries=orm_account.accepts_entries,
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
    )


def line_to_domain(orm_line: ORMJournalEntryLine) -> domain.JournalEntryLine:
    """Convert SQLAlchemy JournalEntryLine model to domain entity."""
    return domain.JournalEntryLine(
        id=orm_line.id,
        entry_id=orm_line.entry_id,
        account_id=orm_line.account_id,
        account_code=orm_line.account.code,
        account_name=orm_line.account.name,
        debit=_money(orm_line.debit),
        credit=_money(orm_line.credit),
        description=orm_line.description,
    )


def entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model (with lines) to domain entity."""
    return domain.JournalEntry(
        id=orm_entry.id,
        entry_number=orm_entry.entry_number,
        date=orm_entry.date,
        description=orm_entry.description,
        status=domain.EntryStatus(orm_entry.status),
        is_automatic=orm_entry.is_automatic,
        template_code=orm_entry.template_code,
        trigger_type=domain.TriggerType(orm_entry.trigger_type) if orm_entry.trigger_type else None,
        reference=orm_entry.reference,
        reference_document_id=orm_entry.reference_document_id,
        created_by=orm_entry.created_by,
        created_at=orm_entry.created_at,
        lines=tuple(line_to_domain(line) for line in orm_entry.lines),
    )


def template_line_to_domain(orm_line: ORMTemplateLine) -> domain.TemplateLine:
    """Convert SQLAlchemy TemplateLine model to domain entity."""
    if orm_line.context_key:
        account: domain.AccountRef = domain.DynamicAccount(orm_line.context_key)
    else:
        account = domain.FixedAccount(orm_line.account_code)
    return domain.TemplateLine(
        line_number=orm_line.line_number,
        account=account,
        side=domain.LineSide(orm_line.side),
        amount_type=domain.AmountType(orm_line.amount_type),
        fixed_amount=_money(orm_line.fixed_amount) if orm_line.fixed_amount is not None else None,
        percentage=Decimal(orm_line.percentage) if orm_line.percentage is not None else None,
        custom_field=orm_line.custom_field,
        description=orm_line.description,
    )


def template_to_domain(orm_template: ORMTemplate) -> domain.JournalEntryTemplate:
    """Convert SQLAlchemy JournalEntryTemplate model to domain entity."""
    return domain.JournalEntryTemplate(
        id=orm_template.id,
        code=orm_template.code,
        name=orm_template.name,
        description=orm_template.description,
        trigger_type=domain.TriggerType(orm_template.trigger_type),
        is_active=orm_template.is_active,
        lines=tuple(template_line_to_domain(line) for line in orm_template.lines),
    )


def template_line_to_orm(line: domain.TemplateLine) -> ORMTemplateLine:
    """Build a TemplateLine row from a domain template line."""
    account_code = line.account.code if isinstance(line.account, domain.FixedAccount) else None
    context_key = line.account.context_key if isinstance(line.account, domain.DynamicAccount) else None
    return ORMTemplateLine(
        line_number=line.line_number,
        account_code=account_code,
        context_key=context_key,
        side=line.side.value,
        amount_type=line.amount_type.value,
        fixed_amount=line.fixed_amount,
        percentage=line.percentage,
        custom_field=line.custom_field,
        description=line.description,
    )
