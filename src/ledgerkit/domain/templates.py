"""Journal entry template domain service.

Applying a template is a two step computation: every account reference is
resolved first, then each line's amount is derived from the posting context.
Only the final ``create_entry`` call touches the database for writing.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.balance import ZERO, is_balanced, quantize, totals
from ledgerkit.domain.default_templates import DEFAULT_TEMPLATES
from ledgerkit.domain.entities import (
    Account,
    AccountRef,
    AmountType,
    ComputedLine,
    DynamicAccount,
    EntryLineInput,
    EntryStatus,
    FixedAccount,
    JournalEntry,
    JournalEntryTemplate,
    LineSide,
    PostingContext,
    TemplateLine,
    TemplateValidation,
    TriggerType,
)
from ledgerkit.domain.errors import (
    AccountResolutionError,
    ConflictError,
    TemplateInactiveError,
    TemplateNotFoundError,
    UnbalancedTemplateOutputError,
    ValidationError,
    template_not_found,
)
from ledgerkit.domain.journal import JournalService
from ledgerkit.logging_config import get_logger

logger = get_logger("templates")

DEFAULT_CURRENCY = "ARS"

# Unit-consistent sample used to check that a template balances:
# subtotal + tax = total, retention + net = total, principal + interest = total.
UNIT_SAMPLE = PostingContext(
    trigger_type=TriggerType.SALE_INVOICE,
    amount=Decimal("100.00"),
    date=date(2000, 1, 1),
    description="validation sample",
    components={
        "subtotal": Decimal("79.00"),
        "tax": Decimal("21.00"),
        "perception": Decimal("0.00"),
        "retention": Decimal("10.00"),
        "net_payment": Decimal("90.00"),
        "principal": Decimal("80.00"),
        "interest": Decimal("20.00"),
    },
)


def _component(context: PostingContext, name: str) -> Optional[Decimal]:
    value = context.components.get(name)
    return Decimal(value) if value is not None else None


def compute_line_amount(line: TemplateLine, context: PostingContext) -> Decimal:
    """Amount a template line carries for a posting context, rounded to cents.

    Missing components count as zero, except NET_PAYMENT (total minus
    retention) and SUBTOTAL (total minus tax and perception).
    """
    total = Decimal(context.amount)
    amount_type = line.amount_type

    if amount_type == AmountType.TOTAL:
        amount = total
    elif amount_type == AmountType.SUBTOTAL:
        subtotal = _component(context, "subtotal")
        if subtotal is None:
            subtotal = total - (_component(context, "tax") or ZERO) - (_component(context, "perception") or ZERO)
        amount = subtotal
    elif amount_type == AmountType.NET_PAYMENT:
        net = _component(context, "net_payment")
        amount = net if net is not None else total - (_component(context, "retention") or ZERO)
    elif amount_type == AmountType.FIXED:
        amount = line.fixed_amount or ZERO
    elif amount_type == AmountType.PERCENTAGE:
        amount = total * (line.percentage or ZERO) / Decimal(100)
    elif amount_type == AmountType.CUSTOM:
        amount = _component(context, line.custom_field or "") or ZERO
    else:
        # TAX, PERCEPTION, RETENTION, PRINCIPAL, INTEREST read the same-named component
        amount = _component(context, amount_type.value.lower()) or ZERO

    return quantize(amount)


class TemplateService:
    """Service for administering and applying journal entry templates."""

    def __init__(self, db: Database, currency: str = DEFAULT_CURRENCY):
        """Initialize template service.

        Args:
            db: Database instance
            currency: Functional currency of the ledger
        """
        self.db = db
        self.currency = currency.upper()
        self.journal = JournalService(db)

    # Administration

    def create_template(self, template: JournalEntryTemplate) -> JournalEntryTemplate:
        """Store a new template.

        Raises:
            ValidationError: If the template definition is malformed
            ConflictError: If the code is taken
        """
        if not template.code or not template.code.strip():
            raise ValidationError("Template code must not be empty")
        if not template.lines:
            raise ValidationError(f"Template '{template.code}' has no lines")

        numbers = [line.line_number for line in template.lines]
        if len(set(numbers)) != len(numbers):
            raise ValidationError(f"Template '{template.code}' repeats a line number")
        for line in template.lines:
            if line.amount_type == AmountType.FIXED and line.fixed_amount is None:
                raise ValidationError(f"Line {line.line_number}: FIXED amount requires fixed_amount")
            if line.amount_type == AmountType.PERCENTAGE and line.percentage is None:
                raise ValidationError(f"Line {line.line_number}: PERCENTAGE amount requires percentage")
            if line.amount_type == AmountType.CUSTOM and not line.custom_field:
                raise ValidationError(f"Line {line.line_number}: CUSTOM amount requires custom_field")

        if self.db.get_template(template.code) is not None:
            raise ConflictError(f"Template '{template.code}' already exists")

        self.db.create_template(template)
        logger.info("template_created", extra={"template_code": template.code})
        return self.db.get_template(template.code)

    def get_template(self, code: str) -> JournalEntryTemplate:
        """Get template by code.

        Raises:
            TemplateNotFoundError: If no template has this code
        """
        template = self.db.get_template(code)
        if template is None:
            raise TemplateNotFoundError(template_not_found(code))
        return template

    def list_templates(
        self, trigger_type: Optional[TriggerType] = None, active_only: bool = False
    ) -> list[JournalEntryTemplate]:
        return self.db.list_templates(
            trigger_type=TriggerType(trigger_type) if trigger_type is not None else None,
            is_active=True if active_only else None,
        )

    def get_templates_by_trigger(self, trigger_type: TriggerType) -> list[JournalEntryTemplate]:
        """Active templates that handle a business event."""
        return self.list_templates(trigger_type=trigger_type, active_only=True)

    def set_template_active(self, code: str, is_active: bool) -> JournalEntryTemplate:
        self.get_template(code)
        self.db.set_template_active(code, is_active)
        logger.info("template_toggled", extra={"template_code": code, "is_active": is_active})
        return self.get_template(code)

    def seed_default_templates(self) -> list[str]:
        """Insert the built-in templates whose codes are not yet present.

        Returns:
            Codes of the templates that were created
        """
        created = []
        for template in DEFAULT_TEMPLATES:
            if self.db.get_template(template.code) is None:
                self.db.create_template(template)
                created.append(template.code)
        logger.info("templates_seeded", extra={"created": len(created)})
        return created

    # Computation

    def resolve_account(self, ref: AccountRef, context: PostingContext) -> Account:
        """Resolve a template account reference to a chart account.

        Fixed references look up their code; dynamic ones read
        ``context.account_hints[key]``, which may hold an account code or id.

        Raises:
            AccountResolutionError: If the reference names no existing account
        """
        if isinstance(ref, FixedAccount):
            account = self.db.get_account_by_code(ref.code)
            if account is None:
                raise AccountResolutionError(f"Template account '{ref.code}' does not exist")
            return account

        if isinstance(ref, DynamicAccount):
            hint = context.account_hints.get(ref.context_key)
            if hint is None or hint == "":
                raise AccountResolutionError(
                    f"No account supplied for '{ref.context_key}'", context_key=ref.context_key
                )
            if isinstance(hint, int):
                account = self.db.get_account(hint)
            else:
                account = self.db.get_account_by_code(str(hint).strip())
            if account is None:
                raise AccountResolutionError(
                    f"Account '{hint}' supplied for '{ref.context_key}' does not exist",
                    context_key=ref.context_key,
                )
            return account

        raise AccountResolutionError(f"Unsupported account reference {ref!r}")

    def preview_template(self, code: str, context: PostingContext) -> list[ComputedLine]:
        """Compute the lines a template would produce, without writing anything.

        Zero-amount lines are left out.
        """
        template = self.get_template(code)
        return self._compute_lines(template, context)

    def _compute_lines(self, template: JournalEntryTemplate, context: PostingContext) -> list[ComputedLine]:
        resolved = [(line, self.resolve_account(line.account, context)) for line in template.lines]

        computed = []
        for line, account in resolved:
            amount = compute_line_amount(line, context)
            if amount == 0:
                continue
            computed.append(
                ComputedLine(
                    line_number=line.line_number,
                    account_id=account.id,
                    account_code=account.code,
                    debit=amount if line.side == LineSide.DEBIT else ZERO,
                    credit=amount if line.side == LineSide.CREDIT else ZERO,
                    description=line.description,
                )
            )
        return computed

    def validate_template(self, code: str, sample: Optional[PostingContext] = None) -> TemplateValidation:
        """Check a template's structure and that it balances on a sample event.

        Args:
            code: Template code
            sample: Posting context used for the balance check; defaults to a
                unit-consistent sample of 100

        Returns:
            Validation report with errors and warnings
        """
        template = self.get_template(code)
        sample = sample or UNIT_SAMPLE
        errors: list[str] = []
        warnings: list[str] = []

        if not template.is_active:
            warnings.append("Template is inactive")
        if not template.lines:
            errors.append("Template has no lines")
        if not any(line.side == LineSide.DEBIT for line in template.lines):
            errors.append("Template has no debit line")
        if not any(line.side == LineSide.CREDIT for line in template.lines):
            errors.append("Template has no credit line")

        for line in template.lines:
            if isinstance(line.account, DynamicAccount):
                warnings.append(
                    f"Line {line.line_number}: account '{line.account.context_key}' is supplied at posting time"
                )
                continue
            account = self.db.get_account_by_code(line.account.code)
            if account is None:
                errors.append(f"Line {line.line_number}: account '{line.account.code}' does not exist")
            elif not account.accepts_entries:
                errors.append(f"Line {line.line_number}: account '{account.code}' does not accept entries")
            elif not account.is_active:
                warnings.append(f"Line {line.line_number}: account '{account.code}' is inactive")

        total_debit, total_credit = totals(
            (
                (amount, ZERO) if line.side == LineSide.DEBIT else (ZERO, amount)
                for line in template.lines
                for amount in [compute_line_amount(line, sample)]
            )
        )
        balanced = is_balanced(total_debit, total_credit)
        if not balanced:
            errors.append(f"Sample event is unbalanced: debit {total_debit}, credit {total_credit}")

        return TemplateValidation(
            code=template.code,
            valid=not errors,
            balanced=balanced,
            total_debit=total_debit,
            total_credit=total_credit,
            errors=errors,
            warnings=warnings,
        )

    def apply_template(self, code: str, context: PostingContext, post: bool = True) -> JournalEntry:
        """Generate a journal entry from a template and a business event.

        Args:
            code: Template code
            context: Business event data (amount, components, account hints)
            post: Create the entry POSTED (default) or as a DRAFT

        Returns:
            The created automatic journal entry

        Raises:
            TemplateNotFoundError: If the template does not exist
            TemplateInactiveError: If the template is disabled
            AccountResolutionError: If an account reference cannot be resolved
            UnbalancedTemplateOutputError: If the computed lines do not balance
            DuplicatePostingError: If the document was already posted
        """
        template = self.get_template(code)
        if not template.is_active:
            raise TemplateInactiveError(f"Template '{code}' is inactive")
        if TriggerType(context.trigger_type) != template.trigger_type:
            raise ValidationError(
                f"Template '{code}' handles {template.trigger_type.value}, "
                f"not {TriggerType(context.trigger_type).value}"
            )
        if context.currency.upper() != self.currency:
            raise ValidationError(
                f"Event currency {context.currency} does not match ledger currency {self.currency}"
            )
        if Decimal(context.amount) <= 0:
            raise ValidationError("Event amount must be positive")

        computed = self._compute_lines(template, context)
        if len(computed) < 2:
            raise ValidationError(f"Template '{code}' produced fewer than two non-zero lines")

        total_debit, total_credit = totals((line.debit, line.credit) for line in computed)
        if not is_balanced(total_debit, total_credit):
            logger.error(
                "template_output_unbalanced",
                extra={
                    "template_code": code,
                    "total_debit": total_debit,
                    "total_credit": total_credit,
                },
            )
            raise UnbalancedTemplateOutputError(code, total_debit, total_credit)

        entry = self.journal.create_entry(
            entry_date=context.date,
            description=context.description,
            lines=[
                EntryLineInput(
                    account_id=line.account_id,
                    debit=line.debit,
                    credit=line.credit,
                    description=line.description,
                )
                for line in computed
            ],
            status=EntryStatus.POSTED if post else EntryStatus.DRAFT,
            reference=context.reference,
            created_by=context.created_by,
            is_automatic=True,
            template_code=template.code,
            trigger_type=template.trigger_type,
            reference_document_id=context.reference_document_id,
        )
        logger.info(
            "template_applied",
            extra={"template_code": code, "entry_number": entry.entry_number},
        )
        return entry
