"""Auto-posting of business events.

Each supported business event maps to a trigger type, and each trigger type
to a default template. Callers describe the event; the template decides
which accounts move.
"""

from datetime import date
from decimal import Decimal
from typing import Optional, Union

from ledgerkit.database.base import Database
from ledgerkit.domain.default_templates import TRIGGER_DEFAULTS
from ledgerkit.domain.entities import JournalEntry, PostingContext, TriggerType
from ledgerkit.domain.errors import TemplateNotFoundError
from ledgerkit.domain.templates import DEFAULT_CURRENCY, TemplateService

AccountHint = Union[str, int]


def _money(value) -> Decimal:
    return Decimal(str(value)) if value is not None else Decimal("0")


class AutoPostingService:
    """Turns business events into automatic journal entries."""

    def __init__(self, db: Database, currency: str = DEFAULT_CURRENCY):
        self.db = db
        self.currency = currency.upper()
        self.templates = TemplateService(db, currency=currency)

    def template_for(self, trigger_type: TriggerType) -> str:
        """Code of the template used for a trigger when none is named."""
        trigger_type = TriggerType(trigger_type)
        code = TRIGGER_DEFAULTS.get(trigger_type)
        default = self.db.get_template(code) if code is not None else None
        if default is not None and default.is_active:
            return code
        active = self.templates.get_templates_by_trigger(trigger_type)
        if active:
            return active[0].code
        raise TemplateNotFoundError(f"No template configured for {trigger_type.value}")

    def post_event(
        self, context: PostingContext, template_code: Optional[str] = None, post: bool = True
    ) -> JournalEntry:
        """Post a business event through its trigger's template.

        Args:
            context: Business event data
            template_code: Template to use instead of the trigger's default
            post: Create the entry POSTED (default) or as a DRAFT

        Returns:
            The created journal entry
        """
        code = template_code or self.template_for(context.trigger_type)
        return self.templates.apply_template(code, context, post=post)

    def _post(
        self,
        trigger_type: TriggerType,
        document_id: str,
        total,
        entry_date: date,
        description: str,
        account_hints: Optional[dict[str, AccountHint]] = None,
        template_code: Optional[str] = None,
        reference: Optional[str] = None,
        created_by: Optional[str] = None,
        **components,
    ) -> JournalEntry:
        context = PostingContext(
            trigger_type=trigger_type,
            amount=_money(total),
            date=entry_date,
            description=description,
            currency=self.currency,
            reference_document_id=str(document_id),
            reference=reference,
            account_hints=dict(account_hints or {}),
            components={name: _money(value) for name, value in components.items() if value is not None},
            created_by=created_by,
        )
        return self.post_event(context, template_code=template_code)

    def register_customer_receipt(
        self,
        receipt_id: str,
        total,
        treasury_account: AccountHint,
        entry_date: date,
        retention=None,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> JournalEntry:
        """Post a customer receipt: funds in, withholdings suffered, receivable cleared."""
        return self._post(
            TriggerType.CUSTOMER_RECEIPT,
            receipt_id,
            total,
            entry_date,
            description or f"Customer receipt {reference or receipt_id}",
            account_hints={"treasury_account": treasury_account},
            reference=reference,
            created_by=created_by,
            retention=retention,
        )

    def register_supplier_payment(
        self,
        payment_id: str,
        total,
        treasury_account: AccountHint,
        entry_date: date,
        retention=None,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> JournalEntry:
        """Post a supplier payment: payable cleared, funds out, withholdings owed."""
        return self._post(
            TriggerType.SUPPLIER_PAYMENT,
            payment_id,
            total,
            entry_date,
            description or f"Supplier payment {reference or payment_id}",
            account_hints={"treasury_account": treasury_account},
            reference=reference,
            created_by=created_by,
            retention=retention,
        )

    def approve_purchase_invoice(
        self,
        invoice_id: str,
        subtotal,
        tax,
        entry_date: date,
        perception=None,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> JournalEntry:
        """Post an approved purchase invoice. Total is subtotal + tax + perception."""
        total = _money(subtotal) + _money(tax) + _money(perception)
        return self._post(
            TriggerType.PURCHASE_INVOICE,
            invoice_id,
            total,
            entry_date,
            description or f"Purchase invoice {reference or invoice_id}",
            reference=reference,
            created_by=created_by,
            subtotal=subtotal,
            tax=tax,
            perception=perception,
        )

    def issue_credit_note(
        self,
        credit_note_id: str,
        subtotal,
        tax,
        entry_date: date,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> JournalEntry:
        """Post a supplier credit note reversing part of a purchase."""
        total = _money(subtotal) + _money(tax)
        return self._post(
            TriggerType.CREDIT_NOTE,
            credit_note_id,
            total,
            entry_date,
            description or f"Credit note {reference or credit_note_id}",
            reference=reference,
            created_by=created_by,
            subtotal=subtotal,
            tax=tax,
        )

    def register_sale_invoice(
        self,
        invoice_id: str,
        subtotal,
        tax,
        entry_date: date,
        template_code: Optional[str] = None,
        description: Optional[str] = None,
        reference: Optional[str] = None,
        created_by: Optional[str] = None,
    ) -> JournalEntry:
        """Post an issued sale invoice (VAT broken out unless another template is named)."""
        total = _money(subtotal) + _money(tax)
        return self._post(
            TriggerType.SALE_INVOICE,
            invoice_id,
            total,
            entry_date,
            description or f"Sale invoice {reference or invoice_id}",
            template_code=template_code,
            reference=reference,
            created_by=created_by,
            subtotal=subtotal,
            tax=tax,
        )
