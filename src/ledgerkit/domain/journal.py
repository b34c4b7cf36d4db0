"""Journal entry domain service."""

from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.balance import is_balanced, quantize, totals
from ledgerkit.domain.entities import (
    EntryLineInput,
    EntryPage,
    EntryStatus,
    JournalEntry,
    TriggerType,
)
from ledgerkit.domain.errors import (
    AccountNotFoundError,
    AccountNotPostableError,
    AlreadyFinalizedError,
    DuplicatePostingError,
    EntryNotFoundError,
    UnbalancedEntryError,
    ValidationError,
    account_not_found,
    entry_not_found,
)
from ledgerkit.logging_config import get_logger

logger = get_logger("journal")

DEFAULT_PAGE_SIZE = 20


class JournalService:
    """Service for the journal entry lifecycle.

    Drafts may be composed unbalanced; the debit = credit rule is enforced
    whenever an entry becomes POSTED, whether by ``confirm_entry`` or by
    creating it directly as POSTED.
    """

    def __init__(self, db: Database):
        """Initialize journal service.

        Args:
            db: Database instance
        """
        self.db = db

    def _normalize_lines(self, lines: list[EntryLineInput]) -> list[EntryLineInput]:
        if len(lines) < 2:
            raise ValidationError("A journal entry needs at least two lines")

        normalized = []
        for position, line in enumerate(lines, start=1):
            try:
                debit = quantize(Decimal(line.debit or 0))
                credit = quantize(Decimal(line.credit or 0))
            except (InvalidOperation, TypeError) as e:
                raise ValidationError(f"Line {position}: invalid amount") from e
            if not (debit.is_finite() and credit.is_finite()):
                raise ValidationError(f"Line {position}: invalid amount")
            if debit < 0 or credit < 0:
                raise ValidationError(f"Line {position}: debit and credit must not be negative")
            normalized.append(
                EntryLineInput(
                    account_id=line.account_id,
                    debit=debit,
                    credit=credit,
                    description=line.description,
                )
            )

        self._check_accounts_postable(line.account_id for line in normalized)
        return normalized

    def _check_accounts_postable(self, account_ids) -> None:
        """Raise unless every referenced account exists, is active and accepts entries."""
        not_postable = []
        for account_id in dict.fromkeys(account_ids):
            account = self.db.get_account(account_id)
            if account is None:
                raise AccountNotFoundError(account_not_found(account_id))
            if not account.is_postable:
                not_postable.append(account.code)
        if not_postable:
            raise AccountNotPostableError(not_postable)

    @staticmethod
    def _reject_duplicate_document(existing: Optional[JournalEntry]) -> None:
        if existing is not None:
            raise DuplicatePostingError(
                f"Document '{existing.reference_document_id}' already has journal entry "
                f"#{existing.entry_number} for {existing.trigger_type.value}"
            )

    @staticmethod
    def _check_balanced(total_debit: Decimal, total_credit: Decimal) -> None:
        if not is_balanced(total_debit, total_credit):
            raise UnbalancedEntryError(total_debit, total_credit)

    def create_entry(
        self,
        entry_date: date,
        description: str,
        lines: list[EntryLineInput],
        status: EntryStatus = EntryStatus.DRAFT,
        reference: Optional[str] = None,
        created_by: Optional[str] = None,
        is_automatic: bool = False,
        template_code: Optional[str] = None,
        trigger_type: Optional[TriggerType] = None,
        reference_document_id: Optional[str] = None,
    ) -> JournalEntry:
        """Create a journal entry with its lines in one transaction.

        Args:
            entry_date: Accounting date
            description: Entry description
            lines: Two or more lines
            status: DRAFT (default) or POSTED; POSTED entries must balance
            reference: Free-text reference (document number)
            created_by: Optional user identifier
            is_automatic: True for template-generated entries
            template_code: Template that generated the entry
            trigger_type: Business event that generated the entry
            reference_document_id: Id of the originating business document

        Returns:
            The created entry with its assigned entry number

        Raises:
            ValidationError: If fewer than two lines or a negative amount
            AccountNotFoundError: If a line references an unknown account
            AccountNotPostableError: If a line references a header or inactive account
            UnbalancedEntryError: If created as POSTED and debit != credit
            DuplicatePostingError: If an automatic entry already exists for the document
        """
        if not description or not description.strip():
            raise ValidationError("Entry description must not be empty")
        status = EntryStatus(status)
        normalized = self._normalize_lines(lines)

        if status == EntryStatus.POSTED:
            self._check_balanced(*totals((line.debit, line.credit) for line in normalized))

        entry = self.db.create_journal_entry(
            entry_date=entry_date,
            description=description.strip(),
            lines=normalized,
            status=status,
            is_automatic=is_automatic,
            template_code=template_code,
            trigger_type=trigger_type,
            reference=reference,
            reference_document_id=reference_document_id,
            created_by=created_by,
            document_check=self._reject_duplicate_document,
        )
        logger.info(
            "entry_created",
            extra={"entry_number": entry.entry_number, "status": entry.status.value, "automatic": is_automatic},
        )
        return entry

    def get_entry(self, entry_id: int) -> Optional[JournalEntry]:
        return self.db.get_journal_entry(entry_id)

    def get_entry_by_number(self, entry_number: int) -> Optional[JournalEntry]:
        return self.db.get_journal_entry_by_number(entry_number)

    def require_entry(self, entry_id: int) -> JournalEntry:
        entry = self.db.get_journal_entry(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_not_found(entry_id))
        return entry

    @staticmethod
    def _require_draft(entry: JournalEntry) -> None:
        if entry.status != EntryStatus.DRAFT:
            raise AlreadyFinalizedError(
                f"Journal entry #{entry.entry_number} is {entry.status.value}; only drafts can change"
            )

    def confirm_entry(self, entry_id: int) -> JournalEntry:
        """Post a draft entry.

        The entry row is locked while its lines are re-checked, so the totals
        that are validated are the totals that get posted.

        Raises:
            EntryNotFoundError: If the entry does not exist
            AlreadyFinalizedError: If the entry is already POSTED
            UnbalancedEntryError: If debits and credits differ by more than 0.01;
                the entry stays DRAFT
            AccountNotPostableError: If an account was deactivated since drafting
        """
        self.require_entry(entry_id)

        def check(entry: JournalEntry) -> None:
            self._require_draft(entry)
            if not is_balanced(entry.total_debit, entry.total_credit):
                logger.warning(
                    "entry_confirm_rejected",
                    extra={
                        "entry_number": entry.entry_number,
                        "total_debit": entry.total_debit,
                        "total_credit": entry.total_credit,
                    },
                )
                raise UnbalancedEntryError(entry.total_debit, entry.total_credit)
            self._check_accounts_postable(line.account_id for line in entry.lines)

        entry = self.db.post_journal_entry(entry_id, check)
        logger.info("entry_posted", extra={"entry_number": entry.entry_number})
        return entry

    def update_entry(
        self,
        entry_id: int,
        entry_date: Optional[date] = None,
        description: Optional[str] = None,
        lines: Optional[list[EntryLineInput]] = None,
    ) -> JournalEntry:
        """Edit a draft entry. Supplied lines replace all existing lines.

        Raises:
            EntryNotFoundError: If the entry does not exist
            AlreadyFinalizedError: If the entry is POSTED
        """
        self.require_entry(entry_id)
        if description is not None and not description.strip():
            raise ValidationError("Entry description must not be empty")
        normalized = self._normalize_lines(lines) if lines is not None else None

        entry = self.db.update_journal_entry(
            entry_id,
            self._require_draft,
            entry_date=entry_date,
            description=description.strip() if description is not None else None,
            lines=normalized,
        )
        logger.info("entry_updated", extra={"entry_number": entry.entry_number})
        return entry

    def delete_entry(self, entry_id: int) -> None:
        """Delete a draft entry.

        Raises:
            EntryNotFoundError: If the entry does not exist
            AlreadyFinalizedError: If the entry is POSTED
        """
        entry = self.require_entry(entry_id)
        self.db.delete_journal_entry(entry_id, self._require_draft)
        logger.info("entry_deleted", extra={"entry_number": entry.entry_number})

    def list_entries(
        self,
        status: Optional[EntryStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        is_automatic: Optional[bool] = None,
        page: int = 1,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> EntryPage:
        """List entries newest first, one page at a time.

        Args:
            status: Only entries in this status
            start_date: Only entries dated on or after this date
            end_date: Only entries dated on or before this date
            is_automatic: Only automatic (True) or manual (False) entries
            page: 1-based page number
            limit: Page size

        Returns:
            Page of entries with total count
        """
        if page < 1:
            raise ValidationError("Page must be 1 or greater")
        if limit < 1:
            raise ValidationError("Limit must be 1 or greater")

        entries, total = self.db.list_journal_entries(
            status=EntryStatus(status) if status is not None else None,
            start_date=start_date,
            end_date=end_date,
            is_automatic=is_automatic,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return EntryPage(entries=entries, page=page, limit=limit, total=total)
