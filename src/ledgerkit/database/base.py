"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Callable, Optional
from datetime import date

# Import entities directly to avoid circular import through domain services
from ledgerkit.domain.entities import (
    Account,
    AccountDefinition,
    AccountType,
    EntryLineInput,
    EntryStatus,
    JournalEntry,
    JournalEntryTemplate,
    PostedLine,
    TriggerType,
)

# Callback run against the locked, current state of an entry before a write.
EntryCheck = Callable[[JournalEntry], None]

# Callback run, inside the inserting transaction, against the automatic entry
# already recorded for the same (trigger, document), or None.
DocumentCheck = Callable[[Optional[JournalEntry]], None]

# Callback run against the number of existing accounts before a chart load.
ChartCheck = Callable[[int], None]


class Database(ABC):
    """Abstract database interface for ledgerkit.

    Every write method is atomic: it either commits fully or rolls back and
    re-raises.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        level: int,
        parent_id: Optional[int],
        accepts_entries: bool = True,
    ) -> int:
        """Create a new account. Returns account ID."""
        pass

    @abstractmethod
    def bulk_create_accounts(
        self, definitions: list[AccountDefinition], check: Optional[ChartCheck] = None
    ) -> dict[str, int]:
        """Insert accounts in the given order inside one transaction.

        Parents must precede their children. ``check`` sees the account count
        inside that transaction. Returns a code -> id map.
        """
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, code: str) -> Optional[Account]:
        """Get account by code."""
        pass

    @abstractmethod
    def list_accounts(
        self,
        account_type: Optional[AccountType] = None,
        level: Optional[int] = None,
        is_active: Optional[bool] = None,
        accepts_entries: Optional[bool] = None,
    ) -> list[Account]:
        """List accounts ordered by code."""
        pass

    @abstractmethod
    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        accepts_entries: Optional[bool] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update mutable account attributes. None leaves a field unchanged."""
        pass

    @abstractmethod
    def delete_account(self, account_id: int) -> None:
        """Delete an account."""
        pass

    @abstractmethod
    def count_accounts(self) -> int:
        """Total number of accounts."""
        pass

    @abstractmethod
    def get_child_accounts(self, account_id: int) -> list[Account]:
        """Direct children of an account."""
        pass

    @abstractmethod
    def get_account_line_count(self, account_id: int) -> int:
        """Number of journal lines (any status) referencing an account."""
        pass

    # Journal entry operations
    @abstractmethod
    def create_journal_entry(
        self,
        entry_date: date,
        description: str,
        lines: list[EntryLineInput],
        status: EntryStatus = EntryStatus.DRAFT,
        is_automatic: bool = False,
        template_code: Optional[str] = None,
        trigger_type: Optional[TriggerType] = None,
        reference: Optional[str] = None,
        reference_document_id: Optional[str] = None,
        created_by: Optional[str] = None,
        document_check: Optional[DocumentCheck] = None,
    ) -> JournalEntry:
        """Allocate the next entry number and insert the entry with its lines.

        For automatic entries carrying a document id, ``document_check`` runs
        in the same transaction as the insert.
        """
        pass

    @abstractmethod
    def get_journal_entry(self, entry_id: int) -> Optional[JournalEntry]:
        """Get entry (with lines) by ID."""
        pass

    @abstractmethod
    def get_journal_entry_by_number(self, entry_number: int) -> Optional[JournalEntry]:
        """Get entry (with lines) by entry number."""
        pass

    @abstractmethod
    def list_journal_entries(
        self,
        status: Optional[EntryStatus] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        is_automatic: Optional[bool] = None,
        offset: int = 0,
        limit: Optional[int] = None,
    ) -> tuple[list[JournalEntry], int]:
        """List entries newest first. Returns (page of entries, total matching)."""
        pass

    @abstractmethod
    def find_automatic_entry(
        self, trigger_type: TriggerType, reference_document_id: str
    ) -> Optional[JournalEntry]:
        """Find the automatic entry generated for a business document, if any."""
        pass

    @abstractmethod
    def update_journal_entry(
        self,
        entry_id: int,
        check: EntryCheck,
        entry_date: Optional[date] = None,
        description: Optional[str] = None,
        lines: Optional[list[EntryLineInput]] = None,
    ) -> JournalEntry:
        """Lock the entry, run ``check`` on it, then apply the changes."""
        pass

    @abstractmethod
    def post_journal_entry(self, entry_id: int, check: EntryCheck) -> JournalEntry:
        """Lock the entry, run ``check`` on it, then mark it POSTED."""
        pass

    @abstractmethod
    def delete_journal_entry(self, entry_id: int, check: EntryCheck) -> None:
        """Lock the entry, run ``check`` on it, then delete it with its lines."""
        pass

    @abstractmethod
    def list_posted_lines(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        account_id: Optional[int] = None,
    ) -> list[PostedLine]:
        """POSTED lines in date order (then entry number, then line id)."""
        pass

    # Template operations
    @abstractmethod
    def create_template(self, template: JournalEntryTemplate) -> int:
        """Insert a template with its lines. Returns template ID."""
        pass

    @abstractmethod
    def get_template(self, code: str) -> Optional[JournalEntryTemplate]:
        """Get template by code."""
        pass

    @abstractmethod
    def list_templates(
        self,
        trigger_type: Optional[TriggerType] = None,
        is_active: Optional[bool] = None,
    ) -> list[JournalEntryTemplate]:
        """List templates ordered by code."""
        pass

    @abstractmethod
    def set_template_active(self, code: str, is_active: bool) -> None:
        """Toggle a template's active flag."""
        pass
