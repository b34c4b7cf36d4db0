"""Domain model entities for ledgerkit.

These are pure data classes representing accounting concepts, independent of
the database schema. Services and reports pass these around; only the
database layer knows about ORM rows.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional, Union


class AccountType(str, Enum):
    """Top-level classification of an account."""

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


class EntryStatus(str, Enum):
    """Journal entry lifecycle state. DRAFT is the only mutable state."""

    DRAFT = "DRAFT"
    POSTED = "POSTED"


class LineSide(str, Enum):
    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class AmountType(str, Enum):
    """Rule used by a template line to pick its amount from a posting context."""

    TOTAL = "TOTAL"
    SUBTOTAL = "SUBTOTAL"
    TAX = "TAX"
    PERCEPTION = "PERCEPTION"
    RETENTION = "RETENTION"
    NET_PAYMENT = "NET_PAYMENT"
    PRINCIPAL = "PRINCIPAL"
    INTEREST = "INTEREST"
    FIXED = "FIXED"
    PERCENTAGE = "PERCENTAGE"
    CUSTOM = "CUSTOM"


class TriggerType(str, Enum):
    """Business events that can produce an automatic journal entry."""

    SALE_INVOICE = "SALE_INVOICE"
    PURCHASE_INVOICE = "PURCHASE_INVOICE"
    CUSTOMER_RECEIPT = "CUSTOMER_RECEIPT"
    SUPPLIER_PAYMENT = "SUPPLIER_PAYMENT"
    CREDIT_NOTE = "CREDIT_NOTE"
    SALARY_PAYMENT = "SALARY_PAYMENT"
    LOAN_DISBURSEMENT = "LOAN_DISBURSEMENT"
    LOAN_PAYMENT = "LOAN_PAYMENT"
    EXPENSE = "EXPENSE"


@dataclass(frozen=True)
class Account:
    """Chart of accounts node."""

    id: int
    code: str
    name: str
    account_type: AccountType
    level: int
    parent_id: Optional[int]
    accepts_entries: bool
    is_active: bool
    created_at: datetime

    @property
    def is_postable(self) -> bool:
        return self.accepts_entries and self.is_active


@dataclass(frozen=True)
class AccountDefinition:
    """Input row for bulk chart initialization."""

    code: str
    name: str
    account_type: AccountType
    accepts_entries: bool = True


@dataclass(frozen=True)
class EntryLineInput:
    """A journal line as supplied by a caller, before it is persisted."""

    account_id: int
    debit: Decimal = Decimal("0")
    credit: Decimal = Decimal("0")
    description: Optional[str] = None


@dataclass(frozen=True)
class JournalEntryLine:
    """Persisted journal entry line."""

    id: int
    entry_id: int
    account_id: int
    account_code: str
    account_name: str
    debit: Decimal
    credit: Decimal
    description: Optional[str]


@dataclass(frozen=True)
class JournalEntry:
    """Double-entry transaction with its lines."""

    id: int
    entry_number: int
    date: date
    description: str
    status: EntryStatus
    is_automatic: bool
    template_code: Optional[str]
    trigger_type: Optional[TriggerType]
    reference: Optional[str]
    reference_document_id: Optional[str]
    created_by: Optional[str]
    created_at: datetime
    lines: tuple[JournalEntryLine, ...] = ()

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit for line in self.lines), Decimal("0"))

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit for line in self.lines), Decimal("0"))


@dataclass(frozen=True)
class EntryPage:
    """One page of a journal entry listing."""

    entries: list[JournalEntry]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        if self.total == 0:
            return 0
        return (self.total + self.limit - 1) // self.limit


# Template account references: either a fixed chart code or a key looked up
# in the posting context's account hints.


@dataclass(frozen=True)
class FixedAccount:
    code: str


@dataclass(frozen=True)
class DynamicAccount:
    context_key: str


AccountRef = Union[FixedAccount, DynamicAccount]


@dataclass(frozen=True)
class TemplateLine:
    """One line rule of a journal entry template."""

    line_number: int
    account: AccountRef
    side: LineSide
    amount_type: AmountType
    fixed_amount: Optional[Decimal] = None
    percentage: Optional[Decimal] = None
    custom_field: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class JournalEntryTemplate:
    """Reusable blueprint that maps a business event to journal lines."""

    code: str
    name: str
    trigger_type: TriggerType
    is_active: bool
    lines: tuple[TemplateLine, ...]
    description: Optional[str] = None
    id: Optional[int] = None


@dataclass(frozen=True)
class PostingContext:
    """Business event data handed to template application.

    ``components`` carries named amounts (``subtotal``, ``tax``, ``retention``,
    ...) that template lines pick from; ``account_hints`` maps dynamic account
    keys (``treasury_account``) to account codes or ids.
    """

    trigger_type: TriggerType
    amount: Decimal
    date: date
    description: str
    currency: str = "ARS"
    reference_document_id: Optional[str] = None
    reference: Optional[str] = None
    account_hints: dict[str, Union[str, int]] = field(default_factory=dict)
    components: dict[str, Decimal] = field(default_factory=dict)
    created_by: Optional[str] = None


@dataclass(frozen=True)
class ComputedLine:
    """A template line after account resolution and amount computation."""

    line_number: int
    account_id: int
    account_code: str
    debit: Decimal
    credit: Decimal
    description: Optional[str]


@dataclass(frozen=True)
class TemplateValidation:
    """Result of a structural and sample-balance check on a template."""

    code: str
    valid: bool
    balanced: bool
    total_debit: Decimal
    total_credit: Decimal
    errors: list[str]
    warnings: list[str]


@dataclass(frozen=True)
class ChartInitialization:
    """Summary returned by bulk chart initialization."""

    count: int
    by_type: dict[AccountType, int]


@dataclass(frozen=True)
class AccountTreeNode:
    account: Account
    children: list["AccountTreeNode"]


# Report value objects


@dataclass(frozen=True)
class PostedLine:
    """Flattened POSTED journal line as read by the report aggregator."""

    line_id: int
    entry_id: int
    entry_number: int
    date: date
    entry_description: str
    line_description: Optional[str]
    account_id: int
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class ReportAccount:
    id: int
    code: str
    name: str
    account_type: AccountType


@dataclass(frozen=True)
class TrialBalanceRow:
    account: ReportAccount
    sum_debit: Decimal
    sum_credit: Decimal
    balance: Decimal
    debit_balance: Decimal
    credit_balance: Decimal


@dataclass(frozen=True)
class TrialBalanceTotals:
    sum_debit: Decimal
    sum_credit: Decimal
    debit: Decimal
    credit: Decimal


@dataclass(frozen=True)
class TrialBalance:
    as_of: date
    start_date: Optional[date]
    rows: list[TrialBalanceRow]
    totals: TrialBalanceTotals
    # Each posted entry may be off by up to a cent
    tolerance: Decimal = Decimal("0.01")

    @property
    def is_balanced(self) -> bool:
        return abs(self.totals.debit - self.totals.credit) <= self.tolerance


@dataclass(frozen=True)
class StatementLine:
    account: ReportAccount
    balance: Decimal


@dataclass(frozen=True)
class BalanceSheetTotals:
    assets: Decimal
    liabilities: Decimal
    equity: Decimal
    result: Decimal
    liabilities_and_equity: Decimal


@dataclass(frozen=True)
class BalanceSheet:
    as_of: date
    result_from: Optional[date]
    assets: list[StatementLine]
    liabilities: list[StatementLine]
    equity: list[StatementLine]
    totals: BalanceSheetTotals
    tolerance: Decimal = Decimal("0.01")

    @property
    def is_balanced(self) -> bool:
        return abs(self.totals.assets - self.totals.liabilities_and_equity) <= self.tolerance


@dataclass(frozen=True)
class IncomeStatementTotals:
    income: Decimal
    expense: Decimal
    result: Decimal


@dataclass(frozen=True)
class IncomeStatement:
    start_date: date
    end_date: date
    income: list[StatementLine]
    expenses: list[StatementLine]
    totals: IncomeStatementTotals


@dataclass(frozen=True)
class LedgerMovement:
    entry_id: int
    entry_number: int
    date: date
    entry_description: str
    line_description: Optional[str]
    debit: Decimal
    credit: Decimal
    balance: Decimal


@dataclass(frozen=True)
class GeneralLedgerTotals:
    debit: Decimal
    credit: Decimal
    balance: Decimal


@dataclass(frozen=True)
class GeneralLedger:
    account: ReportAccount
    start_date: Optional[date]
    end_date: Optional[date]
    movements: list[LedgerMovement]
    totals: GeneralLedgerTotals
