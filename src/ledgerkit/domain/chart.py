"""Chart of accounts domain service."""

from collections import Counter
from typing import Iterable, Optional

from ledgerkit.database.base import Database
from ledgerkit.domain.default_chart import DEFAULT_CHART
from ledgerkit.domain.entities import (
    Account,
    AccountDefinition,
    AccountTreeNode,
    AccountType,
    ChartInitialization,
)
from ledgerkit.domain.errors import (
    AccountNotFoundError,
    AlreadyInitializedError,
    DuplicateCodeError,
    HasChildrenError,
    HasMovementsError,
    InvalidAccountCodeError,
    ParentNotFoundError,
    TypeMismatchError,
    ValidationError,
    account_delete_blocked,
    account_not_found,
)
from ledgerkit.logging_config import get_logger
from ledgerkit.utils.account_code import (
    code_sort_key,
    level_from_code,
    parent_code,
    validate_code,
)

logger = get_logger("chart")


def _checked_code(code: str) -> str:
    try:
        return validate_code(code)
    except ValueError as e:
        raise InvalidAccountCodeError(str(e)) from e


class ChartOfAccountsService:
    """Service for maintaining the account hierarchy."""

    def __init__(self, db: Database):
        """Initialize chart of accounts service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        code: str,
        name: str,
        account_type: AccountType,
        accepts_entries: bool = True,
    ) -> Account:
        """Create a single account.

        Level and parent are derived from the code: ``1.1.01.001`` has level 4
        and parent ``1.1.01``.

        Args:
            code: Dotted account code
            name: Account name
            account_type: Account type (must equal the parent's)
            accepts_entries: Whether journal lines may post to it

        Returns:
            The created account

        Raises:
            InvalidAccountCodeError: If the code is malformed
            DuplicateCodeError: If the code already exists
            ParentNotFoundError: If a non-root code has no parent account
            TypeMismatchError: If the parent has a different account type
        """
        code = _checked_code(code)
        account_type = AccountType(account_type)
        if not name or not name.strip():
            raise ValidationError("Account name must not be empty")

        if self.db.get_account_by_code(code) is not None:
            raise DuplicateCodeError(f"Account code '{code}' already exists")

        parent_id = None
        parent = parent_code(code)
        if parent is not None:
            parent_account = self.db.get_account_by_code(parent)
            if parent_account is None:
                raise ParentNotFoundError(f"Parent account '{parent}' not found for '{code}'")
            if parent_account.account_type != account_type:
                raise TypeMismatchError(
                    f"Account '{code}' is {account_type.value} but parent '{parent}' "
                    f"is {parent_account.account_type.value}"
                )
            parent_id = parent_account.id

        account_id = self.db.create_account(
            code=code,
            name=name.strip(),
            account_type=account_type,
            level=level_from_code(code),
            parent_id=parent_id,
            accepts_entries=accepts_entries,
        )
        logger.info("account_created", extra={"code": code, "account_type": account_type.value})
        return self.db.get_account(account_id)

    def get_account(self, account_id: int) -> Optional[Account]:
        return self.db.get_account(account_id)

    def get_account_by_code(self, code: str) -> Optional[Account]:
        return self.db.get_account_by_code(code)

    def require_account(self, account_id: int) -> Account:
        """Get account by ID or raise AccountNotFoundError."""
        account = self.db.get_account(account_id)
        if account is None:
            raise AccountNotFoundError(account_not_found(account_id))
        return account

    def list_accounts(
        self,
        account_type: Optional[AccountType] = None,
        level: Optional[int] = None,
        is_active: Optional[bool] = None,
        postable_only: bool = False,
    ) -> list[Account]:
        """List accounts ordered by code.

        Args:
            account_type: Only accounts of this type
            level: Only accounts at this depth
            is_active: Only active (True) or inactive (False) accounts
            postable_only: Only active accounts that accept entries

        Returns:
            List of account entities
        """
        if postable_only:
            is_active = True
        accounts = self.db.list_accounts(
            account_type=account_type,
            level=level,
            is_active=is_active,
            accepts_entries=True if postable_only else None,
        )
        return sorted(accounts, key=lambda acc: code_sort_key(acc.code))

    def get_account_tree(self, active_only: bool = False) -> list[AccountTreeNode]:
        """Get the chart as a nested tree of root nodes."""
        accounts = self.list_accounts(is_active=True if active_only else None)
        children: dict[Optional[int], list[Account]] = {}
        for acc in accounts:
            children.setdefault(acc.parent_id, []).append(acc)
        known_ids = {acc.id for acc in accounts}

        def build(account: Account) -> AccountTreeNode:
            return AccountTreeNode(
                account=account,
                children=[build(child) for child in children.get(account.id, [])],
            )

        # Accounts whose parent was filtered out are shown as roots
        roots = [acc for acc in accounts if acc.parent_id is None or acc.parent_id not in known_ids]
        return [build(acc) for acc in roots]

    def update_account(
        self,
        account_id: int,
        name: Optional[str] = None,
        account_type: Optional[AccountType] = None,
        accepts_entries: Optional[bool] = None,
        is_active: Optional[bool] = None,
    ) -> Account:
        """Update an account. The code is never changed.

        Raises:
            AccountNotFoundError: If the account does not exist
            TypeMismatchError: If a new type disagrees with parent or children
            HasMovementsError: If changing the type of an account with journal lines
        """
        account = self.require_account(account_id)

        if name is not None and not name.strip():
            raise ValidationError("Account name must not be empty")

        if account_type is not None:
            account_type = AccountType(account_type)
            if account_type == account.account_type:
                account_type = None
        if account_type is not None:
            self._check_type_change(account, account_type)

        self.db.update_account(
            account_id=account_id,
            name=name.strip() if name is not None else None,
            account_type=account_type,
            accepts_entries=accepts_entries,
            is_active=is_active,
        )
        logger.info("account_updated", extra={"code": account.code})
        return self.db.get_account(account_id)

    def _check_type_change(self, account: Account, new_type: AccountType) -> None:
        if account.parent_id is not None:
            parent = self.db.get_account(account.parent_id)
            if parent is not None and parent.account_type != new_type:
                raise TypeMismatchError(
                    f"Account '{account.code}' cannot become {new_type.value}: "
                    f"parent '{parent.code}' is {parent.account_type.value}"
                )
        mismatched = [
            child.code for child in self.db.get_child_accounts(account.id) if child.account_type != new_type
        ]
        if mismatched:
            raise TypeMismatchError(
                f"Account '{account.code}' cannot become {new_type.value}: "
                f"children {', '.join(mismatched)} have a different type"
            )
        if self.db.get_account_line_count(account.id) > 0:
            raise HasMovementsError(
                f"Account '{account.code}' has journal lines; its type cannot change"
            )

    def delete_account(self, account_id: int) -> None:
        """Delete an account with no children and no journal lines.

        Raises:
            AccountNotFoundError: If the account does not exist
            HasChildrenError: If other accounts have it as parent
            HasMovementsError: If journal lines reference it
        """
        account = self.require_account(account_id)
        child_count = len(self.db.get_child_accounts(account_id))
        line_count = self.db.get_account_line_count(account_id)

        if child_count > 0:
            raise HasChildrenError(account_delete_blocked(account.code, child_count, line_count))
        if line_count > 0:
            raise HasMovementsError(account_delete_blocked(account.code, child_count, line_count))

        self.db.delete_account(account_id)
        logger.info("account_deleted", extra={"code": account.code})

    def bulk_initialize(
        self, definitions: Optional[Iterable[AccountDefinition]] = None
    ) -> ChartInitialization:
        """Seed an empty chart of accounts.

        Definitions are validated as a set, then inserted depth by depth so
        every parent exists before its children. All rows are written in one
        transaction.

        Args:
            definitions: Account definitions; defaults to the standard chart

        Returns:
            Count of created accounts and a per-type breakdown

        Raises:
            AlreadyInitializedError: If any account already exists
        """
        self._require_empty(self.db.count_accounts())

        ordered = self._order_definitions(list(definitions if definitions is not None else DEFAULT_CHART))
        created = self.db.bulk_create_accounts(ordered, check=self._require_empty)

        by_type = Counter(AccountType(d.account_type) for d in ordered)
        logger.info(
            "chart_initialized",
            extra={"count": len(created), "depth": max((level_from_code(d.code) for d in ordered), default=0)},
        )
        return ChartInitialization(count=len(created), by_type=dict(by_type))

    @staticmethod
    def _require_empty(account_count: int) -> None:
        if account_count > 0:
            raise AlreadyInitializedError("Chart of accounts is already initialized")

    @staticmethod
    def _order_definitions(definitions: list[AccountDefinition]) -> list[AccountDefinition]:
        """Validate a definition set and return it grouped by depth."""
        by_code: dict[str, AccountDefinition] = {}
        for definition in definitions:
            code = _checked_code(definition.code)
            if code in by_code:
                raise DuplicateCodeError(f"Account code '{code}' is defined more than once")
            by_code[code] = AccountDefinition(
                code=code,
                name=definition.name,
                account_type=AccountType(definition.account_type),
                accepts_entries=definition.accepts_entries,
            )

        for code, definition in by_code.items():
            parent = parent_code(code)
            if parent is None:
                continue
            if parent not in by_code:
                raise ParentNotFoundError(f"Parent account '{parent}' not found for '{code}'")
            if by_code[parent].account_type != definition.account_type:
                raise TypeMismatchError(
                    f"Account '{code}' is {definition.account_type.value} but parent '{parent}' "
                    f"is {by_code[parent].account_type.value}"
                )

        return sorted(by_code.values(), key=lambda d: (level_from_code(d.code), code_sort_key(d.code)))
