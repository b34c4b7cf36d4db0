"""Shared domain error messages and error types."""

from decimal import Decimal
from typing import Iterable


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class DependencyError(DomainError):
    """Operation blocked due to dependent domain data."""


# Chart of accounts


class InvalidAccountCodeError(ValidationError):
    pass


class DuplicateCodeError(ConflictError):
    pass


class ParentNotFoundError(NotFoundError):
    pass


class TypeMismatchError(ValidationError):
    pass


class HasChildrenError(DependencyError):
    pass


class HasMovementsError(DependencyError):
    pass


class AlreadyInitializedError(ConflictError):
    pass


class AccountNotFoundError(NotFoundError):
    pass


class AccountNotPostableError(ValidationError):
    """Journal lines reference accounts that cannot take postings."""

    def __init__(self, codes: Iterable[str]):
        self.codes = sorted(set(codes))
        super().__init__(
            "Accounts do not accept entries: " + ", ".join(self.codes)
        )


# Journal


class EntryNotFoundError(NotFoundError):
    pass


class AlreadyFinalizedError(ConflictError):
    pass


class UnbalancedEntryError(ValidationError):
    """Debits and credits differ by more than the tolerance."""

    def __init__(self, total_debit: Decimal, total_credit: Decimal, message: str | None = None):
        self.total_debit = total_debit
        self.total_credit = total_credit
        self.difference = abs(total_debit - total_credit)
        super().__init__(
            message
            or f"Entry is unbalanced: debit {total_debit}, credit {total_credit}, "
            f"difference {self.difference}"
        )


# Templates and auto-posting


class TemplateNotFoundError(NotFoundError):
    pass


class TemplateInactiveError(ValidationError):
    pass


class AccountResolutionError(ValidationError):
    """A template account reference could not be resolved to a postable account."""

    def __init__(self, message: str, context_key: str | None = None):
        self.context_key = context_key
        super().__init__(message)


class UnbalancedTemplateOutputError(DomainError):
    """A template computed lines that do not balance. Indicates a template defect."""

    def __init__(self, template_code: str, total_debit: Decimal, total_credit: Decimal):
        self.template_code = template_code
        self.total_debit = total_debit
        self.total_credit = total_credit
        self.difference = abs(total_debit - total_credit)
        super().__init__(
            f"Template '{template_code}' produced an unbalanced entry: "
            f"debit {total_debit}, credit {total_credit}"
        )


class DuplicatePostingError(ConflictError):
    pass


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def entry_not_found(entry_id: int) -> str:
    """Return message for missing journal entry."""
    return f"Journal entry {entry_id} not found"


def template_not_found(code: str) -> str:
    """Return message for missing template."""
    return f"Template '{code}' not found"


def account_delete_blocked(code: str, child_count: int, line_count: int) -> str:
    """Return message when an account has children or journal lines."""
    parts = []
    if child_count > 0:
        parts.append(f"{child_count} child account{'s' if child_count != 1 else ''}")
    if line_count > 0:
        parts.append(f"{line_count} journal line{'s' if line_count != 1 else ''}")
    return f"Cannot delete account '{code}': it has {' and '.join(parts)}."
