"""Money arithmetic and the account sign convention.

Assets and expenses are debit-natured (balance = debit - credit); liabilities,
equity and income are credit-natured (balance = credit - debit). Every report
goes through ``signed_balance`` so the convention lives in one place.
"""

from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from ledgerkit.domain.entities import AccountType, LineSide

BALANCE_TOLERANCE = Decimal("0.01")
ZERO = Decimal("0.00")
CENT = Decimal("0.01")

DEBIT_NATURE = frozenset({AccountType.ASSET, AccountType.EXPENSE})


def quantize(amount: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return Decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)


def normal_side(account_type: AccountType) -> LineSide:
    """Side on which an account of this type normally carries its balance."""
    return LineSide.DEBIT if account_type in DEBIT_NATURE else LineSide.CREDIT


def signed_balance(account_type: AccountType, debit: Decimal, credit: Decimal) -> Decimal:
    if account_type in DEBIT_NATURE:
        return debit - credit
    return credit - debit


def split_balance(account_type: AccountType, balance: Decimal) -> tuple[Decimal, Decimal]:
    """Place a signed balance into (debit column, credit column).

    A positive balance sits on the account's normal side; a negative one
    flips to the other column as a positive amount.
    """
    if balance == 0:
        return ZERO, ZERO
    on_debit = (normal_side(account_type) == LineSide.DEBIT) == (balance > 0)
    if on_debit:
        return abs(balance), ZERO
    return ZERO, abs(balance)


def totals(lines: Iterable[tuple[Decimal, Decimal]]) -> tuple[Decimal, Decimal]:
    """Sum (debit, credit) pairs."""
    total_debit = ZERO
    total_credit = ZERO
    for debit, credit in lines:
        total_debit += debit
        total_credit += credit
    return total_debit, total_credit


def is_balanced(total_debit: Decimal, total_credit: Decimal) -> bool:
    return abs(total_debit - total_credit) <= BALANCE_TOLERANCE


def is_material(amount: Decimal) -> bool:
    """True when an amount is large enough to show on a statement."""
    return abs(amount) > BALANCE_TOLERANCE
