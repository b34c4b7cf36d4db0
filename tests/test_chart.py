"""Tests for the chart of accounts service."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.chart import ChartOfAccountsService
from ledgerkit.domain.default_chart import DEFAULT_CHART
from ledgerkit.domain.entities import AccountDefinition, AccountType, EntryLineInput
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
)


@pytest.fixture
def asset_branch(chart_service):
    """Create 1 > 1.1 > 1.1.1 as asset headers."""
    chart_service.create_account("1", "Assets", AccountType.ASSET, accepts_entries=False)
    chart_service.create_account("1.1", "Current", AccountType.ASSET, accepts_entries=False)
    return chart_service.create_account("1.1.1", "Cash", AccountType.ASSET, accepts_entries=False)


def test_create_root_account(chart_service):
    account = chart_service.create_account("5", "Expenses", AccountType.EXPENSE, accepts_entries=False)

    assert account.level == 1
    assert account.parent_id is None
    assert account.is_active
    assert not account.accepts_entries


def test_create_account_derives_level_and_parent(chart_service, asset_branch):
    account = chart_service.create_account("1.1.1.045", "Drawer", AccountType.ASSET)

    assert account.level == 4
    assert account.parent_id == asset_branch.id
    assert account.is_postable


def test_create_account_rejects_type_mismatch(chart_service, asset_branch):
    with pytest.raises(TypeMismatchError):
        chart_service.create_account("1.1.1.050", "Wrong", AccountType.LIABILITY)
    assert chart_service.get_account_by_code("1.1.1.050") is None


def test_create_account_requires_parent(chart_service):
    with pytest.raises(ParentNotFoundError):
        chart_service.create_account("2.1.3.045", "Orphan", AccountType.LIABILITY)


def test_create_account_rejects_duplicate_code(chart_service, asset_branch):
    with pytest.raises(DuplicateCodeError):
        chart_service.create_account("1.1", "Again", AccountType.ASSET)


@pytest.mark.parametrize("code", ["1.a", "", "1..1"])
def test_create_account_rejects_bad_code(chart_service, code):
    with pytest.raises(InvalidAccountCodeError):
        chart_service.create_account(code, "Bad", AccountType.ASSET)


def test_create_account_rejects_empty_name(chart_service):
    with pytest.raises(ValidationError):
        chart_service.create_account("1", "  ", AccountType.ASSET)


def test_bulk_initialize_loads_default_chart(chart_service):
    summary = chart_service.bulk_initialize()

    assert summary.count == len(DEFAULT_CHART)
    assert sum(summary.by_type.values()) == summary.count
    cash = chart_service.get_account_by_code("1.1.01.001")
    parent = chart_service.get_account_by_code("1.1.01")
    assert cash.parent_id == parent.id
    assert cash.is_postable
    assert not parent.accepts_entries


def test_bulk_initialize_twice_fails(chart_service):
    chart_service.bulk_initialize()
    with pytest.raises(AlreadyInitializedError):
        chart_service.bulk_initialize()


def test_bulk_initialize_accepts_children_before_parents(chart_service):
    definitions = [
        AccountDefinition("4.1", "Sales", AccountType.INCOME),
        AccountDefinition("4", "Income", AccountType.INCOME, accepts_entries=False),
    ]
    summary = chart_service.bulk_initialize(definitions)

    assert summary.count == 2
    assert chart_service.get_account_by_code("4.1").parent_id == chart_service.get_account_by_code("4").id


def test_bulk_initialize_is_all_or_nothing(chart_service):
    definitions = [
        AccountDefinition("1", "Assets", AccountType.ASSET, accepts_entries=False),
        AccountDefinition("1.1", "Debt", AccountType.LIABILITY),
    ]
    with pytest.raises(TypeMismatchError):
        chart_service.bulk_initialize(definitions)
    assert chart_service.list_accounts() == []


def test_list_accounts_is_ordered_by_code(chart_service, seeded_chart):
    codes = [account.code for account in chart_service.list_accounts(account_type=AccountType.EXPENSE)]

    assert codes[0] == "5"
    assert codes.index("5.2.09") < codes.index("5.2.10")


def test_list_postable_accounts(chart_service, seeded_chart):
    accounts = chart_service.list_accounts(postable_only=True)

    assert accounts
    assert all(account.is_postable for account in accounts)
    assert "1.1.01" not in {account.code for account in accounts}


def test_account_tree(chart_service, seeded_chart):
    roots = chart_service.get_account_tree()

    assert [node.account.code for node in roots] == ["1", "2", "3", "4", "5"]
    current_assets = roots[0].children[0]
    assert current_assets.account.code == "1.1"
    assert current_assets.children[0].account.code == "1.1.01"


def test_update_account_name_and_status(chart_service, seeded_chart):
    account = seeded_chart["5.2.05"]
    updated = chart_service.update_account(account.id, name="Office Rent", is_active=False)

    assert updated.name == "Office Rent"
    assert updated.code == "5.2.05"
    assert not updated.is_active
    assert not updated.is_postable


def test_update_account_type_must_match_parent(chart_service, seeded_chart):
    with pytest.raises(TypeMismatchError):
        chart_service.update_account(seeded_chart["5.2.05"].id, account_type=AccountType.ASSET)


def test_update_account_type_must_match_children(chart_service, asset_branch):
    chart_service.create_account("1.1.1.001", "Drawer", AccountType.ASSET)
    root = chart_service.get_account_by_code("1")

    with pytest.raises(TypeMismatchError, match="children 1.1"):
        chart_service.update_account(root.id, account_type=AccountType.LIABILITY)
    assert chart_service.get_account(root.id).account_type == AccountType.ASSET


def test_update_account_type_with_movements_fails(chart_service, journal_service):
    suspense = chart_service.create_account("9", "Suspense", AccountType.ASSET)
    capital = chart_service.create_account("3", "Capital", AccountType.EQUITY)
    journal_service.create_entry(
        entry_date=date(2024, 1, 10),
        description="Opening",
        lines=[
            EntryLineInput(account_id=suspense.id, debit=Decimal("100")),
            EntryLineInput(account_id=capital.id, credit=Decimal("100")),
        ],
    )

    with pytest.raises(HasMovementsError, match="its type cannot change"):
        chart_service.update_account(suspense.id, account_type=AccountType.EXPENSE)
    assert chart_service.get_account(suspense.id).account_type == AccountType.ASSET


def test_update_account_type_without_movements(chart_service):
    suspense = chart_service.create_account("9", "Suspense", AccountType.ASSET)
    updated = chart_service.update_account(suspense.id, account_type=AccountType.EXPENSE)
    assert updated.account_type == AccountType.EXPENSE


def test_update_missing_account(chart_service):
    with pytest.raises(AccountNotFoundError):
        chart_service.update_account(999, name="Ghost")


def test_delete_leaf_account(chart_service, seeded_chart):
    account = seeded_chart["5.4.04"]
    chart_service.delete_account(account.id)
    assert chart_service.get_account(account.id) is None


def test_delete_account_with_children_fails(chart_service, seeded_chart):
    with pytest.raises(HasChildrenError, match="child account"):
        chart_service.delete_account(seeded_chart["1.1.01"].id)


def test_delete_account_with_movements_fails(chart_service, journal_service, seeded_chart):
    journal_service.create_entry(
        entry_date=date(2024, 1, 10),
        description="Rent",
        lines=[
            EntryLineInput(account_id=seeded_chart["5.2.05"].id, debit=Decimal("100")),
            EntryLineInput(account_id=seeded_chart["1.1.01.001"].id, credit=Decimal("100")),
        ],
    )

    with pytest.raises(HasMovementsError, match="1 journal line"):
        chart_service.delete_account(seeded_chart["5.2.05"].id)


def test_bulk_initialize_rechecks_inside_its_transaction(chart_service, other_connection, temp_db, monkeypatch):
    ChartOfAccountsService(other_connection).bulk_initialize()
    # The up-front count was read before the other load committed
    monkeypatch.setattr(temp_db, "count_accounts", lambda: 0)

    with pytest.raises(AlreadyInitializedError):
        chart_service.bulk_initialize()


def test_bulk_initialize_losing_a_race_reports_already_initialized(
    chart_service, other_connection, temp_db, monkeypatch
):
    ChartOfAccountsService(other_connection).bulk_initialize()
    real_count = temp_db._count_accounts
    counts = []

    def stale_count(session):
        counts.append(session)
        if len(counts) <= 2:
            return 0
        return real_count(session)

    monkeypatch.setattr(temp_db, "_count_accounts", stale_count)

    with pytest.raises(AlreadyInitializedError):
        chart_service.bulk_initialize()
    assert len(counts) == 3
    assert len(ChartOfAccountsService(other_connection).list_accounts()) == len(DEFAULT_CHART)
