"""Tests for the journal entry lifecycle."""

from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.entities import EntryLineInput, EntryStatus
from ledgerkit.domain.errors import (
    AccountNotFoundError,
    AccountNotPostableError,
    AlreadyFinalizedError,
    EntryNotFoundError,
    UnbalancedEntryError,
    ValidationError,
)


def _lines(accounts, *rows):
    return [
        EntryLineInput(account_id=accounts[code].id, debit=Decimal(str(debit)), credit=Decimal(str(credit)))
        for code, debit, credit in rows
    ]


def test_create_draft_entry(journal_service, seeded_chart):
    entry = journal_service.create_entry(
        entry_date=date(2024, 2, 1),
        description="Capital contribution",
        lines=_lines(seeded_chart, ("1.1.01.003", 1000, 0), ("3.1.01", 0, 1000)),
        reference="DEP-1",
    )

    assert entry.status == EntryStatus.DRAFT
    assert entry.entry_number == 1
    assert not entry.is_automatic
    assert entry.reference == "DEP-1"
    assert entry.total_debit == entry.total_credit == Decimal("1000.00")
    assert [line.account_code for line in entry.lines] == ["1.1.01.003", "3.1.01"]


def test_entry_numbers_are_sequential(journal_service, seeded_chart):
    numbers = [
        journal_service.create_entry(
            entry_date=date(2024, 2, day),
            description=f"Entry {day}",
            lines=_lines(seeded_chart, ("5.2.05", 10, 0), ("1.1.01.001", 0, 10)),
        ).entry_number
        for day in (1, 2, 3)
    ]
    assert numbers == [1, 2, 3]


def test_entry_number_not_reused_after_delete(journal_service, seeded_chart):
    rows = (("5.2.05", 10, 0), ("1.1.01.001", 0, 10))
    first = journal_service.create_entry(date(2024, 2, 1), "First", _lines(seeded_chart, *rows))
    second = journal_service.create_entry(date(2024, 2, 1), "Second", _lines(seeded_chart, *rows))

    journal_service.delete_entry(second.id)
    third = journal_service.create_entry(date(2024, 2, 1), "Third", _lines(seeded_chart, *rows))

    assert first.entry_number == 1
    assert third.entry_number == 3


def test_draft_may_be_unbalanced(journal_service, seeded_chart):
    entry = journal_service.create_entry(
        entry_date=date(2024, 2, 1),
        description="Work in progress",
        lines=_lines(seeded_chart, ("5.2.05", 100, 0), ("1.1.01.001", 0, 90)),
    )
    assert entry.status == EntryStatus.DRAFT


def test_confirm_unbalanced_entry_fails(journal_service, seeded_chart):
    entry = journal_service.create_entry(
        entry_date=date(2024, 2, 1),
        description="Unbalanced",
        lines=_lines(seeded_chart, ("5.2.05", 100, 0), ("1.1.01.001", 0, 90)),
    )

    with pytest.raises(UnbalancedEntryError) as excinfo:
        journal_service.confirm_entry(entry.id)

    assert excinfo.value.difference == Decimal("10.00")
    assert journal_service.get_entry(entry.id).status == EntryStatus.DRAFT


def test_confirm_balanced_entry(journal_service, seeded_chart):
    entry = journal_service.create_entry(
        entry_date=date(2024, 2, 1),
        description="Rent",
        lines=_lines(seeded_chart, ("5.2.05", 100, 0), ("1.1.01.001", 0, 100)),
    )

    posted = journal_service.confirm_entry(entry.id)
    assert posted.status == EntryStatus.POSTED

    with pytest.raises(AlreadyFinalizedError):
        journal_service.confirm_entry(entry.id)


def test_confirm_within_tolerance(journal_service, seeded_chart):
    entry = journal_service.create_entry(
        entry_date=date(2024, 2, 1),
        description="Rounding",
        lines=_lines(seeded_chart, ("5.2.05", "100.01", 0), ("1.1.01.001", 0, "100.00")),
    )
    assert journal_service.confirm_entry(entry.id).status == EntryStatus.POSTED


def test_create_posted_requires_balance(journal_service, seeded_chart):
    with pytest.raises(UnbalancedEntryError):
        journal_service.create_entry(
            entry_date=date(2024, 2, 1),
            description="Unbalanced",
            lines=_lines(seeded_chart, ("5.2.05", 100, 0), ("1.1.01.001", 0, 50)),
            status=EntryStatus.POSTED,
        )
    assert journal_service.list_entries().total == 0


def test_header_account_is_not_postable(journal_service, seeded_chart):
    with pytest.raises(AccountNotPostableError) as excinfo:
        journal_service.create_entry(
            entry_date=date(2024, 2, 1),
            description="Into a header",
            lines=_lines(seeded_chart, ("1.1.01", 100, 0), ("3.1.01", 0, 100)),
        )
    assert excinfo.value.codes == ["1.1.01"]


def test_inactive_account_is_not_postable(journal_service, chart_service, seeded_chart):
    chart_service.update_account(seeded_chart["5.2.05"].id, is_active=False)

    with pytest.raises(AccountNotPostableError):
        journal_service.create_entry(
            entry_date=date(2024, 2, 1),
            description="Rent",
            lines=_lines(seeded_chart, ("5.2.05", 100, 0), ("1.1.01.001", 0, 100)),
        )


def test_confirm_rechecks_deactivated_account(journal_service, chart_service, seeded_chart):
    entry = journal_service.create_entry(
        entry_date=date(2024, 2, 1),
        description="Rent",
        lines=_lines(seeded_chart, ("5.2.05", 100, 0), ("1.1.01.001", 0, 100)),
    )
    chart_service.update_account(seeded_chart["5.2.05"].id, is_active=False)

    with pytest.raises(AccountNotPostableError):
        journal_service.confirm_entry(entry.id)
    assert journal_service.get_entry(entry.id).status == EntryStatus.DRAFT


def test_unknown_account(journal_service, seeded_chart):
    with pytest.raises(AccountNotFoundError):
        journal_service.create_entry(
            entry_date=date(2024, 2, 1),
            description="Ghost",
            lines=[
                EntryLineInput(account_id=99999, debit=Decimal("1")),
                EntryLineInput(account_id=seeded_chart["1.1.01.001"].id, credit=Decimal("1")),
            ],
        )


@pytest.mark.parametrize(
    "rows",
    [
        (("5.2.05", 100, 0),),
        (("5.2.05", -100, 0), ("1.1.01.001", 0, -100)),
        (("5.2.05", "NaN", 0), ("1.1.01.001", 0, 100)),
        (("5.2.05", 100, 0), ("1.1.01.001", 0, "Infinity")),
    ],
)
def test_invalid_lines(journal_service, seeded_chart, rows):
    with pytest.raises(ValidationError):
        journal_service.create_entry(date(2024, 2, 1), "Bad", _lines(seeded_chart, *rows))


def test_empty_description_rejected(journal_service, seeded_chart):
    with pytest.raises(ValidationError):
        journal_service.create_entry(
            date(2024, 2, 1), " ", _lines(seeded_chart, ("5.2.05", 1, 0), ("1.1.01.001", 0, 1))
        )


def test_amounts_rounded_to_cents(journal_service, seeded_chart):
    entry = journal_service.create_entry(
        date(2024, 2, 1),
        "Rounding",
        _lines(seeded_chart, ("5.2.05", "10.005", 0), ("1.1.01.001", 0, "10.005")),
    )
    assert entry.lines[0].debit == Decimal("10.01")


def test_update_draft_replaces_lines(journal_service, seeded_chart):
    entry = journal_service.create_entry(
        date(2024, 2, 1), "Draft", _lines(seeded_chart, ("5.2.05", 100, 0), ("1.1.01.001", 0, 90))
    )

    updated = journal_service.update_entry(
        entry.id,
        description="Fixed draft",
        lines=_lines(seeded_chart, ("5.2.05", 90, 0), ("1.1.01.003", 0, 90)),
    )

    assert updated.description == "Fixed draft"
    assert updated.entry_number == entry.entry_number
    assert [line.account_code for line in updated.lines] == ["5.2.05", "1.1.01.003"]
    assert updated.total_debit == updated.total_credit == Decimal("90.00")


def test_posted_entry_is_immutable(journal_service, post_entry):
    entry = post_entry("Rent", [("5.2.05", 100, 0), ("1.1.01.001", 0, 100)])

    with pytest.raises(AlreadyFinalizedError):
        journal_service.update_entry(entry.id, description="Changed")
    with pytest.raises(AlreadyFinalizedError):
        journal_service.delete_entry(entry.id)
    assert journal_service.get_entry(entry.id).description == "Rent"


def test_missing_entry(journal_service):
    with pytest.raises(EntryNotFoundError):
        journal_service.confirm_entry(42)
    assert journal_service.get_entry(42) is None


def test_get_entry_by_number(journal_service, post_entry):
    entry = post_entry("Rent", [("5.2.05", 100, 0), ("1.1.01.001", 0, 100)])
    assert journal_service.get_entry_by_number(entry.entry_number).id == entry.id


def test_re_reading_posted_entry_is_stable(journal_service, post_entry):
    entry = post_entry("Rent", [("5.2.05", 100, 0), ("1.1.01.001", 0, 100)])

    first = journal_service.get_entry(entry.id)
    second = journal_service.get_entry(entry.id)
    assert first == second


def test_list_entries_filters_and_pages(journal_service, post_entry, seeded_chart):
    for day in range(1, 6):
        post_entry(f"Rent {day}", [("5.2.05", 10, 0), ("1.1.01.001", 0, 10)], entry_date=date(2024, 1, day))
    journal_service.create_entry(
        date(2024, 1, 6), "Draft", _lines(seeded_chart, ("5.2.05", 1, 0), ("1.1.01.001", 0, 1))
    )

    page = journal_service.list_entries(status=EntryStatus.POSTED, page=1, limit=2)
    assert page.total == 5
    assert page.pages == 3
    assert [e.description for e in page.entries] == ["Rent 5", "Rent 4"]

    last = journal_service.list_entries(status=EntryStatus.POSTED, page=3, limit=2)
    assert [e.description for e in last.entries] == ["Rent 1"]

    ranged = journal_service.list_entries(start_date=date(2024, 1, 2), end_date=date(2024, 1, 3))
    assert ranged.total == 2

    assert journal_service.list_entries(status=EntryStatus.DRAFT).total == 1
    assert journal_service.list_entries(is_automatic=True).total == 0


def test_list_entries_rejects_bad_page(journal_service):
    with pytest.raises(ValidationError):
        journal_service.list_entries(page=0)


def test_nan_amount_names_the_line(journal_service, seeded_chart):
    with pytest.raises(ValidationError, match="Line 1: invalid amount"):
        journal_service.create_entry(
            date(2024, 2, 1), "NaN", _lines(seeded_chart, ("5.2.05", "NaN", 0), ("1.1.01.001", 0, 100))
        )
    assert journal_service.list_entries().total == 0
