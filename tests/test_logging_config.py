"""Tests for logging setup."""

import io
import json
import logging
from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.domain.entities import EntryLineInput
from ledgerkit.domain.errors import UnbalancedEntryError
from ledgerkit.logging_config import configure_logging, get_logger, reset_logging


@pytest.fixture(autouse=True)
def clean_logging():
    reset_logging()
    yield
    reset_logging()


def test_get_logger_is_namespaced():
    assert get_logger("journal").name == "ledgerkit.journal"


def test_json_output_includes_extra_fields():
    stream = io.StringIO()
    configure_logging(level="INFO", stream=stream, json_format=True)

    get_logger("journal").info("entry_posted", extra={"entry_number": 7, "amount": Decimal("1.50")})

    record = json.loads(stream.getvalue().strip())
    assert record["message"] == "entry_posted"
    assert record["logger"] == "ledgerkit.journal"
    assert record["level"] == "INFO"
    assert record["entry_number"] == 7
    assert record["amount"] == "1.50"


def test_text_output_and_level_filter():
    stream = io.StringIO()
    configure_logging(level=logging.WARNING, stream=stream)

    get_logger("chart").info("hidden")
    get_logger("chart").warning("shown", extra={"code": "1.1"})

    output = stream.getvalue()
    assert "hidden" not in output
    assert "WARNING ledgerkit.chart: shown code=1.1" in output


def test_configure_logging_is_idempotent():
    configure_logging(stream=io.StringIO())
    configure_logging(stream=io.StringIO())
    assert len(logging.getLogger("ledgerkit").handlers) == 1


def test_rejected_confirm_is_logged(caplog, journal_service, seeded_chart):
    entry = journal_service.create_entry(
        entry_date=date(2024, 2, 1),
        description="Unbalanced",
        lines=[
            EntryLineInput(account_id=seeded_chart["5.2.05"].id, debit=Decimal("100")),
            EntryLineInput(account_id=seeded_chart["1.1.01.001"].id, credit=Decimal("90")),
        ],
    )

    with caplog.at_level(logging.WARNING, logger="ledgerkit"):
        with pytest.raises(UnbalancedEntryError):
            journal_service.confirm_entry(entry.id)

    assert "entry_confirm_rejected" in caplog.messages
