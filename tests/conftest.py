"""Shared pytest fixtures for ledgerkit tests."""

import os
import tempfile
from datetime import date
from decimal import Decimal

import pytest

from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.domain.chart import ChartOfAccountsService
from ledgerkit.domain.entities import EntryLineInput, EntryStatus
from ledgerkit.domain.journal import JournalService
from ledgerkit.domain.posting import AutoPostingService
from ledgerkit.domain.reports import ReportService
from ledgerkit.domain.templates import TemplateService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def other_connection(temp_db):
    """A second database object on the same file, as another process would have."""
    db = create_sqlite_database(database_path=temp_db.database_path)
    yield db
    db.disconnect()

@pytest.fixture
def chart_service(temp_db):
    """Create a ChartOfAccountsService with a temporary database."""
    return ChartOfAccountsService(temp_db)


@pytest.fixture
def journal_service(temp_db):
    """Create a JournalService with a temporary database."""
    return JournalService(temp_db)


@pytest.fixture
def template_service(temp_db):
    """Create a TemplateService with a temporary database."""
    return TemplateService(temp_db)


@pytest.fixture
def posting_service(temp_db):
    """Create an AutoPostingService with a temporary database."""
    return AutoPostingService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def seeded_chart(chart_service, template_service):
    """Load the standard chart and templates; return accounts keyed by code."""
    chart_service.bulk_initialize()
    template_service.seed_default_templates()
    return {account.code: account for account in chart_service.list_accounts()}


@pytest.fixture
def post_entry(journal_service, seeded_chart):
    """Factory that posts a balanced entry given (code, debit, credit) tuples."""

    def _post(description, rows, entry_date=date(2024, 3, 15)):
        lines = [
            EntryLineInput(
                account_id=seeded_chart[code].id,
                debit=Decimal(str(debit)),
                credit=Decimal(str(credit)),
            )
            for code, debit, credit in rows
        ]
        return journal_service.create_entry(
            entry_date=entry_date,
            description=description,
            lines=lines,
            status=EntryStatus.POSTED,
        )

    return _post


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
