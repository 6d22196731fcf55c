"""Shared pytest fixtures for bookkit tests."""

import tempfile
import os
from datetime import date
from decimal import Decimal
import pytest

from bookkit.database.factories import create_sqlite_database
from bookkit.domain.account import BankAccountService
from bookkit.domain.category import CategoryService
from bookkit.domain.csv_import import CsvImportService
from bookkit.domain.entities import (
    CashFlowActivity,
    Category,
    Granularity,
    Period,
    Transaction,
    TransactionStatus,
    TransactionType,
)
from bookkit.domain.report import ReportService
from bookkit.domain.rules import RuleService
from bookkit.domain.tax import TaxSettingsService
from bookkit.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def account_service(temp_db):
    """Create a BankAccountService with a temporary database."""
    return BankAccountService(temp_db)


@pytest.fixture
def category_service(temp_db):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def tax_settings_service(temp_db):
    """Create a TaxSettingsService with a temporary database."""
    return TaxSettingsService(temp_db)


@pytest.fixture
def report_service(temp_db):
    """Create a ReportService with a temporary database."""
    return ReportService(temp_db)


@pytest.fixture
def rule_service(temp_db):
    """Create a RuleService with a temporary database."""
    return RuleService(temp_db)


@pytest.fixture
def csv_import_service(temp_db):
    """Create a CsvImportService with a temporary database."""
    return CsvImportService(temp_db)


@pytest.fixture
def sample_account(account_service):
    """Create a sample bank account holding 10,000."""
    account_id = account_service.create_account(
        name="Business Checking",
        bank_name="Test Bank",
        account_type="checking",
        current_balance=Decimal("10000.00"),
    )
    return account_service.get_account(account_id)


@pytest.fixture
def sample_categories(category_service):
    """Create the default categories and return their IDs by name."""
    from bookkit.cli.commands.init_categories import DEFAULT_CATEGORIES

    category_ids = {}
    for name, category_type, color in DEFAULT_CATEGORIES:
        category_ids[name] = category_service.create_category(
            name=name, type=category_type, color=color
        )
    return category_ids


@pytest.fixture
def january_2024():
    """Period covering January 2024."""
    return Period(
        granularity=Granularity.MONTH,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 1, 31),
        label="January 2024",
    )


@pytest.fixture
def year_2024():
    """Period covering calendar year 2024."""
    return Period(
        granularity=Granularity.YEAR,
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        label="2024",
    )


@pytest.fixture
def make_category():
    """Factory for in-memory Category entities."""

    def _make(
        name,
        type=TransactionType.EXPENSE,
        activity=CashFlowActivity.OPERATING,
        category_id=None,
    ):
        return Category(
            id=category_id if category_id is not None else abs(hash(name)) % 10000,
            name=name,
            type=TransactionType(type),
            cash_flow_activity=CashFlowActivity(activity),
            color=None,
            created_at=None,
        )

    return _make


@pytest.fixture
def make_transaction():
    """Factory for in-memory Transaction entities."""
    counter = {"next_id": 1}

    def _make(
        amount,
        type=TransactionType.EXPENSE,
        on=date(2024, 1, 15),
        category=None,
        status=TransactionStatus.POSTED,
        tax_deductible=False,
        is_internal_transfer=False,
        needs_review=False,
        description="Test transaction",
    ):
        txn_id = counter["next_id"]
        counter["next_id"] += 1
        return Transaction(
            id=txn_id,
            description=description,
            amount=Decimal(str(amount)),
            type=TransactionType(type),
            date=on,
            category=category,
            status=TransactionStatus(status),
            tax_deductible=tax_deductible,
            is_internal_transfer=is_internal_transfer,
            needs_review=needs_review,
        )

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
