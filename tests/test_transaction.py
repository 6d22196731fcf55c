"""Tests for transaction service and commands."""

import pytest
from datetime import date, timedelta
from decimal import Decimal
from bookkit.cli.main import cli
from bookkit.database.factories import create_sqlite_database
from bookkit.domain.entities import TransactionStatus, TransactionType
from bookkit.domain.errors import NotFoundError, ValidationError


@pytest.fixture
def sample_transactions(transaction_service, sample_categories, sample_account):
    """Create a small January 2024 ledger and return IDs by description."""
    rows = [
        ("Invoice 1001", "5000", "income", date(2024, 1, 5), "Sales", {}),
        ("Office rent", "2000", "expense", date(2024, 1, 10), "Rent", {}),
        ("Adobe", "300", "expense", date(2024, 1, 12), "Software", {"tax_deductible": True}),
        ("Move to savings", "1000", "expense", date(2024, 1, 15), None, {"is_internal_transfer": True}),
        ("Unknown charge", "45.10", "expense", date(2024, 1, 20), None, {"needs_review": True}),
        ("Invoice 1002", "700", "income", date(2024, 2, 3), "Sales", {"status": "pending"}),
    ]
    ids = {}
    for description, amount, txn_type, on, category, flags in rows:
        ids[description] = transaction_service.create_transaction(
            description=description,
            amount=Decimal(amount),
            type=txn_type,
            transaction_date=on,
            category_id=sample_categories[category] if category else None,
            bank_account_id=sample_account.id,
            **flags,
        )
    return ids


class TestTransactionService:
    """Tests for TransactionService."""

    def test_create_transaction(self, transaction_service, sample_categories):
        """Test creating a categorized transaction."""
        txn_id = transaction_service.create_transaction(
            description="  Client retainer ",
            amount=Decimal("1200.00"),
            type="income",
            transaction_date=date(2024, 3, 1),
            category_id=sample_categories["Consulting Income"],
            vendor_name="Acme Corp",
            ai_confidence=Decimal("0.9"),
        )

        txn = transaction_service.require_transaction(txn_id)
        assert txn.description == "Client retainer"
        assert txn.type == TransactionType.INCOME
        assert txn.status == TransactionStatus.POSTED
        assert txn.category_name == "Consulting Income"
        assert txn.vendor_name == "Acme Corp"
        assert txn.ai_confidence == Decimal("0.9")

    @pytest.mark.parametrize(
        "overrides,message",
        [
            ({"amount": Decimal("-1")}, "non-negative"),
            ({"type": "refund"}, "Invalid transaction type"),
            ({"status": "cleared"}, "Invalid transaction status"),
            ({"ai_confidence": Decimal("1.5")}, "AI confidence"),
            ({"description": "   "}, "Description cannot be empty"),
        ],
    )
    def test_rejects_malformed_records(self, transaction_service, overrides, message):
        """Test malformed records are rejected before they are stored."""
        kwargs = dict(
            description="Test",
            amount=Decimal("10"),
            type="expense",
            transaction_date=date(2024, 1, 1),
        )
        kwargs.update(overrides)

        with pytest.raises(ValidationError, match=message):
            transaction_service.create_transaction(**kwargs)

        assert transaction_service.list_transactions() == []

    def test_unknown_category_or_account(self, transaction_service):
        """Test references to missing rows raise NotFoundError."""
        with pytest.raises(NotFoundError, match="Category 42"):
            transaction_service.create_transaction(
                description="Test", amount=Decimal("1"), type="expense",
                transaction_date=date(2024, 1, 1), category_id=42,
            )
        with pytest.raises(NotFoundError, match="Bank account 42"):
            transaction_service.create_transaction(
                description="Test", amount=Decimal("1"), type="expense",
                transaction_date=date(2024, 1, 1), bank_account_id=42,
            )

    def test_update_category(self, transaction_service, sample_transactions):
        """Test assigning and clearing a category."""
        txn_id = sample_transactions["Unknown charge"]

        transaction_service.update_category(txn_id, "Office Supplies")
        assert transaction_service.get_transaction(txn_id).category_name == "Office Supplies"

        transaction_service.update_category(txn_id, None)
        assert transaction_service.get_transaction(txn_id).category is None

    def test_update_category_unknown(self, transaction_service, sample_transactions):
        """Test assigning a missing category raises NotFoundError."""
        with pytest.raises(NotFoundError, match="'Ghost' not found"):
            transaction_service.update_category(sample_transactions["Adobe"], "Ghost")

    def test_update_flags(self, transaction_service, sample_transactions):
        """Test only the given flags change."""
        txn_id = sample_transactions["Unknown charge"]

        transaction_service.update_flags(txn_id, tax_deductible=True, needs_review=False)

        txn = transaction_service.get_transaction(txn_id)
        assert txn.tax_deductible is True
        assert txn.needs_review is False
        assert txn.is_internal_transfer is False

    def test_update_flags_invalid_status(self, transaction_service, sample_transactions):
        """Test unknown statuses are rejected."""
        with pytest.raises(ValidationError):
            transaction_service.update_flags(sample_transactions["Adobe"], status="void")

    def test_mark_internal_transfer(self, transaction_service, sample_transactions):
        """Test marking and unmarking a transfer."""
        txn_id = sample_transactions["Office rent"]

        transaction_service.mark_internal_transfer(txn_id)
        assert transaction_service.get_transaction(txn_id).is_internal_transfer is True

        transaction_service.mark_internal_transfer(txn_id, is_transfer=False)
        assert transaction_service.get_transaction(txn_id).is_internal_transfer is False

    def test_delete_transaction(self, transaction_service, sample_transactions):
        """Test deleting a transaction."""
        txn_id = sample_transactions["Adobe"]
        transaction_service.delete_transaction(txn_id)

        assert transaction_service.get_transaction(txn_id) is None
        with pytest.raises(NotFoundError):
            transaction_service.delete_transaction(txn_id)

    def test_list_filters(self, transaction_service, sample_transactions):
        """Test date, category, type and review filters."""
        january = transaction_service.list_transactions(
            start_date=date(2024, 1, 1), end_date=date(2024, 1, 31)
        )
        assert len(january) == 5

        sales = transaction_service.list_transactions(category_name="Sales")
        assert [t.description for t in sales] == ["Invoice 1001", "Invoice 1002"]

        uncategorized = transaction_service.list_transactions(category_name="")
        assert {t.description for t in uncategorized} == {"Move to savings", "Unknown charge"}

        assert transaction_service.list_transactions(category_name="Ghost") == []
        assert len(transaction_service.list_transactions(type="income")) == 2
        review = transaction_service.list_transactions(needs_review=True)
        assert [t.description for t in review] == ["Unknown charge"]

    def test_get_stats(self, transaction_service, sample_transactions):
        """Test stats exclude internal transfers."""
        stats = transaction_service.get_stats(start_date=date(2024, 1, 1), end_date=date(2024, 1, 31))

        assert stats.total_income == Decimal("5000")
        assert stats.total_expenses == Decimal("2345.10")
        assert stats.net_profit == Decimal("2654.90")
        assert stats.transaction_count == 5
        assert stats.needs_review_count == 1


def test_add_transaction(cli_runner, temp_db, sample_categories, sample_account):
    """Test adding a categorized income transaction."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "add",
            "--type", "income",
            "--date", "2024-01-15",
            "--amount", "1,250.00",
            "--description", "Invoice 1003",
            "--category", "Sales",
            "--account", "Business Checking",
        ],
    )

    assert result.exit_code == 0
    assert "Created transaction" in result.output
    assert "$1,250.00" in result.output
    assert "Category: Sales" in result.output


def test_add_transaction_relative_date(cli_runner, temp_db):
    """Test adding a pending transaction dated yesterday."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "add", "--type", "expense", "--date", "yesterday",
            "--amount", "20", "--description", "Parking", "--pending",
        ],
    )

    assert result.exit_code == 0
    assert str(date.today() - timedelta(days=1)) in result.output
    assert "Status: pending" in result.output


def test_add_transaction_negative_amount(cli_runner, temp_db):
    """Test negative amounts are rejected; type carries the direction."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "add", "--type", "expense", "--date", "2024-01-15",
            "--amount", "-20", "--description", "Refund",
        ],
    )

    assert result.exit_code == 1
    assert "Invalid amount format" in result.output


def test_add_transaction_unknown_category(cli_runner, temp_db):
    """Test adding a transaction with a missing category fails."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "add", "--type", "expense", "--date", "2024-01-15",
            "--amount", "20", "--description", "Lunch", "--category", "Meals",
        ],
    )

    assert result.exit_code == 1
    assert "Category 'Meals' not found" in result.output


def test_add_transaction_invalid_date(cli_runner, temp_db):
    """Test adding a transaction with an invalid date fails."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "add", "--type", "expense", "--date", "someday",
            "--amount", "20", "--description", "Lunch",
        ],
    )

    assert result.exit_code == 1
    assert "Invalid date format" in result.output


def test_transaction_list(cli_runner, temp_db, sample_transactions):
    """Test listing transactions with totals that skip transfers."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "transaction", "list", "--start-date", "2024-01-01", "--end-date", "2024-01-31",
        ],
    )

    assert result.exit_code == 0
    assert "Found 5 transaction(s)" in result.output
    assert "Invoice 1001" in result.output
    assert "(transfer)" in result.output
    assert "Income: $5,000.00" in result.output
    assert "Expenses: $2,345.10" in result.output


def test_transaction_list_uncategorized_verbose(cli_runner, temp_db, sample_transactions):
    """Test the verbose uncategorized listing shows flags."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "transaction", "list", "--uncategorized", "-v"],
    )

    assert result.exit_code == 0
    assert "Found 2 transaction(s)" in result.output
    assert "Category: Uncategorized" in result.output
    assert "Flags: internal transfer" in result.output
    assert "Flags: needs review" in result.output


def test_transaction_list_empty(cli_runner, temp_db):
    """Test listing when there are no transactions."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "transaction", "list"])

    assert result.exit_code == 0
    assert "No transactions found" in result.output


def test_transaction_categorize(cli_runner, temp_db, sample_transactions):
    """Test categorizing a transaction from the command line."""
    txn_id = sample_transactions["Unknown charge"]
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "transaction", "categorize", str(txn_id), "Office Supplies"],
    )

    assert result.exit_code == 0
    assert f"Categorized transaction {txn_id} as 'Office Supplies'" in result.output

    db = create_sqlite_database(database_path=temp_db.database_path)
    try:
        assert db.get_transaction(txn_id).category_name == "Office Supplies"
    finally:
        db.disconnect()


def test_transaction_categorize_missing(cli_runner, temp_db):
    """Test categorizing an unknown transaction fails."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "categorize", "999", "Sales"]
    )

    assert result.exit_code == 1
    assert "Transaction 999 not found" in result.output


def test_transaction_flag(cli_runner, temp_db, sample_transactions):
    """Test flagging a transaction as an internal transfer."""
    txn_id = sample_transactions["Office rent"]
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "transaction", "flag", str(txn_id), "--transfer", "--status", "pending"],
    )

    assert result.exit_code == 0
    assert f"Updated transaction {txn_id}" in result.output

    db = create_sqlite_database(database_path=temp_db.database_path)
    try:
        txn = db.get_transaction(txn_id)
    finally:
        db.disconnect()
    assert txn.is_internal_transfer is True
    assert txn.status == TransactionStatus.PENDING
    assert txn.tax_deductible is False


def test_transaction_flag_requires_option(cli_runner, temp_db, sample_transactions):
    """Test flag with no options fails."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "flag", str(sample_transactions["Adobe"])]
    )

    assert result.exit_code == 1
    assert "Nothing to update" in result.output


def test_transaction_delete(cli_runner, temp_db, sample_transactions):
    """Test deleting a transaction after confirming."""
    txn_id = sample_transactions["Adobe"]
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "transaction", "delete", str(txn_id)], input="y\n"
    )

    assert result.exit_code == 0
    assert f"Deleted transaction {txn_id}" in result.output


def test_transaction_stats(cli_runner, temp_db, sample_transactions):
    """Test headline stats for January."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "transaction", "stats", "--start-date", "2024-01-01", "--end-date", "2024-01-31",
        ],
    )

    assert result.exit_code == 0
    assert "$5,000.00" in result.output
    assert "$2,345.10" in result.output
    assert "$2,654.90" in result.output
