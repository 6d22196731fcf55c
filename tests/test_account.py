"""Tests for bank account service and commands."""

import pytest
from datetime import date
from decimal import Decimal
from bookkit.cli.main import cli
from bookkit.domain.errors import ConflictError, DependencyError, NotFoundError


class TestBankAccountService:
    """Tests for BankAccountService."""

    def test_create_and_get(self, account_service):
        """Test creating an account with an opening balance."""
        account_id = account_service.create_account(
            name="Savings", bank_name="Ally", account_type="savings", current_balance=Decimal("250.00")
        )

        account = account_service.require_account(account_id)
        assert account.name == "Savings"
        assert account.bank_name == "Ally"
        assert account.current_balance == Decimal("250.00")

    def test_duplicate_name(self, account_service, sample_account):
        """Test account names must be unique."""
        with pytest.raises(ConflictError, match="already exists"):
            account_service.create_account(name="Business Checking")

    def test_update_balance(self, account_service, sample_account):
        """Test a new balance snapshot replaces the old one."""
        account_service.update_balance(sample_account.id, Decimal("12345.67"))

        account = account_service.get_account(sample_account.id)
        assert account.current_balance == Decimal("12345.67")
        assert account.last_synced_at is not None

    def test_update_balance_missing(self, account_service):
        """Test updating an unknown account raises NotFoundError."""
        with pytest.raises(NotFoundError):
            account_service.update_balance(999, Decimal("1"))

    def test_deactivate(self, account_service, sample_account):
        """Test deactivated accounts are hidden from active listings."""
        account_service.deactivate_account(sample_account.id)

        assert account_service.list_accounts(active_only=True) == []
        assert account_service.get_account(sample_account.id).is_active is False

    def test_delete_blocked_by_transactions(self, account_service, transaction_service, sample_account):
        """Test accounts referenced by transactions cannot be deleted."""
        transaction_service.create_transaction(
            description="Deposit",
            amount=Decimal("10"),
            type="income",
            transaction_date=date(2024, 1, 5),
            bank_account_id=sample_account.id,
        )

        with pytest.raises(DependencyError, match="1 transaction\\."):
            account_service.delete_account(sample_account.id)

    def test_delete(self, account_service, sample_account):
        """Test deleting an unused account."""
        account_service.delete_account(sample_account.id)
        assert account_service.get_account(sample_account.id) is None


def test_account_create(cli_runner, temp_db):
    """Test creating an account from the command line."""
    result = cli_runner.invoke(
        cli,
        [
            "--db-path", temp_db.database_path,
            "account", "create", "Business Checking",
            "--bank", "Chase", "--balance", "1,500.00",
        ],
    )

    assert result.exit_code == 0
    assert "Created account 'Business Checking'" in result.output
    assert "ID:" in result.output


def test_account_create_duplicate(cli_runner, temp_db):
    """Test creating duplicate account name fails."""
    result1 = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "Checking"]
    )
    assert result1.exit_code == 0

    result2 = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "create", "Checking"]
    )

    assert result2.exit_code == 1
    assert "already exists" in result2.output.lower()


def test_account_list_empty(cli_runner, temp_db):
    """Test listing accounts when none exist."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "No accounts found" in result.output


def test_account_list_with_data(cli_runner, temp_db, sample_account):
    """Test listing accounts shows name, bank and balance."""
    result = cli_runner.invoke(cli, ["--db-path", temp_db.database_path, "account", "list"])

    assert result.exit_code == 0
    assert "Business Checking" in result.output
    assert "Test Bank" in result.output
    assert "$10,000.00" in result.output


def test_account_set_balance_by_name(cli_runner, temp_db, sample_account):
    """Test setting a balance using the account name."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "account", "set-balance", "Business Checking", "2500.50"],
    )

    assert result.exit_code == 0
    assert "$2,500.50" in result.output


def test_account_set_balance_unknown_account(cli_runner, temp_db):
    """Test setting a balance on an unknown account fails."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "set-balance", "Nope", "10"]
    )

    assert result.exit_code == 1
    assert "not found" in result.output


def test_account_delete_with_yes(cli_runner, temp_db, sample_account):
    """Test deleting an account without a confirmation prompt."""
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "account", "delete", str(sample_account.id), "--yes"]
    )

    assert result.exit_code == 0
    assert "Deleted account 'Business Checking'" in result.output


def test_account_delete_cancelled(cli_runner, temp_db, sample_account):
    """Test answering no at the prompt keeps the account."""
    result = cli_runner.invoke(
        cli,
        ["--db-path", temp_db.database_path, "account", "delete", "Business Checking"],
        input="n\n",
    )

    assert result.exit_code == 0
    assert "Deletion cancelled" in result.output
