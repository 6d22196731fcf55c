"""Bank account domain service."""

from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional

from bookkit.config.logging import get_logger
from bookkit.database.base import Database
from bookkit.domain.entities import BankAccount
from bookkit.domain.errors import (
    ConflictError,
    DependencyError,
    NotFoundError,
    bank_account_delete_blocked,
    bank_account_name_taken,
    bank_account_not_found,
)

logger = get_logger(__name__)


class BankAccountService:
    """Service for managing bank accounts and their balance snapshots."""

    def __init__(self, db: Database):
        """Initialize bank account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        name: str,
        bank_name: Optional[str] = None,
        account_type: Optional[str] = None,
        current_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new bank account.

        Args:
            name: Account name
            bank_name: Optional bank name
            account_type: Optional account type (e.g., "checking", "savings")
            current_balance: Opening balance snapshot

        Returns:
            Account ID

        Raises:
            ConflictError: If account name already exists
        """
        if self.db.get_bank_account_by_name(name) is not None:
            raise ConflictError(bank_account_name_taken(name))

        account_id = self.db.create_bank_account(
            name=name,
            bank_name=bank_name,
            account_type=account_type,
            current_balance=current_balance,
        )
        logger.info("bank_account_created", account_id=account_id, name=name)
        return account_id

    def get_account(self, account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID."""
        return self.db.get_bank_account(account_id)

    def require_account(self, account_id: int) -> BankAccount:
        """Get bank account by ID or raise NotFoundError."""
        account = self.db.get_bank_account(account_id)
        if account is None:
            raise NotFoundError(bank_account_not_found(account_id))
        return account

    def list_accounts(self, active_only: bool = False) -> list[BankAccount]:
        """List bank accounts.

        Args:
            active_only: If True, skip deactivated accounts

        Returns:
            List of bank account entities
        """
        return self.db.list_bank_accounts(active_only=active_only)

    def update_balance(
        self,
        account_id: int,
        balance: Decimal,
        synced_at: Optional[datetime] = None,
    ) -> None:
        """Record a new current balance for an account.

        Args:
            account_id: Account ID
            balance: New balance snapshot
            synced_at: When the balance was observed (defaults to now)

        Raises:
            NotFoundError: If account doesn't exist
        """
        self.require_account(account_id)
        synced_at = synced_at or datetime.now(UTC)
        self.db.update_bank_account_balance(account_id, balance, synced_at)
        logger.info(
            "bank_account_balance_updated",
            account_id=account_id,
            balance=str(balance),
        )

    def deactivate_account(self, account_id: int) -> None:
        """Deactivate an account so it no longer counts towards cash."""
        self.require_account(account_id)
        self.db.set_bank_account_active(account_id, False)
        logger.info("bank_account_deactivated", account_id=account_id)

    def delete_account(self, account_id: int) -> None:
        """Delete a bank account.

        Raises:
            NotFoundError: If account doesn't exist
            DependencyError: If transactions still reference the account
        """
        self.require_account(account_id)

        transaction_count = self.db.get_bank_account_transaction_count(account_id)
        if transaction_count > 0:
            raise DependencyError(
                bank_account_delete_blocked(account_id, transaction_count)
            )

        self.db.delete_bank_account(account_id)
        logger.info("bank_account_deleted", account_id=account_id)
