"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from bookkit.domain.entities import (
    BankAccount,
    Category,
    Transaction,
    TaxSetting,
    SavedReport,
    TransactionRule,
)


class Database(ABC):
    """Abstract database interface for bookkit."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Bank account operations
    @abstractmethod
    def create_bank_account(
        self,
        name: str,
        bank_name: Optional[str] = None,
        account_type: Optional[str] = None,
        current_balance: Decimal = Decimal("0"),
    ) -> int:
        """Create a new bank account. Returns account ID."""
        pass

    @abstractmethod
    def get_bank_account(self, account_id: int) -> Optional[BankAccount]:
        """Get bank account by ID."""
        pass

    @abstractmethod
    def get_bank_account_by_name(self, name: str) -> Optional[BankAccount]:
        """Get bank account by name."""
        pass

    @abstractmethod
    def list_bank_accounts(self, active_only: bool = False) -> list[BankAccount]:
        """List bank accounts, optionally only active ones."""
        pass

    @abstractmethod
    def update_bank_account_balance(
        self, account_id: int, balance: Decimal, synced_at: datetime
    ) -> None:
        """Record a new balance snapshot for a bank account."""
        pass

    @abstractmethod
    def set_bank_account_active(self, account_id: int, is_active: bool) -> None:
        """Activate or deactivate a bank account."""
        pass

    @abstractmethod
    def delete_bank_account(self, account_id: int) -> None:
        """Delete a bank account."""
        pass

    @abstractmethod
    def get_bank_account_transaction_count(self, account_id: int) -> int:
        """Get count of transactions linked to a bank account."""
        pass

    # Category operations
    @abstractmethod
    def create_category(
        self,
        name: str,
        type: str,
        cash_flow_activity: str,
        color: Optional[str] = None,
    ) -> int:
        """Create a category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        pass

    @abstractmethod
    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name."""
        pass

    @abstractmethod
    def list_categories(self, type: Optional[str] = None) -> list[Category]:
        """List categories, optionally filtered by type."""
        pass

    # Transaction operations
    @abstractmethod
    def create_transaction(
        self,
        description: str,
        amount: Decimal,
        type: str,
        transaction_date: date,
        category_id: Optional[int] = None,
        bank_account_id: Optional[int] = None,
        vendor_name: Optional[str] = None,
        status: str = "posted",
        tax_deductible: bool = False,
        is_internal_transfer: bool = False,
        needs_review: bool = False,
        ai_confidence: Optional[Decimal] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def update_transaction_category(
        self, transaction_id: int, category_id: Optional[int]
    ) -> None:
        """Update transaction category."""
        pass

    @abstractmethod
    def update_transaction_type(self, transaction_id: int, type: str) -> None:
        """Update transaction type ("income" or "expense")."""
        pass

    @abstractmethod
    def update_transaction_flags(
        self,
        transaction_id: int,
        tax_deductible: Optional[bool] = None,
        is_internal_transfer: Optional[bool] = None,
        needs_review: Optional[bool] = None,
        status: Optional[str] = None,
    ) -> None:
        """Update transaction flags; None leaves a flag unchanged."""
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_id: Optional[int] = None,
        type: Optional[str] = None,
        needs_review: Optional[bool] = None,
        uncategorized: bool = False,
    ) -> list[Transaction]:
        """List transactions with optional filters.

        Args:
            start_date: Optional start date filter (inclusive)
            end_date: Optional end date filter (inclusive)
            category_id: Optional category ID filter
            type: Optional transaction type filter ("income" or "expense")
            needs_review: Optional review flag filter
            uncategorized: If True, only return transactions without a category
        """
        pass

    # Categorization rule operations
    @abstractmethod
    def create_rule(
        self,
        name: str,
        condition_field: str,
        condition_operator: str,
        condition_value: str,
        category_id: int,
        action_type: str,
        priority: int = 100,
    ) -> int:
        """Create a categorization rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int) -> Optional[TransactionRule]:
        """Get categorization rule by ID."""
        pass

    @abstractmethod
    def get_rule_by_name(self, name: str) -> Optional[TransactionRule]:
        """Get categorization rule by name."""
        pass

    @abstractmethod
    def list_rules(self, active_only: bool = False) -> list[TransactionRule]:
        """List rules, highest priority first, ties in creation order."""
        pass

    @abstractmethod
    def set_rule_active(self, rule_id: int, is_active: bool) -> None:
        """Enable or disable a rule."""
        pass

    @abstractmethod
    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule."""
        pass

    # Tax settings operations
    @abstractmethod
    def get_tax_setting(self, year: int) -> Optional[TaxSetting]:
        """Get tax settings for a year."""
        pass

    @abstractmethod
    def set_tax_rate(self, year: int, tax_rate: Decimal) -> None:
        """Create or update the tax rate for a year."""
        pass

    # Saved report operations
    @abstractmethod
    def save_report(
        self,
        report_type: str,
        period_start: date,
        period_end: date,
        data: dict[str, Any],
        transactions_digest: str,
        notes: Optional[str] = None,
        tax_rate_override: Optional[Decimal] = None,
    ) -> int:
        """Persist a generated statement. Returns report ID."""
        pass

    @abstractmethod
    def get_report(self, report_id: int) -> Optional[SavedReport]:
        """Get saved report by ID."""
        pass

    @abstractmethod
    def list_reports(self, report_type: Optional[str] = None) -> list[SavedReport]:
        """List saved reports, newest first."""
        pass
