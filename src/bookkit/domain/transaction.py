"""Transaction domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional

from bookkit.config.logging import get_logger
from bookkit.database.base import Database
from bookkit.domain.entities import (
    Transaction,
    TransactionStats,
    TransactionStatus,
    TransactionType,
)
from bookkit.domain.errors import (
    NotFoundError,
    ValidationError,
    bank_account_not_found,
    category_name_not_found,
    category_not_found,
    transaction_not_found,
)
from bookkit.domain.statements import summarize_transactions

logger = get_logger(__name__)


class TransactionService:
    """Service for managing transactions.

    Records are validated here, at the ingestion boundary, so that the
    statement builders never have to defend against malformed data.
    """

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_transaction(
        self,
        description: str,
        amount: Decimal,
        type: TransactionType | str,
        transaction_date: date,
        category_id: Optional[int] = None,
        bank_account_id: Optional[int] = None,
        vendor_name: Optional[str] = None,
        status: TransactionStatus | str = TransactionStatus.POSTED,
        tax_deductible: bool = False,
        is_internal_transfer: bool = False,
        needs_review: bool = False,
        ai_confidence: Optional[Decimal] = None,
        notes: Optional[str] = None,
    ) -> int:
        """Create a transaction.

        Args:
            description: Transaction description
            amount: Non-negative amount; ``type`` carries the direction
            type: "income" or "expense"
            transaction_date: Transaction date
            category_id: Optional category ID
            bank_account_id: Optional bank account ID
            vendor_name: Optional vendor name
            status: "pending" or "posted"
            tax_deductible: Whether the expense may reduce taxable income
            is_internal_transfer: Movement between the user's own accounts
            needs_review: Flag for manual review
            ai_confidence: Optional categorisation confidence in [0, 1]
            notes: Optional notes

        Returns:
            Transaction ID

        Raises:
            ValidationError: If any field is malformed
            NotFoundError: If category or bank account doesn't exist
        """
        type = self._validate_type(type)
        status = self._validate_status(status)

        if amount < 0:
            raise ValidationError(
                f"Amount must be non-negative, got {amount}. Use type to set direction"
            )
        if ai_confidence is not None and not Decimal("0") <= ai_confidence <= Decimal("1"):
            raise ValidationError(
                f"AI confidence must be between 0 and 1, got {ai_confidence}"
            )
        if not description or not description.strip():
            raise ValidationError("Description cannot be empty")

        if category_id is not None and self.db.get_category(category_id) is None:
            raise NotFoundError(category_not_found(category_id))
        if bank_account_id is not None and self.db.get_bank_account(bank_account_id) is None:
            raise NotFoundError(bank_account_not_found(bank_account_id))

        transaction_id = self.db.create_transaction(
            description=description.strip(),
            amount=amount,
            type=type.value,
            transaction_date=transaction_date,
            category_id=category_id,
            bank_account_id=bank_account_id,
            vendor_name=vendor_name,
            status=status.value,
            tax_deductible=tax_deductible,
            is_internal_transfer=is_internal_transfer,
            needs_review=needs_review,
            ai_confidence=ai_confidence,
            notes=notes,
        )
        logger.info(
            "transaction_created",
            transaction_id=transaction_id,
            type=type.value,
            amount=str(amount),
        )
        return transaction_id

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        """Get transaction by ID."""
        return self.db.get_transaction(transaction_id)

    def require_transaction(self, transaction_id: int) -> Transaction:
        """Get transaction by ID or raise NotFoundError."""
        txn = self.db.get_transaction(transaction_id)
        if txn is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        return txn

    def update_category(self, transaction_id: int, category_name: Optional[str]) -> None:
        """Update transaction category.

        Args:
            transaction_id: Transaction ID
            category_name: Category name, or None to clear the category

        Raises:
            NotFoundError: If transaction or category doesn't exist
        """
        self.require_transaction(transaction_id)

        category_id = None
        if category_name is not None:
            category = self.db.get_category_by_name(category_name)
            if category is None:
                raise NotFoundError(category_name_not_found(category_name))
            category_id = category.id

        self.db.update_transaction_category(transaction_id, category_id)
        logger.info(
            "transaction_categorized",
            transaction_id=transaction_id,
            category=category_name,
        )

    def update_flags(
        self,
        transaction_id: int,
        tax_deductible: Optional[bool] = None,
        is_internal_transfer: Optional[bool] = None,
        needs_review: Optional[bool] = None,
        status: Optional[TransactionStatus | str] = None,
    ) -> None:
        """Update transaction flags. Flags left as None are not changed.

        Raises:
            NotFoundError: If transaction doesn't exist
            ValidationError: If status is invalid
        """
        self.require_transaction(transaction_id)
        status_value = self._validate_status(status).value if status is not None else None

        self.db.update_transaction_flags(
            transaction_id,
            tax_deductible=tax_deductible,
            is_internal_transfer=is_internal_transfer,
            needs_review=needs_review,
            status=status_value,
        )
        logger.info(
            "transaction_flags_updated",
            transaction_id=transaction_id,
            tax_deductible=tax_deductible,
            is_internal_transfer=is_internal_transfer,
            needs_review=needs_review,
            status=status_value,
        )

    def mark_internal_transfer(self, transaction_id: int, is_transfer: bool = True) -> None:
        """Mark or unmark a transaction as an internal transfer."""
        self.update_flags(transaction_id, is_internal_transfer=is_transfer)

    def delete_transaction(self, transaction_id: int) -> None:
        """Delete a transaction.

        Raises:
            NotFoundError: If transaction doesn't exist
        """
        self.require_transaction(transaction_id)
        self.db.delete_transaction(transaction_id)
        logger.info("transaction_deleted", transaction_id=transaction_id)

    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        category_name: Optional[str] = None,
        type: Optional[TransactionType | str] = None,
        needs_review: Optional[bool] = None,
    ) -> list[Transaction]:
        """List transactions with filters.

        Args:
            start_date: Optional start date filter
            end_date: Optional end date filter
            category_name: Optional category filter (empty string for uncategorized)
            type: Optional "income" or "expense" filter
            needs_review: Optional review flag filter

        Returns:
            List of transaction entities, oldest first
        """
        category_id = None
        uncategorized = False
        if category_name is not None:
            if category_name == "":
                uncategorized = True
            else:
                category = self.db.get_category_by_name(category_name)
                if category is None:
                    return []
                category_id = category.id

        type_value = self._validate_type(type).value if type is not None else None
        return self.db.list_transactions(
            start_date=start_date,
            end_date=end_date,
            category_id=category_id,
            type=type_value,
            needs_review=needs_review,
            uncategorized=uncategorized,
        )

    def get_stats(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> TransactionStats:
        """Get headline income/expense figures for a date range."""
        transactions = self.db.list_transactions(start_date=start_date, end_date=end_date)
        return summarize_transactions(transactions)

    @staticmethod
    def _validate_type(value: TransactionType | str) -> TransactionType:
        try:
            return TransactionType(value)
        except ValueError:
            raise ValidationError(
                f"Invalid transaction type '{value}'. Must be 'income' or 'expense'"
            )

    @staticmethod
    def _validate_status(value: TransactionStatus | str) -> TransactionStatus:
        try:
            return TransactionStatus(value)
        except ValueError:
            raise ValidationError(
                f"Invalid transaction status '{value}'. Must be 'pending' or 'posted'"
            )
