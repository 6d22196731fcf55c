"""Category domain service."""

from typing import Optional

from bookkit.config.logging import get_logger
from bookkit.database.base import Database
from bookkit.domain.entities import CashFlowActivity, Category, TransactionType
from bookkit.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    category_name_not_found,
    category_name_taken,
)

logger = get_logger(__name__)

INVESTING_KEYWORDS = ("Equipment", "Property", "Investment")
FINANCING_KEYWORDS = ("Loan", "Capital", "Dividend")


def classify_activity(name: str) -> CashFlowActivity:
    """Guess the cash-flow activity for a category from its name.

    Only used when a category is created without an explicit activity.
    """
    if any(keyword in name for keyword in INVESTING_KEYWORDS):
        return CashFlowActivity.INVESTING
    if any(keyword in name for keyword in FINANCING_KEYWORDS):
        return CashFlowActivity.FINANCING
    return CashFlowActivity.OPERATING


class CategoryService:
    """Service for managing categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_category(
        self,
        name: str,
        type: TransactionType | str,
        cash_flow_activity: Optional[CashFlowActivity | str] = None,
        color: Optional[str] = None,
    ) -> int:
        """Create a category.

        Args:
            name: Category name (unique)
            type: "income" or "expense"
            cash_flow_activity: Cash-flow section; derived from the name if None
            color: Optional display color (e.g., "#10B981")

        Returns:
            Category ID

        Raises:
            ValidationError: If name, type or activity is invalid
            ConflictError: If a category with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Category name cannot be empty")

        try:
            type = TransactionType(type)
        except ValueError:
            raise ValidationError(
                f"Invalid category type '{type}'. Must be 'income' or 'expense'"
            )

        if cash_flow_activity is None:
            activity = classify_activity(name)
        else:
            try:
                activity = CashFlowActivity(cash_flow_activity)
            except ValueError:
                raise ValidationError(
                    f"Invalid cash flow activity '{cash_flow_activity}'. "
                    "Must be 'operating', 'investing' or 'financing'"
                )

        if self.db.get_category_by_name(name) is not None:
            raise ConflictError(category_name_taken(name))

        category_id = self.db.create_category(
            name=name,
            type=type.value,
            cash_flow_activity=activity.value,
            color=color,
        )
        logger.info(
            "category_created",
            category_id=category_id,
            name=name,
            type=type.value,
            cash_flow_activity=activity.value,
        )
        return category_id

    def get_category(self, category_id: int) -> Optional[Category]:
        """Get category by ID."""
        return self.db.get_category(category_id)

    def get_category_by_name(self, name: str) -> Optional[Category]:
        """Get category by name."""
        return self.db.get_category_by_name(name)

    def require_category_by_name(self, name: str) -> Category:
        """Get category by name or raise NotFoundError."""
        category = self.db.get_category_by_name(name)
        if category is None:
            raise NotFoundError(category_name_not_found(name))
        return category

    def list_categories(
        self, type: Optional[TransactionType | str] = None
    ) -> list[Category]:
        """List categories.

        Args:
            type: Optional "income" or "expense" filter

        Returns:
            List of category entities
        """
        type_value = TransactionType(type).value if type is not None else None
        return self.db.list_categories(type=type_value)
