"""Tax settings domain service."""

from decimal import Decimal

from bookkit.config.logging import get_logger
from bookkit.database.base import Database
from bookkit.domain.errors import ValidationError
from bookkit.domain.statements import DEFAULT_TAX_RATE

logger = get_logger(__name__)


class TaxSettingsService:
    """Service for the user-adjustable flat tax rate, stored per tax year."""

    def __init__(self, db: Database):
        """Initialize tax settings service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_tax_rate(self, year: int) -> Decimal:
        """Get the tax rate percentage for a year (25 when never set)."""
        setting = self.db.get_tax_setting(year)
        if setting is None:
            return DEFAULT_TAX_RATE
        return setting.tax_rate

    def set_tax_rate(self, year: int, tax_rate: Decimal) -> None:
        """Set the tax rate percentage for a year.

        Raises:
            ValidationError: If rate is outside 0-100
        """
        if not Decimal("0") <= tax_rate <= Decimal("100"):
            raise ValidationError(f"Tax rate must be between 0 and 100, got {tax_rate}")

        self.db.set_tax_rate(year, tax_rate)
        logger.info("tax_rate_updated", year=year, tax_rate=str(tax_rate))
