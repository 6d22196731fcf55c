"""Domain model entities for bookkit.

These are pure data classes representing business concepts, independent of
database schema. Records coming out of the database layer are converted into
these frozen dataclasses by ``bookkit.database.mappers`` so that the
statement engine only ever sees closed, typed shapes.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Any, Optional


class TransactionType(str, Enum):
    """Direction of a transaction; decides its sign when aggregating."""

    INCOME = "income"
    EXPENSE = "expense"


class TransactionStatus(str, Enum):
    """Settlement status of a transaction."""

    PENDING = "pending"
    POSTED = "posted"


class CashFlowActivity(str, Enum):
    """Cash-flow statement section a category reports under."""

    OPERATING = "operating"
    INVESTING = "investing"
    FINANCING = "financing"


class Granularity(str, Enum):
    """Reporting period granularity."""

    MONTH = "month"
    QUARTER = "quarter"
    YEAR = "year"


class ReportType(str, Enum):
    """Kinds of financial statements that can be generated and saved."""

    PROFIT_AND_LOSS = "profit_and_loss"
    BALANCE_SHEET = "balance_sheet"
    CASH_FLOW = "cash_flow"
    TAX_SUMMARY = "tax_summary"


class RuleField(str, Enum):
    """Transaction field a categorization rule inspects."""

    DESCRIPTION = "description"
    VENDOR_NAME = "vendor_name"
    AMOUNT = "amount"


class RuleOperator(str, Enum):
    """Comparison a categorization rule applies to its field."""

    CONTAINS = "contains"
    EQUALS = "equals"
    GREATER_THAN = "greater_than"
    LESS_THAN = "less_than"


@dataclass(frozen=True)
class BankAccount:
    """Bank account domain entity."""

    id: int
    name: str
    bank_name: Optional[str]
    account_type: Optional[str]
    current_balance: Decimal
    last_synced_at: Optional[datetime]
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity, used as a grouping key for aggregation."""

    id: int
    name: str
    type: TransactionType
    cash_flow_activity: CashFlowActivity
    color: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity.

    ``amount`` is always non-negative; ``type`` carries the direction.
    """

    id: int
    description: str
    amount: Decimal
    type: TransactionType
    date: date
    category: Optional[Category] = None
    vendor_name: Optional[str] = None
    bank_account_id: Optional[int] = None
    status: TransactionStatus = TransactionStatus.POSTED
    tax_deductible: bool = False
    is_internal_transfer: bool = False
    needs_review: bool = False
    ai_confidence: Optional[Decimal] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def category_name(self) -> str:
        """Category display name, or "Uncategorized" when none is set."""
        return self.category.name if self.category is not None else "Uncategorized"

    @property
    def category_id(self) -> Optional[int]:
        return self.category.id if self.category is not None else None


@dataclass(frozen=True)
class Period:
    """Inclusive reporting date range."""

    granularity: Granularity
    start_date: date
    end_date: date
    label: str

    def contains(self, day: date) -> bool:
        """Return True if day falls inside the period (both ends inclusive)."""
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class TransactionRule:
    """Rule that assigns a category to matching uncategorized transactions.

    Active rules are tried from the highest ``priority`` down; the first
    match wins.
    """

    id: int
    name: str
    field: RuleField
    operator: RuleOperator
    value: str
    category_id: int
    category_name: str
    type: TransactionType
    priority: int = 100
    is_active: bool = True
    created_at: Optional[datetime] = None


@dataclass(frozen=True)
class ImportResult:
    """Outcome of a CSV import."""

    imported: int
    skipped: int
    errors: tuple[str, ...] = ()
    transaction_ids: tuple[int, ...] = ()


@dataclass(frozen=True)
class TaxSetting:
    """Per-year tax configuration."""

    year: int
    tax_rate: Decimal
    updated_at: datetime


@dataclass(frozen=True)
class SavedReport:
    """A generated statement persisted together with its input digest."""

    id: int
    report_type: ReportType
    period_start: date
    period_end: date
    generated_at: datetime
    data: dict[str, Any]
    transactions_digest: str
    notes: Optional[str] = None
    tax_rate_override: Optional[Decimal] = None


# Derived statements


@dataclass(frozen=True)
class LineItem:
    """Single named amount within a statement section."""

    name: str
    amount: Decimal
    percentage: Optional[Decimal] = None


@dataclass(frozen=True)
class StatementSection:
    """Ordered line items with their total."""

    total: Decimal
    items: tuple[LineItem, ...] = ()


@dataclass(frozen=True)
class ProfitAndLoss:
    """Profit and loss statement for a period."""

    period: Period
    revenue: StatementSection
    expenses: StatementSection
    gross_profit: Decimal
    net_profit: Decimal
    profit_margin: Decimal

    @property
    def total_revenue(self) -> Decimal:
        return self.revenue.total

    @property
    def total_expenses(self) -> Decimal:
        return self.expenses.total


@dataclass(frozen=True)
class BalanceSheet:
    """Point-in-time balance sheet snapshot."""

    period: Period
    current_assets: StatementSection
    fixed_assets: StatementSection
    current_liabilities: StatementSection
    long_term_liabilities: StatementSection
    equity: StatementSection

    @property
    def total_assets(self) -> Decimal:
        return self.current_assets.total + self.fixed_assets.total

    @property
    def total_liabilities(self) -> Decimal:
        return self.current_liabilities.total + self.long_term_liabilities.total

    @property
    def total_liabilities_and_equity(self) -> Decimal:
        return self.total_liabilities + self.equity.total


@dataclass(frozen=True)
class CashFlowStatement:
    """Indirect-method cash flow statement for a period."""

    period: Period
    operating: StatementSection
    investing: StatementSection
    financing: StatementSection
    net_change: Decimal
    beginning_cash: Decimal
    ending_cash: Decimal


@dataclass(frozen=True)
class QuarterlyEstimate:
    """Estimated tax liability for one calendar quarter."""

    quarter: str
    income: Decimal
    deductible: Decimal
    estimated_tax: Decimal


@dataclass(frozen=True)
class TaxSummary:
    """Tax deduction and estimated-tax summary for a period."""

    period: Period
    tax_rate: Decimal
    total_income: Decimal
    total_expenses: Decimal
    total_deductible: Decimal
    net_taxable_income: Decimal
    estimated_tax_savings: Decimal
    categorized_deductions: tuple[LineItem, ...] = ()
    quarterly_estimates: tuple[QuarterlyEstimate, ...] = ()
    forms: tuple[str, ...] = ()

    @property
    def low_deduction_rate(self) -> bool:
        """True when deductions cover less than 30% of expenses."""
        return self.total_deductible < self.total_expenses * Decimal("0.3")


@dataclass(frozen=True)
class TransactionStats:
    """Headline figures for a list of transactions."""

    total_income: Decimal
    total_expenses: Decimal
    net_profit: Decimal
    profit_margin: Decimal
    transaction_count: int
    needs_review_count: int


@dataclass(frozen=True)
class ReportVerification:
    """Result of comparing a saved report against current data."""

    report: SavedReport
    current_digest: str

    @property
    def is_current(self) -> bool:
        """True when the underlying data is unchanged since the report was saved."""
        return self.report.transactions_digest == self.current_digest
