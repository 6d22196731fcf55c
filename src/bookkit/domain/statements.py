"""Financial statement derivation.

Every builder here is a pure, single-pass transform over an in-memory
snapshot of transactions and bank accounts. Inputs are never mutated and the
same inputs always produce equal statements.

Sign conventions: transaction amounts are non-negative and ``type`` decides
direction. Internal transfers never contribute to any statement.
"""

import hashlib
import json
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Any, Iterable, Sequence

from bookkit.domain.entities import (
    BalanceSheet,
    BankAccount,
    CashFlowActivity,
    CashFlowStatement,
    LineItem,
    Period,
    ProfitAndLoss,
    QuarterlyEstimate,
    StatementSection,
    TaxSummary,
    Transaction,
    TransactionStats,
    TransactionStatus,
    TransactionType,
)
from bookkit.domain.period import quarter_of_month

ZERO = Decimal("0")
HUNDRED = Decimal("100")
CENT = Decimal("0.01")
DEFAULT_TAX_RATE = Decimal("25")


def _percentage(amount: Decimal, total: Decimal) -> Decimal:
    if total == 0:
        return ZERO
    return amount / total * HUNDRED


def _reportable(transactions: Iterable[Transaction], period: Period) -> list[Transaction]:
    """Transactions inside the period, internal transfers removed."""
    return [
        txn
        for txn in transactions
        if period.contains(txn.date) and not txn.is_internal_transfer
    ]


def _total(amounts: Iterable[Decimal]) -> Decimal:
    return sum(amounts, ZERO)


def _cents(amount: Decimal) -> Decimal:
    """Round a derived tax figure to cents."""
    return amount.quantize(CENT)


def _totals_by_category(transactions: Iterable[Transaction]) -> dict[str, Decimal]:
    # dict keeps first-occurrence order
    totals: dict[str, Decimal] = {}
    for txn in transactions:
        totals[txn.category_name] = totals.get(txn.category_name, ZERO) + txn.amount
    return totals


def _breakdown(totals: dict[str, Decimal]) -> StatementSection:
    total = _total(totals.values())
    return StatementSection(
        total=total,
        items=tuple(
            LineItem(name=name, amount=amount, percentage=_percentage(amount, total))
            for name, amount in totals.items()
        ),
    )


def _cash_on_hand(accounts: Iterable[BankAccount]) -> Decimal:
    return _total(account.current_balance for account in accounts if account.is_active)


def _accounts_receivable(transactions: Iterable[Transaction]) -> Decimal:
    return _total(
        txn.amount
        for txn in transactions
        if txn.type == TransactionType.INCOME and txn.status == TransactionStatus.PENDING
    )


def build_profit_and_loss(
    transactions: Sequence[Transaction], period: Period
) -> ProfitAndLoss:
    """Aggregate revenue and expenses by category for a period.

    Args:
        transactions: Transaction snapshot; entries outside the period are ignored
        period: Reporting period

    Returns:
        ProfitAndLoss statement
    """
    included = _reportable(transactions, period)
    revenue = _breakdown(
        _totals_by_category(t for t in included if t.type == TransactionType.INCOME)
    )
    expenses = _breakdown(
        _totals_by_category(t for t in included if t.type == TransactionType.EXPENSE)
    )

    net_profit = revenue.total - expenses.total
    return ProfitAndLoss(
        period=period,
        revenue=revenue,
        expenses=expenses,
        # No cost-of-goods ledger, so gross and net profit coincide.
        gross_profit=net_profit,
        net_profit=net_profit,
        profit_margin=_percentage(net_profit, revenue.total),
    )


def build_balance_sheet(
    transactions: Sequence[Transaction],
    accounts: Sequence[BankAccount],
    period: Period,
) -> BalanceSheet:
    """Assemble a balance sheet from bank balances and pending income.

    Owner's capital is set to total assets and retained earnings to the
    period's net profit. Fixed assets and liabilities have no ledger and are
    reported as zero.
    """
    included = _reportable(transactions, period)
    cash = _cash_on_hand(accounts)
    receivable = _accounts_receivable(included)
    net_profit = build_profit_and_loss(included, period).net_profit

    current_assets = StatementSection(
        total=cash + receivable,
        items=(
            LineItem(name="Cash", amount=cash),
            LineItem(name="Accounts Receivable", amount=receivable),
        ),
    )
    fixed_assets = StatementSection(total=ZERO)
    total_assets = current_assets.total + fixed_assets.total

    equity = StatementSection(
        total=total_assets + net_profit,
        items=(
            LineItem(name="Owner's Capital", amount=total_assets),
            LineItem(name="Retained Earnings", amount=net_profit),
        ),
    )

    return BalanceSheet(
        period=period,
        current_assets=current_assets,
        fixed_assets=fixed_assets,
        current_liabilities=StatementSection(total=ZERO),
        long_term_liabilities=StatementSection(total=ZERO),
        equity=equity,
    )


def _activity_section(
    transactions: Iterable[Transaction],
    activity: CashFlowActivity,
    inflow_label: str,
    outflow_label: str,
    empty_label: str,
) -> StatementSection:
    totals: dict[str, Decimal] = {}
    for txn in transactions:
        if txn.category is None or txn.category.cash_flow_activity != activity:
            continue
        if txn.type == TransactionType.INCOME:
            name = f"{inflow_label} {txn.category.name}"
            signed = txn.amount
        else:
            name = f"{outflow_label} {txn.category.name}"
            signed = ZERO - txn.amount
        totals[name] = totals.get(name, ZERO) + signed

    if not totals:
        return StatementSection(total=ZERO, items=(LineItem(name=empty_label, amount=ZERO),))

    return StatementSection(
        total=_total(totals.values()),
        items=tuple(LineItem(name=name, amount=amount) for name, amount in totals.items()),
    )


def build_cash_flow_statement(
    transactions: Sequence[Transaction],
    accounts: Sequence[BankAccount],
    period: Period,
) -> CashFlowStatement:
    """Build an indirect-method cash flow statement.

    Ending cash is the current balance across active bank accounts and
    beginning cash is back-solved from it, so
    ``beginning_cash + net_change == ending_cash`` always holds.
    """
    included = _reportable(transactions, period)
    net_profit = build_profit_and_loss(included, period).net_profit
    receivable = _accounts_receivable(included)

    operating_items = (
        LineItem(name="Net Income", amount=net_profit),
        LineItem(name="Depreciation & Amortization", amount=ZERO),
        LineItem(name="Increase in Accounts Receivable", amount=ZERO - receivable),
        LineItem(name="Increase in Accounts Payable", amount=ZERO),
        LineItem(name="Change in Inventory", amount=ZERO),
    )
    operating = StatementSection(
        total=_total(item.amount for item in operating_items), items=operating_items
    )
    investing = _activity_section(
        included,
        CashFlowActivity.INVESTING,
        inflow_label="Sale of",
        outflow_label="Purchase of",
        empty_label="No investing activities",
    )
    financing = _activity_section(
        included,
        CashFlowActivity.FINANCING,
        inflow_label="Proceeds from",
        outflow_label="Payment of",
        empty_label="No financing activities",
    )

    net_change = operating.total + investing.total + financing.total
    ending_cash = _cash_on_hand(accounts)
    return CashFlowStatement(
        period=period,
        operating=operating,
        investing=investing,
        financing=financing,
        net_change=net_change,
        beginning_cash=ending_cash - net_change,
        ending_cash=ending_cash,
    )


def build_tax_summary(
    transactions: Sequence[Transaction],
    period: Period,
    tax_rate: Decimal | int | str = DEFAULT_TAX_RATE,
) -> TaxSummary:
    """Compute deductions, quarterly estimated tax and likely tax forms.

    Args:
        transactions: Transaction snapshot
        period: Reporting period
        tax_rate: Flat tax rate as a percentage (25 means 25%)

    Returns:
        TaxSummary for the period
    """
    rate = Decimal(str(tax_rate))
    included = _reportable(transactions, period)

    total_income = _total(t.amount for t in included if t.type == TransactionType.INCOME)
    total_expenses = _total(t.amount for t in included if t.type == TransactionType.EXPENSE)
    deductible = [
        t for t in included if t.type == TransactionType.EXPENSE and t.tax_deductible
    ]
    total_deductible = _total(t.amount for t in deductible)

    by_category = sorted(
        _totals_by_category(deductible).items(), key=lambda item: item[1], reverse=True
    )
    categorized_deductions = tuple(
        LineItem(name=name, amount=amount, percentage=_percentage(amount, total_deductible))
        for name, amount in by_category
    )

    quarters: dict[tuple[int, int], dict[str, Decimal]] = {}
    for txn in included:
        key = (txn.date.year, quarter_of_month(txn.date.month))
        bucket = quarters.setdefault(key, {"income": ZERO, "deductible": ZERO})
        if txn.type == TransactionType.INCOME:
            bucket["income"] += txn.amount
        elif txn.tax_deductible:
            bucket["deductible"] += txn.amount

    quarterly_estimates = tuple(
        QuarterlyEstimate(
            quarter=f"Q{quarter} {year}",
            income=bucket["income"],
            deductible=bucket["deductible"],
            estimated_tax=_cents(
                (bucket["income"] - bucket["deductible"]) * rate / HUNDRED / 4
            ),
        )
        for (year, quarter), bucket in sorted(quarters.items())
    )

    forms = ["1040"]
    if total_income > 0:
        forms.append("Schedule C")
    if total_deductible > 0:
        forms.append("Schedule A")
    if any(estimate.estimated_tax > 0 for estimate in quarterly_estimates):
        forms.append("1040-ES")

    return TaxSummary(
        period=period,
        tax_rate=rate,
        total_income=total_income,
        total_expenses=total_expenses,
        total_deductible=total_deductible,
        net_taxable_income=total_income - total_deductible,
        estimated_tax_savings=_cents(total_deductible * rate / HUNDRED),
        categorized_deductions=categorized_deductions,
        quarterly_estimates=quarterly_estimates,
        forms=tuple(forms),
    )


def summarize_transactions(transactions: Sequence[Transaction]) -> TransactionStats:
    """Headline income, expense and margin figures for a transaction list."""
    counted = [txn for txn in transactions if not txn.is_internal_transfer]
    total_income = _total(t.amount for t in counted if t.type == TransactionType.INCOME)
    total_expenses = _total(t.amount for t in counted if t.type == TransactionType.EXPENSE)
    net_profit = total_income - total_expenses
    return TransactionStats(
        total_income=total_income,
        total_expenses=total_expenses,
        net_profit=net_profit,
        profit_margin=_percentage(net_profit, total_income),
        transaction_count=len(transactions),
        needs_review_count=sum(1 for txn in transactions if txn.needs_review),
    )


def _jsonable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {key: _jsonable(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(item) for item in value]
    return value


def statement_to_dict(statement: Any) -> dict[str, Any]:
    """Convert a statement dataclass into JSON-compatible primitives.

    Decimals become strings so that no precision is lost.
    """
    if not is_dataclass(statement):
        raise TypeError(f"Expected a statement dataclass, got {type(statement).__name__}")
    return _jsonable(asdict(statement))


def snapshot_digest(
    transactions: Sequence[Transaction],
    accounts: Sequence[BankAccount] = (),
    tax_rate: Decimal | int | str | None = None,
) -> str:
    """SHA-256 digest of the inputs that feed statement derivation.

    Only fields the builders read are included, ordered by ID, so the digest
    changes exactly when a regenerated statement could differ. Tax summaries
    pass the rate they were computed with.
    """
    rate = None if tax_rate is None else str(Decimal(str(tax_rate)).quantize(CENT))
    payload = {
        "transactions": [
            [
                txn.id,
                txn.date.isoformat(),
                txn.type.value,
                str(txn.amount.quantize(CENT)),
                txn.category_name,
                txn.category.cash_flow_activity.value if txn.category else None,
                txn.status.value,
                txn.tax_deductible,
                txn.is_internal_transfer,
            ]
            for txn in sorted(transactions, key=lambda t: t.id)
        ],
        "accounts": [
            [account.id, str(account.current_balance.quantize(CENT)), account.is_active]
            for account in sorted(accounts, key=lambda a: a.id)
        ],
        "tax_rate": rate,
    }
    encoded = json.dumps(payload, sort_keys=True, separators=(",", ":")).encode("utf-8")
    return hashlib.sha256(encoded).hexdigest()
