"""Financial report domain service."""

from datetime import date
from decimal import Decimal
from typing import Optional, Union

from bookkit.config.logging import get_logger
from bookkit.database.base import Database
from bookkit.domain.entities import (
    BalanceSheet,
    BankAccount,
    CashFlowStatement,
    Period,
    ProfitAndLoss,
    ReportType,
    ReportVerification,
    SavedReport,
    TaxSummary,
    Transaction,
)
from bookkit.domain.errors import NotFoundError, ValidationError, report_not_found
from bookkit.domain.period import resolve_period
from bookkit.domain.statements import (
    build_balance_sheet,
    build_cash_flow_statement,
    build_profit_and_loss,
    build_tax_summary,
    snapshot_digest,
    statement_to_dict,
)
from bookkit.domain.tax import TaxSettingsService

logger = get_logger(__name__)

Statement = Union[ProfitAndLoss, BalanceSheet, CashFlowStatement, TaxSummary]

# Statements that read bank balances in addition to transactions
_USES_ACCOUNTS = (ReportType.BALANCE_SHEET, ReportType.CASH_FLOW)


class ReportService:
    """Service that loads a data snapshot and derives financial statements.

    Every call re-reads the snapshot and recomputes from scratch; nothing is
    cached between calls.
    """

    def __init__(self, db: Database):
        """Initialize report service.

        Args:
            db: Database instance
        """
        self.db = db
        self.tax_settings = TaxSettingsService(db)

    def get_snapshot(self, period: Period) -> tuple[list[Transaction], list[BankAccount]]:
        """Load the transactions in a period and all bank accounts."""
        transactions = self.db.list_transactions(
            start_date=period.start_date, end_date=period.end_date
        )
        accounts = self.db.list_bank_accounts()
        return transactions, accounts

    def profit_and_loss(self, period: Period) -> ProfitAndLoss:
        """Build the profit and loss statement for a period."""
        return self.generate(ReportType.PROFIT_AND_LOSS, period)

    def balance_sheet(self, period: Period) -> BalanceSheet:
        """Build the balance sheet for a period."""
        return self.generate(ReportType.BALANCE_SHEET, period)

    def cash_flow(self, period: Period) -> CashFlowStatement:
        """Build the cash flow statement for a period."""
        return self.generate(ReportType.CASH_FLOW, period)

    def tax_summary(self, period: Period, tax_rate: Optional[Decimal] = None) -> TaxSummary:
        """Build the tax summary for a period.

        Args:
            period: Reporting period
            tax_rate: Rate percentage; defaults to the stored rate for the
                period's year
        """
        return self.generate(ReportType.TAX_SUMMARY, period, tax_rate=tax_rate)

    def generate(
        self,
        report_type: ReportType | str,
        period: Period,
        tax_rate: Optional[Decimal] = None,
    ) -> Statement:
        """Build any statement type for a period."""
        report_type = self._validate_report_type(report_type)
        transactions, accounts = self.get_snapshot(period)
        statement = self._build(report_type, period, transactions, accounts, tax_rate)
        logger.info(
            "report_generated",
            report_type=report_type.value,
            period=period.label,
            transaction_count=len(transactions),
        )
        return statement

    def generate_for(
        self,
        report_type: ReportType | str,
        granularity: str,
        year: int,
        month: Optional[int] = None,
        tax_rate: Optional[Decimal] = None,
    ) -> Statement:
        """Resolve a period selection and build the statement for it."""
        period = resolve_period(granularity, year, month)
        return self.generate(report_type, period, tax_rate=tax_rate)

    def save_report(
        self,
        report_type: ReportType | str,
        period: Period,
        tax_rate: Optional[Decimal] = None,
        notes: Optional[str] = None,
    ) -> tuple[int, Statement]:
        """Build a statement and persist it with a digest of its inputs.

        Returns:
            Tuple of (report ID, statement)
        """
        report_type = self._validate_report_type(report_type)
        transactions, accounts = self.get_snapshot(period)
        statement = self._build(report_type, period, transactions, accounts, tax_rate)
        effective_rate = self._effective_tax_rate(report_type, period.start_date.year, tax_rate)
        digest = self._digest(report_type, transactions, accounts, effective_rate)

        report_id = self.db.save_report(
            report_type=report_type.value,
            period_start=period.start_date,
            period_end=period.end_date,
            data=statement_to_dict(statement),
            transactions_digest=digest,
            notes=notes,
            tax_rate_override=tax_rate if report_type == ReportType.TAX_SUMMARY else None,
        )
        logger.info(
            "report_saved",
            report_id=report_id,
            report_type=report_type.value,
            period=period.label,
            digest=digest,
        )
        return report_id, statement

    def get_report(self, report_id: int) -> SavedReport:
        """Get a saved report or raise NotFoundError."""
        report = self.db.get_report(report_id)
        if report is None:
            raise NotFoundError(report_not_found(report_id))
        return report

    def list_reports(self, report_type: Optional[ReportType | str] = None) -> list[SavedReport]:
        """List saved reports, newest first."""
        type_value = None
        if report_type is not None:
            type_value = self._validate_report_type(report_type).value
        return self.db.list_reports(report_type=type_value)

    def verify_report(self, report_id: int) -> ReportVerification:
        """Check whether a saved report still matches the current data.

        Tax summaries saved without an explicit rate are compared against the
        rate currently stored for their year, so changing that rate makes them
        out of date. Reports saved with an explicit rate keep using it.

        Raises:
            NotFoundError: If report doesn't exist
        """
        report = self.get_report(report_id)
        transactions = self.db.list_transactions(
            start_date=report.period_start, end_date=report.period_end
        )
        accounts = self.db.list_bank_accounts()
        tax_rate = self._effective_tax_rate(
            report.report_type, report.period_start.year, report.tax_rate_override
        )
        verification = ReportVerification(
            report=report,
            current_digest=self._digest(report.report_type, transactions, accounts, tax_rate),
        )
        if not verification.is_current:
            logger.warning(
                "report_data_changed",
                report_id=report_id,
                saved_digest=report.transactions_digest,
                current_digest=verification.current_digest,
            )
        return verification

    def _build(
        self,
        report_type: ReportType,
        period: Period,
        transactions: list[Transaction],
        accounts: list[BankAccount],
        tax_rate: Optional[Decimal],
    ) -> Statement:
        if report_type == ReportType.PROFIT_AND_LOSS:
            return build_profit_and_loss(transactions, period)
        if report_type == ReportType.BALANCE_SHEET:
            return build_balance_sheet(transactions, accounts, period)
        if report_type == ReportType.CASH_FLOW:
            if period.end_date < date.today():
                logger.info(
                    "cash_flow_ending_cash_not_period_end",
                    period=period.label,
                    period_end=period.end_date.isoformat(),
                    detail="ending cash uses current balances, not balances at period end",
                )
            return build_cash_flow_statement(transactions, accounts, period)

        rate = self._effective_tax_rate(report_type, period.start_date.year, tax_rate)
        return build_tax_summary(transactions, period, rate)

    def _effective_tax_rate(
        self, report_type: ReportType, year: int, tax_rate: Optional[Decimal]
    ) -> Optional[Decimal]:
        """Rate a tax summary is computed with; None for other statements."""
        if report_type != ReportType.TAX_SUMMARY:
            return None
        if tax_rate is not None:
            return tax_rate
        return self.tax_settings.get_tax_rate(year)

    @staticmethod
    def _digest(
        report_type: ReportType,
        transactions: list[Transaction],
        accounts: list[BankAccount],
        tax_rate: Optional[Decimal] = None,
    ) -> str:
        if report_type in _USES_ACCOUNTS:
            return snapshot_digest(transactions, accounts)
        return snapshot_digest(transactions, tax_rate=tax_rate)

    @staticmethod
    def _validate_report_type(value: ReportType | str) -> ReportType:
        try:
            return ReportType(value)
        except ValueError:
            supported = ", ".join(t.value for t in ReportType)
            raise ValidationError(f"Unknown report type '{value}'. Supported: {supported}")
