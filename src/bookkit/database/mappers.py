"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so stored strings become enums and
numeric columns become Decimals before anything reaches the domain layer.
"""

from decimal import Decimal

from bookkit.domain import entities as domain
from bookkit.database.models import (
    BankAccount as ORMBankAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    TaxSetting as ORMTaxSetting,
    FinancialReport as ORMFinancialReport,
    TransactionRule as ORMTransactionRule,
)


def bank_account_to_domain(orm_account: ORMBankAccount) -> domain.BankAccount:
    """Convert SQLAlchemy BankAccount model to domain BankAccount entity."""
    return domain.BankAccount(
        id=orm_account.id,
        name=orm_account.name,
        bank_name=orm_account.bank_name,
        account_type=orm_account.account_type,
        current_balance=Decimal(orm_account.current_balance or 0),
        last_synced_at=orm_account.last_synced_at,
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        type=domain.TransactionType(orm_category.type),
        cash_flow_activity=domain.CashFlowActivity(orm_category.cash_flow_activity),
        color=orm_category.color,
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    category = None
    if orm_transaction.category is not None:
        category = category_to_domain(orm_transaction.category)

    ai_confidence = None
    if orm_transaction.ai_confidence is not None:
        ai_confidence = Decimal(orm_transaction.ai_confidence)

    return domain.Transaction(
        id=orm_transaction.id,
        description=orm_transaction.description,
        amount=Decimal(orm_transaction.amount),
        type=domain.TransactionType(orm_transaction.type),
        date=orm_transaction.transaction_date,
        category=category,
        vendor_name=orm_transaction.vendor_name,
        bank_account_id=orm_transaction.bank_account_id,
        status=domain.TransactionStatus(orm_transaction.status),
        tax_deductible=orm_transaction.tax_deductible,
        is_internal_transfer=orm_transaction.is_internal_transfer,
        needs_review=orm_transaction.needs_review,
        ai_confidence=ai_confidence,
        notes=orm_transaction.notes,
        created_at=orm_transaction.created_at,
    )


def tax_setting_to_domain(orm_setting: ORMTaxSetting) -> domain.TaxSetting:
    """Convert SQLAlchemy TaxSetting model to domain TaxSetting entity."""
    return domain.TaxSetting(
        year=orm_setting.tax_year,
        tax_rate=Decimal(orm_setting.tax_rate),
        updated_at=orm_setting.updated_at,
    )


def report_to_domain(orm_report: ORMFinancialReport) -> domain.SavedReport:
    """Convert SQLAlchemy FinancialReport model to domain SavedReport entity."""
    return domain.SavedReport(
        id=orm_report.id,
        report_type=domain.ReportType(orm_report.report_type),
        period_start=orm_report.period_start,
        period_end=orm_report.period_end,
        generated_at=orm_report.generated_at,
        data=dict(orm_report.data),
        transactions_digest=orm_report.transactions_digest,
        notes=orm_report.notes,
        tax_rate_override=(
            Decimal(orm_report.tax_rate_override)
            if orm_report.tax_rate_override is not None
            else None
        ),
    )


def rule_to_domain(orm_rule: ORMTransactionRule) -> domain.TransactionRule:
    """Convert SQLAlchemy TransactionRule model to domain TransactionRule entity."""
    return domain.TransactionRule(
        id=orm_rule.id,
        name=orm_rule.name,
        field=domain.RuleField(orm_rule.condition_field),
        operator=domain.RuleOperator(orm_rule.condition_operator),
        value=orm_rule.condition_value,
        category_id=orm_rule.category_id,
        category_name=orm_rule.category.name,
        type=domain.TransactionType(orm_rule.action_type),
        priority=orm_rule.priority,
        is_active=orm_rule.is_active,
        created_at=orm_rule.created_at,
    )
