"""SQLAlchemy models for bookkit database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    JSON,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class BankAccount(Base):
    """Bank account model."""

    __tablename__ = "bank_accounts"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    bank_name = Column(String, nullable=True)
    account_type = Column(String, nullable=True)
    current_balance = Column(Numeric(12, 2), default=0, nullable=False)
    last_synced_at = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="bank_account")


class Category(Base):
    """Category model."""

    __tablename__ = "categories"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    type = Column(String, nullable=False)
    cash_flow_activity = Column(String, default="operating", nullable=False)
    color = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transactions = relationship("Transaction", back_populates="category")


class Transaction(Base):
    """Transaction model."""

    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True)
    description = Column(String, nullable=False)
    vendor_name = Column(String, nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    type = Column(String, nullable=False)
    transaction_date = Column(Date, nullable=False, index=True)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=True)
    bank_account_id = Column(Integer, ForeignKey("bank_accounts.id"), nullable=True)
    status = Column(String, default="posted", nullable=False)
    tax_deductible = Column(Boolean, default=False, nullable=False)
    is_internal_transfer = Column(Boolean, default=False, nullable=False)
    needs_review = Column(Boolean, default=False, nullable=False)
    ai_confidence = Column(Numeric(4, 3), nullable=True)
    notes = Column(String, nullable=True)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    category = relationship("Category", back_populates="transactions", lazy="joined")
    bank_account = relationship("BankAccount", back_populates="transactions")


class TransactionRule(Base):
    """Categorization rule model."""

    __tablename__ = "transaction_rules"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    condition_field = Column(String, default="description", nullable=False)
    condition_operator = Column(String, default="contains", nullable=False)
    condition_value = Column(String, nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    action_type = Column(String, nullable=False)
    priority = Column(Integer, default=100, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    category = relationship("Category", lazy="joined")


class TaxSetting(Base):
    """Per-year tax settings model."""

    __tablename__ = "tax_settings"

    id = Column(Integer, primary_key=True)
    tax_year = Column(Integer, unique=True, nullable=False)
    tax_rate = Column(Numeric(5, 2), nullable=False)
    updated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)


class FinancialReport(Base):
    """Saved financial statement model."""

    __tablename__ = "financial_reports"

    id = Column(Integer, primary_key=True)
    report_type = Column(String, nullable=False)
    period_start = Column(Date, nullable=False)
    period_end = Column(Date, nullable=False)
    generated_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    data = Column(JSON, nullable=False)
    transactions_digest = Column(String(64), nullable=False)
    notes = Column(String, nullable=True)
    # Set only when the report was generated with an explicit rate
    tax_rate_override = Column(Numeric(5, 2), nullable=True)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
