"""SQLAlchemy models for bankledger database."""

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
    Index,
    UniqueConstraint,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

Base = declarative_base()


class Company(Base):
    """Company model."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    accounts = relationship("Account", back_populates="company", cascade="all, delete-orphan")
    mapping_rules = relationship(
        "MappingRule", back_populates="company", cascade="all, delete-orphan"
    )
    fiscal_periods = relationship(
        "FiscalPeriod", back_populates="company", cascade="all, delete-orphan"
    )
    transactions = relationship(
        "BankTransaction", back_populates="company", cascade="all, delete-orphan"
    )


class Account(Base):
    """Chart-of-accounts entry."""

    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    code = Column(String, nullable=False)
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "code", name="uq_company_account_code"),)

    # Relationships
    company = relationship("Company", back_populates="accounts")


class MappingRule(Base):
    """Classification rule model."""

    __tablename__ = "mapping_rules"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    pattern = Column(String, nullable=False)
    match_type = Column(String, nullable=False, default="contains")
    debit_account_code = Column(String, nullable=False)
    credit_account_code = Column(String, nullable=False)
    priority = Column(Integer, nullable=False, default=100)
    description = Column(String, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    company = relationship("Company", back_populates="mapping_rules")


class FiscalPeriod(Base):
    """Fiscal period model."""

    __tablename__ = "fiscal_periods"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    name = Column(String, nullable=False)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_closed = Column(Boolean, default=False, nullable=False)

    __table_args__ = (UniqueConstraint("company_id", "name", name="uq_company_period_name"),)

    # Relationships
    company = relationship("Company", back_populates="fiscal_periods")


class BankTransaction(Base):
    """Imported bank transaction model."""

    __tablename__ = "bank_transactions"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    fiscal_period_id = Column(Integer, ForeignKey("fiscal_periods.id"), nullable=True)
    date = Column(Date, nullable=False)
    details = Column(String, nullable=False)
    # Lower-cased, trimmed details used for duplicate fingerprints
    details_key = Column(String, nullable=False)
    debit_amount = Column(Numeric(14, 2), nullable=False, default=0)
    credit_amount = Column(Numeric(14, 2), nullable=False, default=0)
    service_fee = Column(Numeric(14, 2), nullable=False, default=0)
    balance = Column(Numeric(14, 2), nullable=False)
    source_reference = Column(String, nullable=True)
    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    __table_args__ = (Index("ix_bank_transactions_company_date", "company_id", "date"),)

    # Relationships
    company = relationship("Company", back_populates="transactions")
    journal_entry = relationship(
        "JournalEntry", back_populates="transaction", uselist=False, cascade="all, delete-orphan"
    )


class JournalEntry(Base):
    """Journal entry header model."""

    __tablename__ = "journal_entries"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    transaction_id = Column(
        Integer, ForeignKey("bank_transactions.id"), nullable=False, unique=True
    )
    entry_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    reference = Column(String, nullable=False)
    created_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    transaction = relationship("BankTransaction", back_populates="journal_entry")
    lines = relationship(
        "JournalEntryLine",
        back_populates="entry",
        cascade="all, delete-orphan",
        order_by="JournalEntryLine.line_number",
    )


class JournalEntryLine(Base):
    """Journal entry line model."""

    __tablename__ = "journal_entry_lines"

    id = Column(Integer, primary_key=True)
    journal_entry_id = Column(Integer, ForeignKey("journal_entries.id"), nullable=False)
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False)
    line_number = Column(Integer, nullable=False)
    debit_amount = Column(Numeric(14, 2), nullable=False, default=0)
    credit_amount = Column(Numeric(14, 2), nullable=False, default=0)
    description = Column(String, nullable=True)

    __table_args__ = (
        UniqueConstraint("journal_entry_id", "line_number", name="uq_entry_line_number"),
    )

    # Relationships
    entry = relationship("JournalEntry", back_populates="lines")
    account = relationship("Account")


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
