"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic so that the parsing and
classification code never sees ORM instances.
"""

from bankledger.domain import entities as domain
from bankledger.database.models import (
    Account as ORMAccount,
    BankTransaction as ORMBankTransaction,
    Company as ORMCompany,
    FiscalPeriod as ORMFiscalPeriod,
    JournalEntry as ORMJournalEntry,
    JournalEntryLine as ORMJournalEntryLine,
    MappingRule as ORMMappingRule,
)


def company_to_domain(orm_company: ORMCompany) -> domain.Company:
    """Convert SQLAlchemy Company model to domain Company entity."""
    return domain.Company(
        id=orm_company.id,
        name=orm_company.name,
        created_at=orm_company.created_at,
    )


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        company_id=orm_account.company_id,
        code=orm_account.code,
        name=orm_account.name,
        category=domain.AccountCategory(orm_account.category),
        is_active=orm_account.is_active,
        created_at=orm_account.created_at,
    )


def mapping_rule_to_domain(orm_rule: ORMMappingRule) -> domain.MappingRule:
    """Convert SQLAlchemy MappingRule model to domain MappingRule entity."""
    return domain.MappingRule(
        id=orm_rule.id,
        company_id=orm_rule.company_id,
        pattern=orm_rule.pattern,
        debit_account_code=orm_rule.debit_account_code,
        credit_account_code=orm_rule.credit_account_code,
        priority=orm_rule.priority,
        description=orm_rule.description,
        match_type=domain.MatchType(orm_rule.match_type),
        is_active=orm_rule.is_active,
    )


def fiscal_period_to_domain(orm_period: ORMFiscalPeriod) -> domain.FiscalPeriod:
    """Convert SQLAlchemy FiscalPeriod model to domain FiscalPeriod entity."""
    return domain.FiscalPeriod(
        id=orm_period.id,
        company_id=orm_period.company_id,
        name=orm_period.name,
        start_date=orm_period.start_date,
        end_date=orm_period.end_date,
        is_closed=orm_period.is_closed,
    )


def bank_transaction_to_domain(orm_transaction: ORMBankTransaction) -> domain.BankTransaction:
    """Convert SQLAlchemy BankTransaction model to domain BankTransaction entity."""
    return domain.BankTransaction(
        id=orm_transaction.id,
        company_id=orm_transaction.company_id,
        fiscal_period_id=orm_transaction.fiscal_period_id,
        date=orm_transaction.date,
        details=orm_transaction.details,
        debit_amount=orm_transaction.debit_amount,
        credit_amount=orm_transaction.credit_amount,
        service_fee=orm_transaction.service_fee,
        balance=orm_transaction.balance,
        source_reference=orm_transaction.source_reference,
        imported_at=orm_transaction.imported_at,
    )


def journal_entry_line_to_domain(orm_line: ORMJournalEntryLine) -> domain.JournalEntryLine:
    """Convert SQLAlchemy JournalEntryLine model to domain JournalEntryLine entity."""
    return domain.JournalEntryLine(
        account_code=orm_line.account.code,
        debit_amount=orm_line.debit_amount,
        credit_amount=orm_line.credit_amount,
        line_number=orm_line.line_number,
        description=orm_line.description,
        account_id=orm_line.account_id,
        id=orm_line.id,
        journal_entry_id=orm_line.journal_entry_id,
    )


def journal_entry_to_domain(orm_entry: ORMJournalEntry) -> domain.JournalEntry:
    """Convert SQLAlchemy JournalEntry model (with its lines) to a domain JournalEntry."""
    return domain.JournalEntry(
        company_id=orm_entry.company_id,
        transaction_id=orm_entry.transaction_id,
        entry_date=orm_entry.entry_date,
        description=orm_entry.description,
        reference=orm_entry.reference,
        lines=tuple(journal_entry_line_to_domain(line) for line in orm_entry.lines),
        id=orm_entry.id,
        created_at=orm_entry.created_at,
    )
