"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from bankledger.domain.entities import (
    Account,
    AccountCategory,
    BankTransaction,
    Company,
    FiscalPeriod,
    JournalEntry,
    MappingRule,
    MatchType,
    StandardizedTransaction,
)


class Database(ABC):
    """Abstract database interface for bankledger.

    This is the persistence gateway of the import pipeline. Implementations
    own transactional isolation; the domain services never take locks.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Company operations
    @abstractmethod
    def create_company(self, name: str) -> int:
        """Create a new company. Returns company ID."""
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID."""
        pass

    @abstractmethod
    def get_company_by_name(self, name: str) -> Optional[Company]:
        """Get company by name."""
        pass

    @abstractmethod
    def list_companies(self) -> list[Company]:
        """List all companies."""
        pass

    # Account operations
    @abstractmethod
    def create_account(
        self, company_id: int, code: str, name: str, category: AccountCategory
    ) -> int:
        """Create a chart-of-accounts entry. Returns account ID."""
        pass

    @abstractmethod
    def get_account(self, account_id: int) -> Optional[Account]:
        """Get account by ID."""
        pass

    @abstractmethod
    def get_account_by_code(self, company_id: int, code: str) -> Optional[Account]:
        """Get a company's account by code."""
        pass

    @abstractmethod
    def list_accounts(self, company_id: int, include_inactive: bool = True) -> list[Account]:
        """List a company's accounts ordered by code."""
        pass

    @abstractmethod
    def set_account_active(self, account_id: int, is_active: bool) -> None:
        """Activate or deactivate an account."""
        pass

    # Mapping rule operations
    @abstractmethod
    def create_mapping_rule(
        self,
        company_id: int,
        pattern: str,
        debit_account_code: str,
        credit_account_code: str,
        priority: int,
        match_type: MatchType = MatchType.CONTAINS,
        description: Optional[str] = None,
    ) -> int:
        """Create a classification rule. Returns rule ID."""
        pass

    @abstractmethod
    def list_mapping_rules(self, company_id: int, active_only: bool = True) -> list[MappingRule]:
        """List a company's rules ordered by priority, then declaration order."""
        pass

    # Fiscal period operations
    @abstractmethod
    def create_fiscal_period(
        self, company_id: int, name: str, start_date: date, end_date: date
    ) -> int:
        """Create a fiscal period. Returns period ID."""
        pass

    @abstractmethod
    def get_fiscal_period(self, period_id: int) -> Optional[FiscalPeriod]:
        """Get fiscal period by ID."""
        pass

    @abstractmethod
    def get_fiscal_period_by_name(self, company_id: int, name: str) -> Optional[FiscalPeriod]:
        """Get a company's fiscal period by name."""
        pass

    @abstractmethod
    def list_fiscal_periods(self, company_id: int) -> list[FiscalPeriod]:
        """List a company's fiscal periods ordered by start date."""
        pass

    # Transaction operations
    @abstractmethod
    def save_transaction(
        self,
        company_id: int,
        fiscal_period_id: Optional[int],
        transaction: StandardizedTransaction,
    ) -> int:
        """Persist a parsed transaction. Returns transaction ID."""
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int) -> Optional[BankTransaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        company_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        unclassified_only: bool = False,
    ) -> list[BankTransaction]:
        """List a company's transactions ordered by date, then ID."""
        pass

    @abstractmethod
    def exists_fingerprint(
        self,
        company_id: int,
        txn_date: date,
        debit_amount: Decimal,
        credit_amount: Decimal,
        details: str,
        balance: Decimal,
    ) -> bool:
        """Check whether a transaction with this fingerprint already exists.

        Details are compared trimmed and case-insensitively.
        """
        pass

    @abstractmethod
    def find_by_fingerprint(
        self,
        company_id: int,
        txn_date: date,
        debit_amount: Decimal,
        credit_amount: Decimal,
        details: str,
        balance: Decimal,
    ) -> Optional[BankTransaction]:
        """Return the first transaction matching the fingerprint, if any."""
        pass

    @abstractmethod
    def list_fingerprints(
        self, company_id: int, start_date: date, end_date: date
    ) -> list[BankTransaction]:
        """List transactions dated within [start_date, end_date] for fingerprint prefetch."""
        pass

    # Journal entry operations
    @abstractmethod
    def find_journal_entry_by_transaction_id(
        self, transaction_id: int
    ) -> Optional[JournalEntry]:
        """Get the journal entry posted for a transaction, if any."""
        pass

    @abstractmethod
    def save_or_update_journal_entry(self, entry: JournalEntry) -> int:
        """Create the entry, or update the existing one for the same transaction.

        Updating keeps the header and rewrites only the account references and
        amounts of lines 1 and 2. Returns the journal entry ID.
        """
        pass
