"""Transaction domain service."""

from typing import Optional
from datetime import date
from bankledger.database.base import Database
from bankledger.domain.entities import (
    BankTransaction as TransactionEntity,
    JournalEntry,
)


class TransactionService:
    """Service for reading imported transactions."""

    def __init__(self, db: Database):
        """Initialize transaction service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID.

        Args:
            transaction_id: Transaction ID

        Returns:
            Transaction entity or None if not found
        """
        return self.db.get_transaction(transaction_id)

    def list_transactions(
        self,
        company_id: int,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        unclassified_only: bool = False,
    ) -> list[TransactionEntity]:
        """List a company's transactions.

        Args:
            company_id: Company ID
            start_date: Optional inclusive lower date bound
            end_date: Optional inclusive upper date bound
            unclassified_only: Only include transactions without a journal entry

        Returns:
            List of transaction entities ordered by date
        """
        return self.db.list_transactions(
            company_id,
            start_date=start_date,
            end_date=end_date,
            unclassified_only=unclassified_only,
        )

    def get_journal_entry(self, transaction_id: int) -> Optional[JournalEntry]:
        """Get the journal entry posted for a transaction, if any."""
        return self.db.find_journal_entry_by_transaction_id(transaction_id)
