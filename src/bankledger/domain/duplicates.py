"""Duplicate transaction detection."""

from datetime import date
from decimal import Decimal
import logging
from typing import Optional

from bankledger.database.base import Database
from bankledger.domain.entities import BankTransaction, StandardizedTransaction
from bankledger.domain.errors import DuplicateTransaction, duplicate_transaction

logger = logging.getLogger(__name__)

Fingerprint = tuple[int, date, Decimal, Decimal, str, Decimal]


def fingerprint(company_id: int, txn: StandardizedTransaction | BankTransaction) -> Fingerprint:
    """Build the fingerprint used to recognize a re-imported transaction.

    Date, amounts, details and balance must all match; any one of them on
    its own is not enough to call two rows the same transaction.
    """
    return (
        company_id,
        txn.date,
        txn.debit_amount,
        txn.credit_amount,
        txn.details.strip().lower(),
        txn.balance,
    )


class DuplicateDetector:
    """Checks parsed transactions against those already stored for a company.

    Without a prefetch every check is a gateway lookup. After ``prefetch``
    checks inside the loaded date range are answered from memory, and
    ``remember`` adds rows saved during the current run.
    """

    def __init__(self, db: Database, company_id: int):
        self.db = db
        self.company_id = company_id
        self._known: Optional[dict[Fingerprint, Optional[BankTransaction]]] = None
        self._range: Optional[tuple[date, date]] = None

    def prefetch(self, start_date: date, end_date: date) -> int:
        """Load fingerprints of stored transactions dated in [start_date, end_date].

        Returns:
            Number of fingerprints loaded
        """
        self._known = {}
        for existing in self.db.list_fingerprints(self.company_id, start_date, end_date):
            self._known.setdefault(fingerprint(self.company_id, existing), existing)
        self._range = (start_date, end_date)
        logger.debug(
            "Prefetched %d fingerprints for company %d (%s to %s)",
            len(self._known),
            self.company_id,
            start_date,
            end_date,
        )
        return len(self._known)

    def _in_range(self, txn_date: date) -> bool:
        return self._range is not None and self._range[0] <= txn_date <= self._range[1]

    def remember(self, txn: StandardizedTransaction | BankTransaction) -> None:
        """Record a transaction saved during this run."""
        if self._known is not None:
            stored = txn if isinstance(txn, BankTransaction) else None
            self._known.setdefault(fingerprint(self.company_id, txn), stored)

    def is_duplicate(self, txn: StandardizedTransaction) -> bool:
        """Check whether the transaction already exists."""
        key = fingerprint(self.company_id, txn)
        if self._known is not None and (key in self._known or self._in_range(txn.date)):
            found = key in self._known
        else:
            found = self.db.exists_fingerprint(
                self.company_id,
                txn.date,
                txn.debit_amount,
                txn.credit_amount,
                txn.details,
                txn.balance,
            )
        if found:
            logger.debug("Duplicate transaction %s '%s'", txn.date, txn.details)
        return found

    def find_duplicate(self, txn: StandardizedTransaction) -> Optional[BankTransaction]:
        """Return the stored transaction with the same fingerprint, if any."""
        key = fingerprint(self.company_id, txn)
        if self._known is not None and self._known.get(key) is not None:
            return self._known[key]
        return self.db.find_by_fingerprint(
            self.company_id,
            txn.date,
            txn.debit_amount,
            txn.credit_amount,
            txn.details,
            txn.balance,
        )

    def ensure_not_duplicate(self, txn: StandardizedTransaction) -> None:
        """Raise if the transaction already exists.

        Raises:
            DuplicateTransaction: With the upload date of the existing record
        """
        if not self.is_duplicate(txn):
            return
        existing = self.find_duplicate(txn)
        uploaded_on = existing.imported_at.date() if existing is not None else None
        raise DuplicateTransaction(duplicate_transaction(uploaded_on))
