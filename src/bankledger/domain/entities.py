"""Domain model entities for bankledger.

These are pure data classes representing business concepts, independent of
database schema. Parsers, validators and the classification engine only ever
see these values; the SQLAlchemy models stay behind the database layer.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from enum import Enum
from typing import Optional

ZERO = Decimal("0.00")


class AccountCategory(str, Enum):
    """Chart-of-accounts category."""

    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    REVENUE = "revenue"
    EXPENSE = "expense"


class MatchType(str, Enum):
    """How a mapping rule pattern is compared to transaction details."""

    CONTAINS = "contains"
    STARTS_WITH = "starts_with"
    ENDS_WITH = "ends_with"
    EQUALS = "equals"
    REGEX = "regex"


class RejectionReason(str, Enum):
    """Why a parsed transaction was not saved."""

    DUPLICATE = "DUPLICATE"
    OUT_OF_PERIOD = "OUT_OF_PERIOD"
    VALIDATION_ERROR = "VALIDATION_ERROR"


class _PostingAmounts:
    """Amount helpers shared by parsed and persisted transactions."""

    @property
    def is_service_fee_only(self) -> bool:
        return self.service_fee > 0 and self.debit_amount == 0 and self.credit_amount == 0

    @property
    def amount(self) -> Decimal:
        """Principal amount (debit or credit); the fee for fee-only rows."""
        if self.is_service_fee_only:
            return self.service_fee
        return self.debit_amount if self.debit_amount > 0 else self.credit_amount


@dataclass(frozen=True)
class StandardizedTransaction(_PostingAmounts):
    """A single transaction as emitted by a statement parser.

    Created once per document pass and never mutated afterwards.
    """

    date: date
    details: str
    balance: Decimal
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO
    service_fee: Decimal = ZERO
    source_reference: str = ""


@dataclass(frozen=True)
class Company:
    """Company owning accounts, rules, periods and transactions."""

    id: int
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Account:
    """Chart-of-accounts entry."""

    id: int
    company_id: int
    code: str
    name: str
    category: AccountCategory
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class MappingRule:
    """Ordered classification rule. Lower priority values are evaluated first."""

    id: int
    company_id: int
    pattern: str
    debit_account_code: str
    credit_account_code: str
    priority: int
    description: Optional[str]
    match_type: MatchType = MatchType.CONTAINS
    is_active: bool = True


@dataclass(frozen=True)
class FiscalPeriod:
    """Accounting date range; both ends inclusive."""

    id: int
    company_id: int
    name: str
    start_date: date
    end_date: date
    is_closed: bool = False

    def contains(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class BankTransaction(_PostingAmounts):
    """Persisted bank transaction."""

    id: int
    company_id: int
    fiscal_period_id: Optional[int]
    date: date
    details: str
    debit_amount: Decimal
    credit_amount: Decimal
    service_fee: Decimal
    balance: Decimal
    source_reference: Optional[str]
    imported_at: datetime


@dataclass(frozen=True)
class JournalEntryLine:
    """One side of a double-entry posting."""

    account_code: str
    debit_amount: Decimal
    credit_amount: Decimal
    line_number: int
    description: Optional[str] = None
    account_id: Optional[int] = None
    id: Optional[int] = None
    journal_entry_id: Optional[int] = None


@dataclass(frozen=True)
class JournalEntry:
    """Journal entry header with exactly two lines (debit first, credit second)."""

    company_id: int
    transaction_id: int
    entry_date: date
    description: str
    reference: str
    lines: tuple[JournalEntryLine, ...] = ()
    id: Optional[int] = None
    created_at: Optional[datetime] = None

    @property
    def debit_line(self) -> JournalEntryLine:
        return next(line for line in self.lines if line.debit_amount > 0)

    @property
    def credit_line(self) -> JournalEntryLine:
        return next(line for line in self.lines if line.credit_amount > 0)

    @property
    def total_debit(self) -> Decimal:
        return sum((line.debit_amount for line in self.lines), ZERO)

    @property
    def total_credit(self) -> Decimal:
        return sum((line.credit_amount for line in self.lines), ZERO)

    @property
    def is_balanced(self) -> bool:
        return self.total_debit == self.total_credit


@dataclass(frozen=True)
class RejectedTransaction:
    """Reporting record for a transaction that was not saved."""

    date: Optional[date]
    description: str
    debit_amount: Decimal
    credit_amount: Decimal
    balance: Decimal
    reason: RejectionReason
    reason_detail: str

    @classmethod
    def from_transaction(
        cls, txn: StandardizedTransaction, reason: RejectionReason, reason_detail: str
    ) -> "RejectedTransaction":
        return cls(
            date=txn.date,
            description=txn.details,
            debit_amount=txn.debit_amount,
            credit_amount=txn.credit_amount,
            balance=txn.balance,
            reason=reason,
            reason_detail=reason_detail,
        )


@dataclass(frozen=True)
class SkippedLine:
    """Statement line that could not be turned into a transaction."""

    line_number: int
    text: str
    reason: str


@dataclass(frozen=True)
class StatementDocument:
    """Raw line source for one statement plus its metadata."""

    lines: tuple[str, ...]
    company_id: int
    fiscal_period_id: int
    source_name: str = "statement"


@dataclass
class UploadResult:
    """Outcome of processing one statement document."""

    source_name: str
    bank_format: Optional[str] = None
    total_transactions: int = 0
    saved_count: int = 0
    duplicate_count: int = 0
    out_of_period_count: int = 0
    validation_error_count: int = 0
    saved_transaction_ids: list[int] = field(default_factory=list)
    unclassified_transaction_ids: list[int] = field(default_factory=list)
    rejected: list[RejectedTransaction] = field(default_factory=list)
    skipped_lines: list[SkippedLine] = field(default_factory=list)
    # Set when the whole document failed
    error: Optional[str] = None

    def reject(self, rejected: RejectedTransaction) -> None:
        """Record a rejection and bump the matching counter."""
        self.rejected.append(rejected)
        if rejected.reason is RejectionReason.DUPLICATE:
            self.duplicate_count += 1
        elif rejected.reason is RejectionReason.OUT_OF_PERIOD:
            self.out_of_period_count += 1
        else:
            self.validation_error_count += 1
