"""Statement import domain service."""

from concurrent.futures import ThreadPoolExecutor
import logging
from pathlib import Path
from typing import Callable, Optional, Sequence

from bankledger.database.base import Database
from bankledger.database.factories import database_factory_for
from bankledger.domain.classification import ClassificationEngine
from bankledger.domain.duplicates import DuplicateDetector
from bankledger.domain.entities import (
    RejectedTransaction,
    RejectionReason,
    StandardizedTransaction,
    StatementDocument,
    UploadResult,
    ZERO,
)
from bankledger.domain.errors import (
    DocumentError,
    DuplicateTransaction,
    OutOfPeriod,
    ValidationError,
    company_not_found,
    fiscal_period_not_found,
    not_owned_by_company,
)
from bankledger.domain.fiscal_period import FiscalPeriodBoundaryValidator
from bankledger.parsing.formats import BankFormat, detect_bank_format, parse_statement

logger = logging.getLogger(__name__)


def read_statement_lines(path: str | Path) -> tuple[str, ...]:
    """Read a statement text file as a tuple of lines.

    Raises:
        DocumentError: If the file cannot be read
    """
    statement_path = Path(path)
    if not statement_path.exists():
        raise DocumentError(f"Statement file not found: {path}")
    try:
        text = statement_path.read_text(encoding="utf-8-sig", errors="replace")
    except OSError as e:
        raise DocumentError(f"Cannot read statement file {path}: {e}")
    return tuple(text.splitlines())


def validate_transaction(txn: StandardizedTransaction) -> Optional[str]:
    """Return a message describing why a parsed transaction is invalid, or None."""
    if txn.date is None:
        return "Transaction has no date"
    if not txn.details or not txn.details.strip():
        return "Transaction has no details"
    if min(txn.debit_amount, txn.credit_amount, txn.service_fee) < ZERO:
        return "Transaction amounts cannot be negative"
    if txn.debit_amount > 0 and txn.credit_amount > 0:
        return "Transaction cannot have both a debit and a credit amount"
    return None


class StatementImportService:
    """Service for importing bank statements."""

    def __init__(self, db: Database):
        """Initialize statement import service.

        Args:
            db: Database instance
        """
        self.db = db
        self.classifier = ClassificationEngine(db)
        self.boundary_validator = FiscalPeriodBoundaryValidator()

    def process_document(
        self, document: StatementDocument, bank_format: Optional[BankFormat] = None
    ) -> UploadResult:
        """Parse, check, save and classify one statement.

        Each transaction is validated, checked against the fiscal period and
        checked for duplicates, in that order; the first failing check routes
        it to the rejection list. Accepted transactions are saved and
        classified with the company's rules; those no rule matches are saved
        unclassified.

        Args:
            document: Statement lines and metadata
            bank_format: Statement layout; detected when omitted

        Returns:
            UploadResult with counts, saved IDs and rejections

        Raises:
            DocumentError: If the company or period doesn't exist, the
                document has no content, or its layout cannot be detected
        """
        company = self.db.get_company(document.company_id)
        if company is None:
            raise DocumentError(company_not_found(document.company_id))
        period = self.db.get_fiscal_period(document.fiscal_period_id)
        if period is None:
            raise DocumentError(fiscal_period_not_found(document.fiscal_period_id))
        if period.company_id != company.id:
            raise DocumentError(not_owned_by_company("Fiscal period", period.id, company.id))
        if not any(line.strip() for line in document.lines):
            raise DocumentError(f"Statement '{document.source_name}' is empty")

        if bank_format is None:
            try:
                bank_format = detect_bank_format(document.lines)
            except ValidationError as e:
                raise DocumentError(f"{document.source_name}: {e}")

        outcome = parse_statement(
            document,
            bank_format,
            statement_start=period.start_date,
            statement_end=period.end_date,
        )
        result = UploadResult(
            source_name=document.source_name,
            bank_format=bank_format.name,
            total_transactions=len(outcome.transactions),
            skipped_lines=list(outcome.skipped),
        )

        detector = DuplicateDetector(self.db, company.id)
        dates = [t.date for t in outcome.transactions if t.date is not None]
        if dates:
            detector.prefetch(min(dates), max(dates))
        rules = self.db.list_mapping_rules(company.id)

        for txn in outcome.transactions:
            problem = validate_transaction(txn)
            if problem is not None:
                result.reject(
                    RejectedTransaction.from_transaction(
                        txn, RejectionReason.VALIDATION_ERROR, problem
                    )
                )
                continue

            try:
                self.boundary_validator.ensure_within(txn.date, period)
                detector.ensure_not_duplicate(txn)
            except OutOfPeriod as e:
                result.reject(
                    RejectedTransaction.from_transaction(txn, RejectionReason.OUT_OF_PERIOD, str(e))
                )
                continue
            except DuplicateTransaction as e:
                result.reject(
                    RejectedTransaction.from_transaction(txn, RejectionReason.DUPLICATE, str(e))
                )
                continue

            transaction_id = self.db.save_transaction(company.id, period.id, txn)
            detector.remember(txn)
            result.saved_count += 1
            result.saved_transaction_ids.append(transaction_id)

            stored = self.db.get_transaction(transaction_id)
            if self.classifier.classify(stored, rules) is None:
                result.unclassified_transaction_ids.append(transaction_id)

        logger.info(
            "%s (%s): %d parsed, %d saved, %d duplicates, %d out of period, "
            "%d invalid, %d lines skipped",
            document.source_name,
            result.bank_format,
            result.total_transactions,
            result.saved_count,
            result.duplicate_count,
            result.out_of_period_count,
            result.validation_error_count,
            len(result.skipped_lines),
        )
        return result

    def import_file(
        self,
        path: str | Path,
        company_id: int,
        fiscal_period_id: int,
        bank_format: Optional[BankFormat] = None,
    ) -> UploadResult:
        """Import a plain-text statement file.

        Raises:
            DocumentError: If the file cannot be read or processed
        """
        document = StatementDocument(
            lines=read_statement_lines(path),
            company_id=company_id,
            fiscal_period_id=fiscal_period_id,
            source_name=Path(path).name,
        )
        return self.process_document(document, bank_format)

    def process_documents(
        self,
        documents: Sequence[StatementDocument],
        bank_format: Optional[BankFormat] = None,
        max_workers: int = 1,
        db_factory: Optional[Callable[[], Database]] = None,
    ) -> list[UploadResult]:
        """Process independent documents, optionally in parallel.

        Each worker gets its own gateway from ``db_factory``. A document that
        fails as a whole yields an UploadResult carrying the error instead of
        stopping the batch.

        Returns:
            One UploadResult per document, in input order
        """
        if max_workers <= 1 or len(documents) <= 1:
            return [self._process_isolated(self, doc, bank_format) for doc in documents]

        if db_factory is None:
            db_factory = database_factory_for(self.db)

        def work(document: StatementDocument) -> UploadResult:
            db = db_factory()
            db.connect()
            try:
                return self._process_isolated(StatementImportService(db), document, bank_format)
            finally:
                db.disconnect()

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            return list(executor.map(work, documents))

    @staticmethod
    def _process_isolated(
        service: "StatementImportService",
        document: StatementDocument,
        bank_format: Optional[BankFormat],
    ) -> UploadResult:
        try:
            return service.process_document(document, bank_format)
        except DocumentError as e:
            logger.error("%s failed: %s", document.source_name, e)
            return UploadResult(source_name=document.source_name, error=str(e))
