"""Bank format registry and detection."""

from datetime import date
from enum import Enum
import logging
import re
from typing import Iterable, Optional

from bankledger.domain.entities import StatementDocument
from bankledger.domain.errors import ValidationError
from bankledger.parsing.absa import ABSA
from bankledger.parsing.base import BankVariant, LineKind, ParseContext, ParseOutcome, StatementParser
from bankledger.parsing.fnb import FNB
from bankledger.parsing.standard_bank import STANDARD_BANK

logger = logging.getLogger(__name__)

HEADER_SCAN_LINES = 60


class BankFormat(Enum):
    """Supported statement layouts."""

    STANDARD_BANK = STANDARD_BANK
    FNB = FNB
    ABSA = ABSA

    @property
    def variant(self) -> BankVariant:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "BankFormat":
        """Look up a format by name, case-insensitively.

        Accepts "standard_bank", "standard-bank", "fnb" and "absa".

        Raises:
            ValidationError: If the name is unknown
        """
        key = name.strip().upper().replace("-", "_").replace(" ", "_")
        try:
            return cls[key]
        except KeyError:
            choices = ", ".join(f.name.lower() for f in cls)
            raise ValidationError(f"Unknown bank format '{name}' (choose from {choices})")


HEADER_SIGNATURES = (
    (BankFormat.ABSA, re.compile(r"^\s*(?:ABSA\b|Absa Bank)", re.IGNORECASE)),
    (BankFormat.FNB, re.compile(r"^\s*(?:FNB\b|First National Bank)", re.IGNORECASE)),
    (
        BankFormat.STANDARD_BANK,
        re.compile(r"^\s*(?:Standard Bank|BizDirect|Details\s+Service\s+Fee)", re.IGNORECASE),
    ),
)


def detect_bank_format(lines: Iterable[str]) -> BankFormat:
    """Detect the statement layout of a document.

    Header signatures in the first lines win. Otherwise each variant
    classifies every line and the one recognizing the most transaction
    lines is chosen.

    Raises:
        ValidationError: If no single format recognizes the document
    """
    lines = list(lines)
    for line in lines[:HEADER_SCAN_LINES]:
        for bank_format, signature in HEADER_SIGNATURES:
            if signature.search(line):
                logger.debug("Detected %s from header '%s'", bank_format.name, line.strip())
                return bank_format

    counts = {}
    for bank_format in BankFormat:
        context = ParseContext()
        counts[bank_format] = sum(
            1
            for line in lines
            if bank_format.variant.classify(line, context) is LineKind.NEW_TRANSACTION
        )

    best = max(counts.values())
    winners = [f for f, count in counts.items() if count == best]
    if best == 0 or len(winners) > 1:
        raise ValidationError("Could not detect bank format")
    return winners[0]


def parse_statement(
    document: StatementDocument,
    bank_format: Optional[BankFormat] = None,
    statement_start: Optional[date] = None,
    statement_end: Optional[date] = None,
) -> ParseOutcome:
    """Parse one document with a fresh parser instance.

    Args:
        document: Statement lines and metadata
        bank_format: Layout to use; detected when omitted
        statement_start: Default window start for year-less dates
        statement_end: Default window end for year-less dates
    """
    if bank_format is None:
        bank_format = detect_bank_format(document.lines)
    parser = StatementParser(
        bank_format.variant,
        source_name=document.source_name,
        statement_start=statement_start,
        statement_end=statement_end,
    )
    return parser.parse(document.lines)
