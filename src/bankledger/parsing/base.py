"""Shared multiline accumulation for statement parsers.

Every bank variant reduces to two functions: ``classify`` decides whether a
line starts a transaction, continues the current one or is noise, and
``extract`` turns a transaction line into its fields. ``accumulate`` folds a
line stream through those two functions, joining continuation lines onto the
pending transaction's description.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
import logging
from typing import Callable, Iterable, Optional

from bankledger.domain.entities import StandardizedTransaction, SkippedLine, ZERO
from bankledger.domain.errors import MalformedAmount, ParseAmbiguity
from bankledger.utils.date_parser import parse_statement_period

logger = logging.getLogger(__name__)


class LineKind(Enum):
    """Role of a single statement line."""

    NEW_TRANSACTION = "new_transaction"
    CONTINUATION = "continuation"
    IGNORED = "ignored"


class ParserState(Enum):
    IDLE = "idle"
    ACCUMULATING = "accumulating"


@dataclass
class ParseContext:
    """Per-document parsing context.

    The statement window is used to place year-less dates. It starts as the
    target fiscal period and is replaced when a "Statement from ... to ..."
    header is seen.
    """

    source_name: str = "statement"
    statement_start: Optional[date] = None
    statement_end: Optional[date] = None


@dataclass(frozen=True)
class ExtractedLine:
    """Fields pulled from a single transaction line."""

    date: date
    description: str
    balance: Decimal
    debit_amount: Decimal = ZERO
    credit_amount: Decimal = ZERO
    service_fee: Decimal = ZERO


Classifier = Callable[[str, ParseContext], LineKind]
Extractor = Callable[[str, ParseContext, Optional[ExtractedLine]], ExtractedLine]


def _strip(line: str) -> str:
    return line.strip()


@dataclass(frozen=True)
class BankVariant:
    """Line classification and extraction rules for one bank's export.

    Attributes:
        name: Human readable bank name
        classify: Line classifier
        extract: Transaction line extractor; receives the previously
            extracted line for date inheritance and balance movement
        continuation_text: Renders a continuation line for the description
        ends_block_on_ignored: Whether an ignored line closes the pending
            description so later text is never appended to it
    """

    name: str
    classify: Classifier
    extract: Extractor
    continuation_text: Callable[[str], str] = _strip
    ends_block_on_ignored: bool = False


@dataclass
class ParseOutcome:
    """Transactions emitted for a document plus the lines that were skipped."""

    transactions: list[StandardizedTransaction] = field(default_factory=list)
    skipped: list[SkippedLine] = field(default_factory=list)


@dataclass
class _Pending:
    fields: ExtractedLine
    first_line: int
    last_line: int
    parts: list[str]


def _emit(pending: _Pending, context: ParseContext) -> StandardizedTransaction:
    details = " ".join(part for part in pending.parts if part)
    return StandardizedTransaction(
        date=pending.fields.date,
        details=details,
        balance=pending.fields.balance,
        debit_amount=pending.fields.debit_amount,
        credit_amount=pending.fields.credit_amount,
        service_fee=pending.fields.service_fee,
        source_reference=f"{context.source_name}:{pending.first_line}-{pending.last_line}",
    )


def accumulate(
    lines: Iterable[str], variant: BankVariant, context: ParseContext
) -> ParseOutcome:
    """Fold a document's lines into standardized transactions.

    Args:
        lines: Ordered statement lines for a single document
        variant: Bank variant rules
        context: Document-scoped context; its statement window may be
            updated by header lines

    Returns:
        ParseOutcome with emitted transactions in line order and any
        transaction lines skipped because of malformed amounts or
        ambiguous columns
    """
    outcome = ParseOutcome()
    state = ParserState.IDLE
    pending: Optional[_Pending] = None
    previous: Optional[ExtractedLine] = None

    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n")

        window = parse_statement_period(line)
        if window is not None:
            context.statement_start, context.statement_end = window
            logger.debug("Statement window %s to %s", window[0], window[1])

        kind = variant.classify(line, context)

        if kind is LineKind.NEW_TRANSACTION:
            if pending is not None:
                outcome.transactions.append(_emit(pending, context))
                pending = None
            try:
                fields = variant.extract(line, context, previous)
            except (MalformedAmount, ParseAmbiguity) as e:
                if isinstance(e, ParseAmbiguity):
                    logger.warning(
                        "%s line %d needs manual review: %s", variant.name, line_number, e
                    )
                else:
                    logger.info("%s line %d skipped: %s", variant.name, line_number, e)
                outcome.skipped.append(
                    SkippedLine(line_number=line_number, text=line.strip(), reason=str(e))
                )
                state = ParserState.IDLE
                continue
            pending = _Pending(
                fields=fields,
                first_line=line_number,
                last_line=line_number,
                parts=[fields.description],
            )
            previous = fields
            state = ParserState.ACCUMULATING

        elif kind is LineKind.CONTINUATION:
            if state is ParserState.ACCUMULATING and pending is not None:
                pending.parts.append(variant.continuation_text(line))
                pending.last_line = line_number

        elif variant.ends_block_on_ignored and pending is not None:
            outcome.transactions.append(_emit(pending, context))
            pending = None
            state = ParserState.IDLE

    if pending is not None:
        outcome.transactions.append(_emit(pending, context))

    return outcome


class StatementParser:
    """Document-scoped parser.

    An instance holds the context of exactly one document and refuses to be
    run twice.
    """

    def __init__(
        self,
        variant: BankVariant,
        source_name: str = "statement",
        statement_start: Optional[date] = None,
        statement_end: Optional[date] = None,
    ):
        self.variant = variant
        self.context = ParseContext(
            source_name=source_name,
            statement_start=statement_start,
            statement_end=statement_end,
        )
        self._consumed = False

    def parse(self, lines: Iterable[str]) -> ParseOutcome:
        """Parse the document's lines.

        Raises:
            RuntimeError: If the parser was already used
        """
        if self._consumed:
            raise RuntimeError("StatementParser instances parse a single document")
        self._consumed = True
        return accumulate(lines, self.variant, self.context)
