"""Statement line parsers for supported banks."""

from bankledger.parsing.base import (
    BankVariant,
    LineKind,
    ParseContext,
    ParseOutcome,
    StatementParser,
    accumulate,
)
from bankledger.parsing.formats import BankFormat, detect_bank_format, parse_statement

__all__ = [
    "BankFormat",
    "BankVariant",
    "LineKind",
    "ParseContext",
    "ParseOutcome",
    "StatementParser",
    "accumulate",
    "detect_bank_format",
    "parse_statement",
]
