"""Standard Bank business statement layout.

Columns run details / service fee / debits / credits / date / balance. The
date is printed as ``MM DD`` without a year, debits carry a trailing ``-`` and
a ``##`` token in the details marks a service fee row::

    IMMEDIATE PAYMENT 1,310.00- 03 16 24,106.81
    ABC TRADING SUPPLIES
    FEE: IMMEDIATE PAYMENT ## 35.00- 03 16 24,071.81
"""

import re
from typing import Optional

from bankledger.domain.entities import ZERO
from bankledger.domain.errors import ParseAmbiguity
from bankledger.parsing.base import BankVariant, ExtractedLine, LineKind, ParseContext
from bankledger.utils.amount_parser import (
    DEBIT_SUFFIX,
    AmountRole,
    normalize_amount,
)
from bankledger.utils.date_parser import resolve_year

_AMOUNT = r"\d[\d,]*\.\d{2}-?"

TRANSACTION_LINE_PATTERN = re.compile(
    r"^(?P<body>[A-Z][A-Z\s\-:]+.*?)\s+(?P<month>\d{2})\s+(?P<day>\d{2})"
    rf"\s+(?P<balance>{_AMOUNT})\s*$"
)

_DETAILS_AND_AMOUNT = re.compile(rf"^(?P<details>.*?)\s+(?P<amount>{_AMOUNT})$")

SERVICE_FEE_MARKER = "##"

SKIP_PATTERN = re.compile(
    r"^\s*(?:Details\s+Service\s+Fee|DEBITS\s+CREDITS\s+DATE|BRAAMFONTEIN|MARSHALLTOWN"
    r"|BIZLAUNCH|Account Number|Statement from|Statement No|VAT Reg|Page \d"
    r"|Month-end Balance|PO BOX|DOORNFONTEIN|BizDirect Contact Centre|e-mail:"
    r"|\d+\s+\w+\s+\d{4}|MONTHLY EMAIL VAT|Statement Frequency:|BANK STATEMENT).*$"
)

_ADDRESS_KEYWORDS = re.compile(r"PO BOX|MARSHALLTOWN|DOORNFONTEIN|BRAAMFONTEIN")

_DESCRIPTION_LINE = re.compile(r"^[A-Z0-9*][A-Z0-9\s*\-().:/#+]+$")


def classify_line(line: str, context: ParseContext) -> LineKind:
    """Classify a Standard Bank statement line."""
    stripped = line.strip()
    if not stripped or SKIP_PATTERN.match(line):
        return LineKind.IGNORED

    match = TRANSACTION_LINE_PATTERN.match(stripped)
    if match:
        month, day = int(match.group("month")), int(match.group("day"))
        if 1 <= month <= 12 and 1 <= day <= 31:
            return LineKind.NEW_TRANSACTION
        return LineKind.IGNORED

    if _ADDRESS_KEYWORDS.search(stripped):
        return LineKind.IGNORED
    if _DESCRIPTION_LINE.match(stripped):
        return LineKind.CONTINUATION
    return LineKind.IGNORED


def extract_line(
    line: str, context: ParseContext, previous: Optional[ExtractedLine]
) -> ExtractedLine:
    """Extract fields from a Standard Bank transaction line.

    Raises:
        MalformedAmount: If the amount or balance column cannot be parsed
        ParseAmbiguity: If the MM DD pair is not a valid calendar date
    """
    match = TRANSACTION_LINE_PATTERN.match(line.strip())
    if match is None:
        raise ParseAmbiguity(f"Not a transaction line: {line.strip()}")

    month, day = int(match.group("month")), int(match.group("day"))
    try:
        txn_date = resolve_year(month, day, context.statement_start, context.statement_end)
    except ValueError as e:
        raise ParseAmbiguity(str(e))

    balance = normalize_amount(match.group("balance"), suffixes=(DEBIT_SUFFIX,)).signed

    body = match.group("body").strip()
    debit = credit = fee = ZERO
    amount_match = _DETAILS_AND_AMOUNT.match(body)
    if amount_match:
        details = amount_match.group("details")
        amount = normalize_amount(amount_match.group("amount"), suffixes=(DEBIT_SUFFIX,))
        if SERVICE_FEE_MARKER in details.split():
            fee = amount.value
        elif amount.role is AmountRole.DEBIT:
            debit = amount.value
        else:
            credit = amount.value
    else:
        # Balance brought forward and similar rows
        details = body

    details = " ".join(token for token in details.split() if token != SERVICE_FEE_MARKER)

    return ExtractedLine(
        date=txn_date,
        description=details,
        balance=balance,
        debit_amount=debit,
        credit_amount=credit,
        service_fee=fee,
    )


STANDARD_BANK = BankVariant(
    name="Standard Bank",
    classify=classify_line,
    extract=extract_line,
    ends_block_on_ignored=True,
)
