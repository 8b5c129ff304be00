"""Absa cheque account statement layout.

Columns are separated by two or more spaces and amounts may use spaces or
commas as thousands separators. Only the balance column is always present,
so the remaining amounts are attributed right to left::

    23/02/2023 Atm Payment Fr Killarney  10.00  600.00  54,882.66
               Card No. 5392 Bank Branch
"""

from decimal import Decimal
import re
from typing import Optional

from bankledger.domain.entities import ZERO
from bankledger.domain.errors import MalformedAmount, ParseAmbiguity
from bankledger.parsing.base import BankVariant, ExtractedLine, LineKind, ParseContext
from bankledger.utils.amount_parser import AMOUNT_BODY, DEBIT_SUFFIX, normalize_amount
from bankledger.utils.date_parser import parse_full_date

DATE_PREFIX_PATTERN = re.compile(r"^(?P<date>\d{1,2}/\d{1,2}/\d{4})\s+(?P<rest>\S.*)$")

_COLUMN_SEPARATOR = re.compile(r"\s{2,}")
_AMOUNT_FIELD = re.compile(rf"{AMOUNT_BODY}-?")
# Amount glued to the description by a single space
_TRAILING_AMOUNT = re.compile(r"\s(?P<amount>(?:\d{1,3}(?:,\d{3})+|\d+)\.\d{2}-?)$")
# Peeled token that may be the tail of a space-grouped amount
_THOUSANDS_TAIL = re.compile(r"\d{3}\.\d{2}-?")
_LEADING_GROUP = re.compile(r"(?:^|\s)\d{1,3}$")
_NUMERIC_TAIL = re.compile(r"(?:^|\s)[\d,]*\d\.\d+-?$")

MAX_NUMERIC_GROUPS = 3

SKIP_PATTERN = re.compile(
    r"^\s*(?:Date|Transaction Description|Charge|Debit Amount|Credit Amount|Balance"
    r"|Your transactions|Account Type|Statement no|Client VAT|Account Summary"
    r"|Page \d+ of \d+|ABSA Bank Limited|Authorised Financial|Registration Number"
    r"|CSP\d+|Return address|Private Bag|Cheque account statement|Issued on).*$",
    re.IGNORECASE,
)

CREDIT_KEYWORDS = (
    "deposit",
    "credit",
    "refund",
    "salary",
    "interest",
    "transfer from",
    "trf cr",
    "received",
)
DEBIT_KEYWORDS = (
    "withdrawal",
    "payment",
    "purchase",
    "debit",
    "fee",
    "charge",
    "transfer to",
)


def _keyword_pattern(keywords: tuple[str, ...]) -> re.Pattern:
    return re.compile(r"\b(?:" + "|".join(re.escape(k) for k in keywords) + r")\b", re.IGNORECASE)


_CREDIT_WORDS = _keyword_pattern(CREDIT_KEYWORDS)
_DEBIT_WORDS = _keyword_pattern(DEBIT_KEYWORDS)


def classify_line(line: str, context: ParseContext) -> LineKind:
    """Classify an Absa statement line."""
    if not line.strip() or SKIP_PATTERN.match(line):
        return LineKind.IGNORED

    match = DATE_PREFIX_PATTERN.match(line)
    if match:
        try:
            parse_full_date(match.group("date"))
        except ValueError:
            return LineKind.IGNORED
        return LineKind.NEW_TRANSACTION

    if line[0].isspace():
        return LineKind.CONTINUATION
    return LineKind.IGNORED


def split_numeric_groups(text: str, strict: bool = True) -> tuple[str, list[str]]:
    """Peel amount columns off the end of a line, right to left.

    Columns separated by two or more spaces are taken whole, so "54 882.66"
    stays one amount. Amounts glued to the description by single spaces are
    peeled one token at a time; there a bare 1-3 digit token in front of a
    "ddd.dd" token could be the start of a space-grouped amount, which is
    ambiguous.

    Args:
        text: Line text after the date
        strict: Raise on ambiguous or leftover numeric tokens instead of
            leaving them in the description

    Returns:
        Tuple of (description, amount tokens in column order)

    Raises:
        ParseAmbiguity: If strict and the amount columns cannot be separated
    """
    fields = _COLUMN_SEPARATOR.split(text.strip())
    amounts: list[str] = []
    while fields and _AMOUNT_FIELD.fullmatch(fields[-1]):
        amounts.insert(0, fields.pop())

    description = " ".join(fields)
    while True:
        match = _TRAILING_AMOUNT.search(description)
        if match is None:
            break
        token = match.group("amount")
        rest = description[: match.start()].rstrip()
        if _THOUSANDS_TAIL.fullmatch(token) and _LEADING_GROUP.search(rest):
            if strict:
                raise ParseAmbiguity(
                    f"'{token}' may be part of a space separated amount in '{text.strip()}'"
                )
            break
        amounts.insert(0, token)
        description = rest

    if strict and _NUMERIC_TAIL.search(description):
        raise ParseAmbiguity(f"Unattributed numeric token in '{text.strip()}'")
    return description, amounts


def continuation_text(line: str) -> str:
    """Description text of a continuation line, without amount columns."""
    description, _ = split_numeric_groups(line, strict=False)
    return " ".join(description.split())


def infer_is_credit(
    description: str, balance: Decimal, previous: Optional[ExtractedLine]
) -> Optional[bool]:
    """Decide whether a single amount is a credit.

    Credit keywords win over debit keywords; without either, the movement of
    the balance against the previous transaction decides. Returns None when
    nothing decides.
    """
    if _CREDIT_WORDS.search(description):
        return True
    if _DEBIT_WORDS.search(description):
        return False
    if previous is not None and balance != previous.balance:
        return balance > previous.balance
    return None


def extract_line(
    line: str, context: ParseContext, previous: Optional[ExtractedLine]
) -> ExtractedLine:
    """Extract fields from an Absa transaction line.

    Raises:
        MalformedAmount: If the line has no balance column
        ParseAmbiguity: If the amount columns cannot be attributed
    """
    match = DATE_PREFIX_PATTERN.match(line)
    if match is None:
        raise ParseAmbiguity(f"No leading date: {line.strip()}")
    txn_date = parse_full_date(match.group("date"))

    description, groups = split_numeric_groups(match.group("rest"))
    if not groups:
        raise MalformedAmount(match.group("rest").strip(), "no balance column")
    if len(groups) > MAX_NUMERIC_GROUPS:
        raise ParseAmbiguity(f"{len(groups)} numeric columns in '{line.strip()}'")

    values = [normalize_amount(token, suffixes=(DEBIT_SUFFIX,)) for token in groups]
    balance = values[-1].signed
    amounts = [value.value for value in values[:-1]]

    debit = credit = fee = ZERO
    if len(amounts) == 1:
        is_credit = infer_is_credit(description, balance, previous)
        if is_credit is None:
            raise ParseAmbiguity(
                f"Cannot tell whether {amounts[0]} is a debit or credit in '{line.strip()}'"
            )
        if is_credit:
            credit = amounts[0]
        else:
            debit = amounts[0]
    elif len(amounts) == 2:
        first, second = amounts
        if first >= second:
            raise ParseAmbiguity(
                f"Cannot attribute amounts {first} and {second} in '{line.strip()}'"
            )
        fee = first
        # Defaults to debit
        if infer_is_credit(description, balance, previous):
            credit = second
        else:
            debit = second

    return ExtractedLine(
        date=txn_date,
        description=description,
        balance=balance,
        debit_amount=debit,
        credit_amount=credit,
        service_fee=fee,
    )


ABSA = BankVariant(
    name="Absa",
    classify=classify_line,
    extract=extract_line,
    continuation_text=continuation_text,
)
