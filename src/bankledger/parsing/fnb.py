"""FNB (First National Bank) statement layout.

Transaction lines start with a date, either ``DD/MM/YYYY`` or ``DD Mon``.
Credits carry a ``Cr`` suffix; unmarked amounts are debits. Lines starting
with ``#`` are bank charges that take the date of the transaction above them::

    02 Apr Magtape Credit Acme Payroll 7,500.00Cr 5,969.38Cr
    03 Apr POS Purchase Checkers 245.50 5,723.88Cr
    #Service Fees 12.50 5,711.38Cr
"""

import re
from typing import Optional

from bankledger.domain.entities import ZERO
from bankledger.domain.errors import MalformedAmount, ParseAmbiguity
from bankledger.parsing.base import BankVariant, ExtractedLine, LineKind, ParseContext
from bankledger.utils.amount_parser import AmountRole, normalize_amount
from bankledger.utils.date_parser import parse_day_month, parse_full_date, resolve_year

BANK_CHARGE_PREFIX = "#"

_MONTHS = r"(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Oct|Nov|Dec)"

DATE_PREFIX_PATTERN = re.compile(
    rf"^\s*(?P<date>\d{{1,2}}/\d{{1,2}}/\d{{4}}|\d{{1,2}}\s+{_MONTHS})\s+(?P<rest>\S.*)$",
    re.IGNORECASE,
)

_AMOUNT_TOKEN = re.compile(r"(?:\d{1,3}(?:,\d{3})+|\d+)\.\d{2}(?:-|Cr)?")

SKIP_PATTERN = re.compile(
    r"^\s*(?:Date|Transaction|Description|Amount|Balance|Reference|First National Bank"
    r"|FNB|Account Summary|Statement|Page \d|Business Account|Cheque Account"
    r"|Savings Account|Account Number|Branch|VAT Number|Customer Number"
    r"|Statement Period|Generated|Opening Balance|Closing Balance|Total Debits"
    r"|Total Credits|Available Balance|Uncleared Funds|Hold Amount).*$",
    re.IGNORECASE,
)

DEFAULT_CHARGE_DESCRIPTION = "Bank charge"


def format_reference(text: str) -> str:
    """Render a ``Ref:`` fragment in parentheses.

    "Payment Ref: 12345" becomes "Payment (Ref: 12345)".
    """
    index = text.find("Ref:")
    if index < 0:
        return text
    before = text[:index].strip()
    reference = text[index:].strip()
    return f"{before} ({reference})".strip()


def _parse_date(token: str, context: ParseContext):
    if "/" in token:
        return parse_full_date(token)
    month, day = parse_day_month(token)
    return resolve_year(month, day, context.statement_start, context.statement_end)


def _split_amounts(text: str) -> tuple[str, list[str]]:
    """Split trailing amount tokens from the description text."""
    tokens = text.split()
    index = len(tokens)
    while index > 0 and _AMOUNT_TOKEN.fullmatch(tokens[index - 1]):
        index -= 1
    return " ".join(tokens[:index]), tokens[index:]


def classify_line(line: str, context: ParseContext) -> LineKind:
    """Classify an FNB statement line."""
    stripped = line.strip()
    if not stripped or SKIP_PATTERN.match(line):
        return LineKind.IGNORED
    if stripped.startswith(BANK_CHARGE_PREFIX):
        return LineKind.NEW_TRANSACTION

    match = DATE_PREFIX_PATTERN.match(line)
    if match:
        try:
            _parse_date(match.group("date"), context)
        except ValueError:
            return LineKind.IGNORED
        return LineKind.NEW_TRANSACTION
    return LineKind.CONTINUATION


def _signed_balance(token: str):
    return normalize_amount(token).signed


def _extract_bank_charge(
    line: str, previous: Optional[ExtractedLine]
) -> ExtractedLine:
    if previous is None:
        raise ParseAmbiguity("Bank charge line has no preceding transaction to take its date from")

    content = line.strip()[len(BANK_CHARGE_PREFIX):].strip()
    description, amounts = _split_amounts(content)
    if len(amounts) < 2:
        raise MalformedAmount(content, "bank charge line needs a fee and a balance")

    return ExtractedLine(
        date=previous.date,
        description=format_reference(description) or DEFAULT_CHARGE_DESCRIPTION,
        balance=_signed_balance(amounts[-1]),
        service_fee=normalize_amount(amounts[-2]).value,
    )


def extract_line(
    line: str, context: ParseContext, previous: Optional[ExtractedLine]
) -> ExtractedLine:
    """Extract fields from an FNB transaction or bank charge line.

    Raises:
        MalformedAmount: If the line has no balance column
        ParseAmbiguity: If a bank charge line has no preceding transaction
    """
    if line.strip().startswith(BANK_CHARGE_PREFIX):
        return _extract_bank_charge(line, previous)

    match = DATE_PREFIX_PATTERN.match(line)
    if match is None:
        raise ParseAmbiguity(f"No leading date: {line.strip()}")
    try:
        txn_date = _parse_date(match.group("date"), context)
    except ValueError as e:
        raise ParseAmbiguity(str(e))

    description, amounts = _split_amounts(match.group("rest"))
    if not amounts:
        raise MalformedAmount(match.group("rest").strip(), "no balance column")

    debit = credit = ZERO
    balance = _signed_balance(amounts[-1])
    if len(amounts) >= 2:
        amount = normalize_amount(amounts[-2])
        if amount.role is AmountRole.CREDIT:
            credit = amount.value
        else:
            debit = amount.value

    return ExtractedLine(
        date=txn_date,
        description=format_reference(description),
        balance=balance,
        debit_amount=debit,
        credit_amount=credit,
    )


def continuation_text(line: str) -> str:
    return format_reference(line.strip())


FNB = BankVariant(
    name="FNB",
    classify=classify_line,
    extract=extract_line,
    continuation_text=continuation_text,
)
