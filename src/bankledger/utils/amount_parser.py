"""Amount parsing utilities for statement tokens."""

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
import re

from bankledger.domain.errors import MalformedAmount

# A statement amount: plain digits or 1-3 digits followed by comma/space
# separated groups of three, always with two decimals.
AMOUNT_BODY = r"(?:\d{1,3}(?:[ ,]\d{3})+|\d+)\.\d{2}"

_DIGITS = re.compile(r"\d+\.\d+")
_GROUPED = re.compile(AMOUNT_BODY)
_TWO_PLACES = Decimal("0.01")


class AmountRole(str, Enum):
    """Role implied by a trailing sign marker."""

    DEBIT = "debit"
    CREDIT = "credit"
    UNMARKED = "unmarked"


DEBIT_SUFFIX = "-"
CREDIT_SUFFIX = "Cr"

_SUFFIX_ROLES = {
    DEBIT_SUFFIX: AmountRole.DEBIT,
    CREDIT_SUFFIX: AmountRole.CREDIT,
}


@dataclass(frozen=True)
class NormalizedAmount:
    """Parsed magnitude plus the role inferred from its marker."""

    value: Decimal
    role: AmountRole = AmountRole.UNMARKED

    @property
    def signed(self) -> Decimal:
        """Value negated when the token carried a debit marker."""
        return -self.value if self.role is AmountRole.DEBIT else self.value


def normalize_amount(
    token: str, suffixes: tuple[str, ...] = (DEBIT_SUFFIX, CREDIT_SUFFIX)
) -> NormalizedAmount:
    """Normalize a locale-variant amount token.

    Handles:
    - "54882.66"
    - "54,882.66" and "54 882.66" (thousands separators)
    - "1,310.00-" (trailing debit marker)
    - "7,500.00Cr" (trailing credit marker)

    Args:
        token: Raw token from a statement line
        suffixes: Trailing markers recognized for the current bank format

    Returns:
        NormalizedAmount with a two-place Decimal and the inferred role

    Raises:
        MalformedAmount: If the token is empty, has other than two decimals,
            or contains non-numeric characters after stripping separators
    """
    if token is None or not token.strip():
        raise MalformedAmount("" if token is None else token, "empty amount")

    text = token.strip()
    role = AmountRole.UNMARKED
    for suffix in suffixes:
        if text.endswith(suffix):
            role = _SUFFIX_ROLES[suffix]
            text = text[: -len(suffix)].rstrip()
            break

    # Remove thousands separators
    digits = text.replace(",", "").replace(" ", "")

    if not _DIGITS.fullmatch(digits):
        raise MalformedAmount(token, "not a numeric amount")
    if len(digits.split(".")[1]) != 2:
        raise MalformedAmount(token, "expected exactly two decimal places")
    if not _GROUPED.fullmatch(text):
        raise MalformedAmount(token, "thousands separators out of place")

    try:
        value = Decimal(digits).quantize(_TWO_PLACES)
    except InvalidOperation as e:
        raise MalformedAmount(token, str(e))
    return NormalizedAmount(value=value, role=role)


def parse_amount(token: str) -> Decimal:
    """Parse a marker-free amount token into a Decimal.

    Raises:
        MalformedAmount: If the token cannot be parsed
    """
    return normalize_amount(token, suffixes=()).value
