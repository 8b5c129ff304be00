"""Tests for statement amount normalization."""

import pytest
from decimal import Decimal

from bankledger.domain.errors import MalformedAmount
from bankledger.utils.amount_parser import (
    AmountRole,
    DEBIT_SUFFIX,
    normalize_amount,
    parse_amount,
)


def test_plain_amount():
    """Test parsing an amount without separators."""
    result = normalize_amount("54882.66")
    assert result.value == Decimal("54882.66")
    assert result.role is AmountRole.UNMARKED


@pytest.mark.parametrize("token", ["54,882.66", "54 882.66", "  54,882.66  "])
def test_thousands_separators(token):
    """Test comma and space thousands separators."""
    assert normalize_amount(token).value == Decimal("54882.66")


def test_debit_suffix():
    """Test trailing minus marks a debit."""
    result = normalize_amount("1,310.00-")
    assert result.value == Decimal("1310.00")
    assert result.role is AmountRole.DEBIT
    assert result.signed == Decimal("-1310.00")


def test_credit_suffix():
    """Test trailing Cr marks a credit."""
    result = normalize_amount("7,500.00Cr")
    assert result.value == Decimal("7500.00")
    assert result.role is AmountRole.CREDIT
    assert result.signed == Decimal("7500.00")


def test_credit_suffix_not_recognized_when_not_allowed():
    """Test a format without credit markers rejects Cr tokens."""
    with pytest.raises(MalformedAmount):
        normalize_amount("7,500.00Cr", suffixes=(DEBIT_SUFFIX,))


def test_value_has_two_places():
    """Test parsed values keep two decimal places."""
    assert str(normalize_amount("10.00").value) == "10.00"


@pytest.mark.parametrize(
    "token", ["", "   ", "abc", "12.5", "12.345", "1,2a4.00", "1,2,3.45", "12,34.00"]
)
def test_malformed_amounts(token):
    """Test malformed tokens raise MalformedAmount."""
    with pytest.raises(MalformedAmount) as exc_info:
        normalize_amount(token)
    assert exc_info.value.token == token


def test_parse_amount_ignores_markers():
    """Test parse_amount only accepts marker-free tokens."""
    assert parse_amount("1,234.56") == Decimal("1234.56")
    with pytest.raises(MalformedAmount):
        parse_amount("1,234.56-")


def test_misgrouped_separators_rejected():
    """Test separators must split the integer part into groups of three."""
    with pytest.raises(MalformedAmount) as exc_info:
        normalize_amount("1,2,3.45")
    assert "thousands" in str(exc_info.value)
