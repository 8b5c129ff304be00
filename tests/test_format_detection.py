"""Tests for bank format lookup and detection."""

import pytest

from bankledger.domain.entities import StatementDocument
from bankledger.domain.errors import ValidationError
from bankledger.parsing import BankFormat, detect_bank_format, parse_statement


@pytest.mark.parametrize(
    "fixture_name, expected",
    [
        ("standard_bank_statement.txt", BankFormat.STANDARD_BANK),
        ("fnb_statement.txt", BankFormat.FNB),
        ("absa_statement.txt", BankFormat.ABSA),
    ],
)
def test_detect_from_header(load_fixture, fixture_name, expected):
    """Test header signatures identify each bank."""
    assert detect_bank_format(load_fixture(fixture_name)) is expected


def test_detect_from_line_shapes():
    """Test detection without a header counts recognized transaction lines."""
    lines = [
        "IMMEDIATE PAYMENT 1,310.00- 03 16 24,106.81",
        "ABC TRADING SUPPLIES",
        "MAGTAPE CREDIT 7,500.00 03 18 31,606.81",
    ]
    assert detect_bank_format(lines) is BankFormat.STANDARD_BANK


def test_detect_unknown(load_fixture):
    """Test unrecognizable documents are rejected."""
    with pytest.raises(ValidationError, match="Could not detect bank format"):
        detect_bank_format(load_fixture("unknown_statement.txt"))


def test_detect_tie_is_rejected():
    """Test a document two layouts read equally well is rejected."""
    lines = ["01/03/2023 Deposit Customer  100.00  1,100.00"]
    with pytest.raises(ValidationError):
        detect_bank_format(lines)


@pytest.mark.parametrize("name", ["absa", "ABSA", "standard-bank", "Standard Bank", "fnb"])
def test_from_name(name):
    """Test format names are matched leniently."""
    assert BankFormat.from_name(name) in BankFormat


def test_from_name_unknown():
    """Test unknown format names raise ValidationError."""
    with pytest.raises(ValidationError, match="Unknown bank format"):
        BankFormat.from_name("nedbank")


def test_parse_statement_detects_format(load_fixture):
    """Test parse_statement detects the layout when none is given."""
    document = StatementDocument(
        lines=load_fixture("absa_statement.txt"),
        company_id=1,
        fiscal_period_id=1,
        source_name="absa.txt",
    )
    outcome = parse_statement(document)

    assert len(outcome.transactions) == 10
    assert outcome.transactions[0].source_reference.startswith("absa.txt:")


@pytest.mark.parametrize(
    "fixture_name",
    ["standard_bank_statement.txt", "fnb_statement.txt", "absa_statement.txt"],
)
def test_never_both_debit_and_credit(load_fixture, fixture_name):
    """Test no parsed transaction carries both a debit and a credit."""
    document = StatementDocument(
        lines=load_fixture(fixture_name), company_id=1, fiscal_period_id=1
    )
    outcome = parse_statement(document)

    assert outcome.transactions
    for txn in outcome.transactions:
        assert not (txn.debit_amount > 0 and txn.credit_amount > 0)
        assert txn.details
