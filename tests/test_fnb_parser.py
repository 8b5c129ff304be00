"""Tests for the FNB statement layout."""

import pytest
from datetime import date
from decimal import Decimal

from bankledger.domain.errors import MalformedAmount
from bankledger.parsing.base import LineKind, ParseContext, StatementParser
from bankledger.parsing.fnb import FNB, classify_line, extract_line, format_reference


@pytest.fixture
def context():
    return ParseContext(statement_start=date(2023, 3, 1), statement_end=date(2024, 2, 29))


def test_credit_suffix(context):
    """Test a Cr suffix makes the amount a credit."""
    fields = extract_line(
        "02 Apr Magtape Credit Acme Payroll 7,500.00Cr 5,969.38Cr", context, None
    )

    assert fields.date == date(2023, 4, 2)
    assert fields.description == "Magtape Credit Acme Payroll"
    assert fields.credit_amount == Decimal("7500.00")
    assert fields.debit_amount == Decimal("0")
    assert fields.balance == Decimal("5969.38")


def test_unmarked_amount_is_debit(context):
    """Test an amount without a suffix is a debit."""
    fields = extract_line("03 Apr POS Purchase Checkers 245.50 5,723.88Cr", context, None)

    assert fields.debit_amount == Decimal("245.50")
    assert fields.credit_amount == Decimal("0")


def test_full_date(context):
    """Test DD/MM/YYYY dates are accepted."""
    fields = extract_line("12/04/2023 Transfer From Savings 2,000.00Cr 3,711.38Cr", context, None)
    assert fields.date == date(2023, 4, 12)


def test_year_less_date_in_second_calendar_year(context):
    """Test January dates of a March fiscal year land in the following year."""
    fields = extract_line("15 Jan Debit Order Insurer 300.00 1,000.00Cr", context, None)
    assert fields.date == date(2024, 1, 15)


def test_bank_charge_inherits_date(context):
    """Test # lines take the date of the previous transaction."""
    previous = extract_line("03 Apr POS Purchase Checkers 245.50 5,723.88Cr", context, None)
    fields = extract_line("#Service Fees 12.50 5,711.38Cr", context, previous)

    assert fields.date == previous.date
    assert fields.service_fee == Decimal("12.50")
    assert fields.debit_amount == Decimal("0")
    assert fields.description == "Service Fees"


def test_bank_charge_without_amounts(context):
    """Test a bank charge line without fee and balance is malformed."""
    previous = extract_line("03 Apr POS Purchase Checkers 245.50 5,723.88Cr", context, None)
    with pytest.raises(MalformedAmount):
        extract_line("#Service Fees 12.50", context, previous)


def test_line_without_balance(context):
    """Test a dated line without amounts is malformed."""
    with pytest.raises(MalformedAmount):
        extract_line("03 Apr POS Purchase Checkers", context, None)


def test_format_reference():
    """Test Ref: fragments are rendered in parentheses."""
    assert format_reference("Payment Ref: 12345") == "Payment (Ref: 12345)"
    assert format_reference("No reference here") == "No reference here"


def test_classify_lines(context):
    """Test transaction, continuation and ignored lines."""
    assert classify_line("02 Apr Magtape Credit 7,500.00Cr 5,969.38Cr", context) is LineKind.NEW_TRANSACTION
    assert classify_line("#Service Fees 12.50 5,711.38Cr", context) is LineKind.NEW_TRANSACTION
    assert classify_line("Rent April", context) is LineKind.CONTINUATION
    assert classify_line("Closing Balance 3,711.38Cr", context) is LineKind.IGNORED
    assert classify_line("31/02/2023 Bad date 1.00 2.00Cr", context) is LineKind.IGNORED


def test_bank_charge_first_line_is_skipped():
    """Test a bank charge with nothing before it is reported, not emitted."""
    outcome = StatementParser(FNB).parse(["#Service Fees 12.50 5,711.38Cr"])

    assert outcome.transactions == []
    assert len(outcome.skipped) == 1
    assert outcome.skipped[0].line_number == 1


def test_fixture_statement(load_fixture):
    """Test parsing a full FNB statement."""
    parser = StatementParser(
        FNB, statement_start=date(2023, 3, 1), statement_end=date(2024, 2, 29)
    )
    outcome = parser.parse(load_fixture("fnb_statement.txt"))

    assert outcome.skipped == []
    assert len(outcome.transactions) == 5
    charge = outcome.transactions[2]
    assert charge.date == date(2023, 4, 3)
    assert charge.service_fee == Decimal("12.50")
    rent = outcome.transactions[3]
    assert rent.details == "Internet Pmt To Landlord (Ref: APR RENT) Rent April"
    assert rent.debit_amount == Decimal("4000.00")
