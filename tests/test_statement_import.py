"""Tests for the statement import pipeline."""

import pytest
from datetime import date
from decimal import Decimal

from bankledger.domain.entities import RejectionReason, StatementDocument
from bankledger.domain.errors import DocumentError
from bankledger.domain.statement_import import read_statement_lines
from bankledger.parsing import BankFormat


def _document(lines, company, period, name="statement.txt"):
    return StatementDocument(
        lines=tuple(lines),
        company_id=company.id,
        fiscal_period_id=period.id,
        source_name=name,
    )


def test_mixed_batch(import_service, load_fixture, standard_chart, sample_period):
    """Test duplicates and out-of-period rows are rejected with reasons."""
    lines = load_fixture("absa_statement.txt")
    already_imported = [
        line for line in lines if line.startswith(("01/03/2023", "07/03/2023"))
    ]
    first = import_service.process_document(
        _document(already_imported, standard_chart, sample_period, "earlier.txt"),
        bank_format=BankFormat.ABSA,
    )
    assert first.saved_count == 2

    result = import_service.process_document(
        _document(lines, standard_chart, sample_period, "absa.txt")
    )

    assert result.bank_format == "ABSA"
    assert result.total_transactions == 10
    assert result.saved_count == 5
    assert result.duplicate_count == 2
    assert result.out_of_period_count == 3
    assert result.validation_error_count == 0
    assert len(result.rejected) == 5
    reasons = [r.reason for r in result.rejected]
    assert reasons.count(RejectionReason.DUPLICATE) == 2
    assert reasons.count(RejectionReason.OUT_OF_PERIOD) == 3
    out_of_period = [r for r in result.rejected if r.reason is RejectionReason.OUT_OF_PERIOD]
    assert out_of_period[0].date == date(2023, 2, 23)
    assert out_of_period[0].description == "Atm Payment Fr Killarney Card No. 5392 Bank Branch"
    assert "6 days before period start" in out_of_period[0].reason_detail


def test_mixed_batch_classification(
    import_service, transaction_service, load_fixture, standard_chart, sample_period
):
    """Test saved rows are classified where a rule matches."""
    result = import_service.process_document(
        _document(load_fixture("absa_statement.txt"), standard_chart, sample_period)
    )

    assert result.saved_count == 7
    assert len(result.unclassified_transaction_ids) == 2
    unclassified = [
        transaction_service.get_transaction(i).details
        for i in result.unclassified_transaction_ids
    ]
    assert unclassified == ["Payment To Landlord Rent", "Transfer To Savings"]

    for transaction_id in result.saved_transaction_ids:
        entry = transaction_service.get_journal_entry(transaction_id)
        if transaction_id in result.unclassified_transaction_ids:
            assert entry is None
        else:
            assert entry.is_balanced
            assert len(entry.lines) == 2


def test_resubmission_is_all_duplicates(import_service, load_fixture, standard_chart, sample_period):
    """Test importing the same statement twice saves nothing the second time."""
    document = _document(load_fixture("fnb_statement.txt"), standard_chart, sample_period)

    first = import_service.process_document(document)
    second = import_service.process_document(document)

    assert first.saved_count == first.total_transactions == 5
    assert second.saved_count == 0
    assert second.duplicate_count == second.total_transactions
    assert all("already exists (uploaded on" in r.reason_detail for r in second.rejected)


def test_duplicates_within_one_document(import_service, standard_chart, sample_period):
    """Test a row repeated inside one document is saved once."""
    line = "01/03/2023  Deposit Customer Acme  25,000.00  81,287.66"
    result = import_service.process_document(
        _document([line, line], standard_chart, sample_period), bank_format=BankFormat.ABSA
    )

    assert result.saved_count == 1
    assert result.duplicate_count == 1


def test_standard_bank_statement(
    import_service, transaction_service, load_fixture, standard_chart, sample_period
):
    """Test a Standard Bank import stores signed columns and posts rule entries."""
    result = import_service.process_document(
        _document(load_fixture("standard_bank_statement.txt"), standard_chart, sample_period)
    )

    assert result.bank_format == "STANDARD_BANK"
    assert result.saved_count == 6
    stored = transaction_service.list_transactions(standard_chart.id)
    fee = next(t for t in stored if t.details == "FEE: IMMEDIATE PAYMENT")
    assert fee.service_fee == Decimal("35.00")
    entry = transaction_service.get_journal_entry(fee.id)
    assert entry.debit_line.account_code == "9600"
    assert entry.credit_line.account_code == "1000"

    receipt = next(t for t in stored if t.details == "MAGTAPE CREDIT ACME PAYROLL")
    entry = transaction_service.get_journal_entry(receipt.id)
    assert entry.debit_line.account_code == "1000"
    assert entry.credit_line.account_code == "4000"


def test_skipped_lines_are_reported(import_service, standard_chart, sample_period):
    """Test malformed lines are reported and the rest is imported."""
    lines = [
        "01/03/2023  Deposit Customer Acme  25,000.00  81,287.66",
        "02/03/2023  Mystery Line  1.00  2.00  3.00  4.00",
        "03/03/2023  Service Fee  65.00  81,222.66",
    ]
    result = import_service.process_document(
        _document(lines, standard_chart, sample_period), bank_format=BankFormat.ABSA
    )

    assert result.saved_count == 2
    assert [s.line_number for s in result.skipped_lines] == [2]


def test_empty_document(import_service, standard_chart, sample_period):
    """Test empty documents are refused."""
    with pytest.raises(DocumentError, match="empty"):
        import_service.process_document(_document(["", "  "], standard_chart, sample_period))


def test_undetectable_document(import_service, load_fixture, standard_chart, sample_period):
    """Test documents of unknown layout are refused."""
    with pytest.raises(DocumentError, match="Could not detect bank format"):
        import_service.process_document(
            _document(load_fixture("unknown_statement.txt"), standard_chart, sample_period)
        )


def test_period_of_other_company(import_service, company_service, sample_period):
    """Test a period must belong to the importing company."""
    other_id = company_service.create_company("Other Co")
    other = company_service.get_company(other_id)

    with pytest.raises(DocumentError, match="does not belong"):
        import_service.process_document(
            _document(["01/03/2023  Deposit  1.00  2.00"], other, sample_period)
        )


def test_import_file(import_service, fixtures_dir, standard_chart, sample_period):
    """Test importing straight from a file path."""
    result = import_service.import_file(
        fixtures_dir / "fnb_statement.txt", standard_chart.id, sample_period.id
    )

    assert result.source_name == "fnb_statement.txt"
    assert result.saved_count == 5


def test_read_missing_file(tmp_path):
    """Test unreadable statement files raise DocumentError."""
    with pytest.raises(DocumentError, match="not found"):
        read_statement_lines(tmp_path / "missing.txt")


def test_process_documents_in_parallel(
    import_service, load_fixture, standard_chart, sample_period
):
    """Test independent documents processed by a worker pool."""
    documents = [
        _document(load_fixture("fnb_statement.txt"), standard_chart, sample_period, "fnb.txt"),
        _document(load_fixture("unknown_statement.txt"), standard_chart, sample_period, "x.txt"),
        _document(
            load_fixture("standard_bank_statement.txt"), standard_chart, sample_period, "sb.txt"
        ),
    ]

    results = import_service.process_documents(documents, max_workers=3)

    assert [r.source_name for r in results] == ["fnb.txt", "x.txt", "sb.txt"]
    assert results[0].saved_count == 5
    assert results[1].error is not None
    assert results[2].saved_count == 6
