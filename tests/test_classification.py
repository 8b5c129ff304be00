"""Tests for rule matching and journal entry posting."""

import pytest
from datetime import date
from decimal import Decimal

from bankledger.domain.entities import MappingRule, MatchType, StandardizedTransaction
from bankledger.domain.errors import NotFoundError, ValidationError
from bankledger.domain.classification import rule_matches


def _rule(pattern, match_type=MatchType.CONTAINS, priority=100, rule_id=1, active=True):
    return MappingRule(
        id=rule_id,
        company_id=1,
        pattern=pattern,
        debit_account_code="9600",
        credit_account_code="1000",
        priority=priority,
        description=None,
        match_type=match_type,
        is_active=active,
    )


def _store(db, company_id, details, debit="0.00", credit="0.00", fee="0.00"):
    transaction_id = db.save_transaction(
        company_id,
        None,
        StandardizedTransaction(
            date=date(2023, 3, 15),
            details=details,
            balance=Decimal("1000.00"),
            debit_amount=Decimal(debit),
            credit_amount=Decimal(credit),
            service_fee=Decimal(fee),
        ),
    )
    return db.get_transaction(transaction_id)


@pytest.mark.parametrize(
    "pattern, match_type, details, expected",
    [
        ("service fee", MatchType.CONTAINS, "MONTHLY SERVICE FEE", True),
        ("RENT", MatchType.STARTS_WITH, "Rent March", True),
        ("RENT", MatchType.STARTS_WITH, "Current account", False),
        ("PAYROLL", MatchType.ENDS_WITH, "MAGTAPE CREDIT ACME PAYROLL", True),
        ("bank charges", MatchType.EQUALS, "  Bank Charges ", True),
        ("bank charges", MatchType.EQUALS, "Bank Charges April", False),
        (r"\bFEES?\b", MatchType.REGEX, "Atm Fee", True),
        (r"\bFEES?\b", MatchType.REGEX, "Coffee Shop", False),
    ],
)
def test_rule_matches(pattern, match_type, details, expected):
    """Test each match type."""
    assert rule_matches(_rule(pattern, match_type), details) is expected


def test_find_rule_uses_priority_then_order(engine):
    """Test the lowest priority wins, with declaration order breaking ties."""
    rules = [
        _rule("INTEREST", priority=40, rule_id=1),
        _rule("EXCESS INTEREST", priority=9, rule_id=2),
        _rule("EXCESS", priority=9, rule_id=3),
    ]
    assert engine.find_rule("EXCESS INTEREST", rules).id == 2


def test_find_rule_skips_inactive(engine):
    """Test inactive rules never match."""
    rules = [_rule("FEE", active=False, rule_id=1), _rule("FEE", priority=200, rule_id=2)]
    assert engine.find_rule("SERVICE FEE", rules).id == 2


def test_classify_posts_balanced_entry(temp_db, engine, standard_chart):
    """Test a matching rule posts a two-line balanced entry."""
    txn = _store(temp_db, standard_chart.id, "EXCESS INTEREST", debit="12.40")
    rules = temp_db.list_mapping_rules(standard_chart.id)

    entry = engine.classify(txn, rules)

    assert entry is not None
    assert entry.is_balanced
    assert entry.reference == f"AUTO-{txn.id}"
    assert [line.line_number for line in entry.lines] == [1, 2]
    assert entry.debit_line.account_code == "9500"
    assert entry.credit_line.account_code == "1000"
    assert entry.total_debit == Decimal("12.40")


def test_classify_service_fee_row(temp_db, engine, standard_chart):
    """Test a fee-only row posts the fee amount."""
    txn = _store(temp_db, standard_chart.id, "FEE: IMMEDIATE PAYMENT", fee="35.00")
    assert txn.is_service_fee_only
    assert txn.amount == Decimal("35.00")

    entry = engine.classify(txn, temp_db.list_mapping_rules(standard_chart.id))

    assert entry.debit_line.account_code == "9600"
    assert entry.total_credit == Decimal("35.00")


def test_classify_without_match(temp_db, engine, standard_chart):
    """Test unmatched transactions stay unclassified."""
    txn = _store(temp_db, standard_chart.id, "IMMEDIATE PAYMENT ABC TRADING", debit="1310.00")

    assert engine.classify(txn, temp_db.list_mapping_rules(standard_chart.id)) is None
    assert temp_db.find_journal_entry_by_transaction_id(txn.id) is None


def test_classify_balance_only_row(temp_db, engine, standard_chart):
    """Test rows with nothing to post stay unclassified."""
    txn = _store(temp_db, standard_chart.id, "BALANCE BROUGHT FORWARD")
    assert engine.classify(txn, temp_db.list_mapping_rules(standard_chart.id)) is None


def test_classify_with_inactive_account(temp_db, engine, account_service, standard_chart):
    """Test rules pointing at inactive accounts are not applied."""
    account_service.deactivate_account(standard_chart.id, "9500")
    txn = _store(temp_db, standard_chart.id, "EXCESS INTEREST", debit="12.40")

    assert engine.classify(txn, temp_db.list_mapping_rules(standard_chart.id)) is None


def _account_id(account_service, company_id, code):
    return account_service.get_account_by_code(company_id, code).id


def test_update_classification_creates_entry(temp_db, engine, account_service, standard_chart):
    """Test manual classification of an unclassified transaction."""
    txn = _store(temp_db, standard_chart.id, "IMMEDIATE PAYMENT ABC TRADING", debit="1310.00")
    debit_id = _account_id(account_service, standard_chart.id, "5000")
    credit_id = _account_id(account_service, standard_chart.id, "1000")

    entry = engine.update_classification(standard_chart.id, txn.id, debit_id, credit_id)

    assert entry.reference == f"MANUAL-{txn.id}"
    assert entry.description == "Cost of Sales - Bank"
    assert entry.debit_line.account_id == debit_id
    assert entry.credit_line.account_id == credit_id
    assert entry.total_debit == Decimal("1310.00")


def test_update_classification_keeps_header(temp_db, engine, account_service, standard_chart):
    """Test reclassifying changes the accounts but keeps the entry."""
    txn = _store(temp_db, standard_chart.id, "MONTHLY SERVICE FEE", debit="65.00")
    original = engine.classify(txn, temp_db.list_mapping_rules(standard_chart.id))
    suspense_id = _account_id(account_service, standard_chart.id, "9999")
    bank_id = _account_id(account_service, standard_chart.id, "1000")

    updated = engine.update_classification(standard_chart.id, txn.id, suspense_id, bank_id)

    assert updated.id == original.id
    assert updated.reference == original.reference
    assert updated.description == original.description
    assert [line.id for line in updated.lines] == [line.id for line in original.lines]
    assert updated.debit_line.account_code == "9999"


def test_update_classification_is_idempotent(temp_db, engine, account_service, standard_chart):
    """Test applying the same pair twice leaves the entry unchanged."""
    txn = _store(temp_db, standard_chart.id, "DEPOSIT", credit="500.00")
    bank_id = _account_id(account_service, standard_chart.id, "1000")
    sales_id = _account_id(account_service, standard_chart.id, "4000")

    first = engine.update_classification(standard_chart.id, txn.id, bank_id, sales_id)
    second = engine.update_classification(standard_chart.id, txn.id, bank_id, sales_id)

    assert first == second


def test_update_classification_same_accounts(temp_db, engine, account_service, standard_chart):
    """Test debit and credit must be different accounts."""
    txn = _store(temp_db, standard_chart.id, "DEPOSIT", credit="500.00")
    bank_id = _account_id(account_service, standard_chart.id, "1000")

    with pytest.raises(ValidationError, match="must differ"):
        engine.update_classification(standard_chart.id, txn.id, bank_id, bank_id)


def test_update_classification_other_company(
    temp_db, engine, company_service, account_service, standard_chart
):
    """Test accounts of another company are rejected."""
    other_id = company_service.create_company("Other Co")
    account_service.install_standard_chart(other_id)
    txn = _store(temp_db, standard_chart.id, "DEPOSIT", credit="500.00")
    foreign_id = _account_id(account_service, other_id, "1000")
    sales_id = _account_id(account_service, standard_chart.id, "4000")

    with pytest.raises(ValidationError, match="does not belong"):
        engine.update_classification(standard_chart.id, txn.id, foreign_id, sales_id)


def test_update_classification_inactive_account(temp_db, engine, account_service, standard_chart):
    """Test inactive accounts cannot be posted to."""
    txn = _store(temp_db, standard_chart.id, "DEPOSIT", credit="500.00")
    account_service.deactivate_account(standard_chart.id, "4000")
    bank_id = _account_id(account_service, standard_chart.id, "1000")
    sales_id = _account_id(account_service, standard_chart.id, "4000")

    with pytest.raises(ValidationError, match="inactive"):
        engine.update_classification(standard_chart.id, txn.id, bank_id, sales_id)


def test_update_classification_missing_transaction(engine, account_service, standard_chart):
    """Test unknown transactions raise NotFoundError."""
    bank_id = _account_id(account_service, standard_chart.id, "1000")
    sales_id = _account_id(account_service, standard_chart.id, "4000")

    with pytest.raises(NotFoundError):
        engine.update_classification(standard_chart.id, 999, bank_id, sales_id)


def test_resolve_account_id(engine, account_service, standard_chart):
    """Test accounts resolve by code first, then by ID."""
    bank = account_service.get_account_by_code(standard_chart.id, "1000")

    assert engine.resolve_account_id(standard_chart.id, "1000") == bank.id
    assert engine.resolve_account_id(standard_chart.id, bank.id) == bank.id
    with pytest.raises(NotFoundError):
        engine.resolve_account_id(standard_chart.id, "nope")


def test_classify_unclassified(temp_db, engine, standard_chart):
    """Test the batch pass classifies what the rules cover."""
    fee = _store(temp_db, standard_chart.id, "SERVICE FEE", debit="65.00")
    other = _store(temp_db, standard_chart.id, "TRANSFER TO SAVINGS", debit="100.00")

    result = engine.classify_unclassified(standard_chart.id)

    assert result == {"classified": [fee.id], "unclassified": [other.id]}
    remaining = temp_db.list_transactions(standard_chart.id, unclassified_only=True)
    assert [t.id for t in remaining] == [other.id]
