"""Rule-driven double-entry classification."""

import logging
import re
from typing import Any, Iterable, Optional

from bankledger.database.base import Database
from bankledger.domain.entities import (
    Account,
    BankTransaction,
    JournalEntry,
    JournalEntryLine,
    MappingRule,
    MatchType,
    ZERO,
)
from bankledger.domain.errors import (
    NotFoundError,
    ValidationError,
    account_code_not_found,
    account_not_found,
    not_owned_by_company,
    transaction_not_found,
)

logger = logging.getLogger(__name__)

RULE_REFERENCE_PREFIX = "AUTO"
MANUAL_REFERENCE_PREFIX = "MANUAL"


def rule_matches(rule: MappingRule, details: str) -> bool:
    """Check whether a rule's pattern matches transaction details.

    Text comparisons are case-insensitive; regular expressions are searched
    anywhere in the details.
    """
    if rule.match_type is MatchType.REGEX:
        return re.search(rule.pattern, details, re.IGNORECASE) is not None

    text = details.strip().lower()
    pattern = rule.pattern.strip().lower()
    if rule.match_type is MatchType.STARTS_WITH:
        return text.startswith(pattern)
    if rule.match_type is MatchType.ENDS_WITH:
        return text.endswith(pattern)
    if rule.match_type is MatchType.EQUALS:
        return text == pattern
    return pattern in text


class ClassificationEngine:
    """Turns bank transactions into balanced two-line journal entries."""

    def __init__(self, db: Database):
        """Initialize classification engine.

        Args:
            db: Database instance
        """
        self.db = db

    def find_rule(self, details: str, rules: Iterable[MappingRule]) -> Optional[MappingRule]:
        """Return the first active rule matching the details.

        Rules are evaluated by priority, then by declaration order.
        """
        for rule in sorted(rules, key=lambda r: (r.priority, r.id)):
            if rule.is_active and rule_matches(rule, details):
                return rule
        return None

    def build_entry(
        self,
        transaction: BankTransaction,
        debit_account: Account,
        credit_account: Account,
        description: str,
        reference: str,
    ) -> JournalEntry:
        """Build a journal entry posting the transaction's amount.

        Line 1 debits ``debit_account`` and line 2 credits ``credit_account``
        for the same amount.

        Raises:
            ValidationError: If the transaction has nothing to post
        """
        amount = transaction.amount
        if amount <= 0:
            raise ValidationError(
                f"Transaction {transaction.id} has no amount to post"
            )
        return JournalEntry(
            company_id=transaction.company_id,
            transaction_id=transaction.id,
            entry_date=transaction.date,
            description=description,
            reference=reference,
            lines=(
                JournalEntryLine(
                    account_code=debit_account.code,
                    account_id=debit_account.id,
                    debit_amount=amount,
                    credit_amount=ZERO,
                    line_number=1,
                    description=transaction.details,
                ),
                JournalEntryLine(
                    account_code=credit_account.code,
                    account_id=credit_account.id,
                    debit_amount=ZERO,
                    credit_amount=amount,
                    line_number=2,
                    description=transaction.details,
                ),
            ),
        )

    def _rule_accounts(
        self, rule: MappingRule, company_id: int
    ) -> Optional[tuple[Account, Account]]:
        accounts = []
        for code in (rule.debit_account_code, rule.credit_account_code):
            account = self.db.get_account_by_code(company_id, code)
            if account is None or not account.is_active:
                logger.warning(
                    "Rule %d skipped: account %s is missing or inactive", rule.id, code
                )
                return None
            accounts.append(account)
        return accounts[0], accounts[1]

    def classify(
        self, transaction: BankTransaction, rules: Iterable[MappingRule]
    ) -> Optional[JournalEntry]:
        """Post a journal entry for the first matching rule.

        Returns:
            The saved journal entry, or None when the transaction stays
            unclassified
        """
        if transaction.amount <= 0:
            logger.debug("Transaction %d has no amount to post", transaction.id)
            return None
        rule = self.find_rule(transaction.details, rules)
        if rule is None:
            logger.debug("No rule matches transaction %d '%s'", transaction.id, transaction.details)
            return None
        accounts = self._rule_accounts(rule, transaction.company_id)
        if accounts is None:
            return None

        entry = self.build_entry(
            transaction,
            accounts[0],
            accounts[1],
            description=rule.description or transaction.details,
            reference=f"{RULE_REFERENCE_PREFIX}-{transaction.id}",
        )
        self.db.save_or_update_journal_entry(entry)
        logger.debug("Transaction %d classified by rule %d", transaction.id, rule.id)
        return self.db.find_journal_entry_by_transaction_id(transaction.id)

    def _owned_active_account(self, company_id: int, account_id: int) -> Account:
        account = self.db.get_account(account_id)
        if account is None:
            raise NotFoundError(account_not_found(account_id))
        if account.company_id != company_id:
            raise ValidationError(not_owned_by_company("Account", account_id, company_id))
        if not account.is_active:
            raise ValidationError(f"Account {account.code} is inactive")
        return account

    def update_classification(
        self,
        company_id: int,
        transaction_id: int,
        debit_account_id: int,
        credit_account_id: int,
    ) -> JournalEntry:
        """Classify a transaction manually with an explicit account pair.

        Creates the journal entry if the transaction has none. Otherwise the
        existing header is kept and only the two lines' accounts change, so
        repeating the call with the same pair changes nothing.

        Raises:
            NotFoundError: If the transaction or an account doesn't exist
            ValidationError: If anything belongs to another company, an
                account is inactive, or the transaction has no amount
        """
        transaction = self.db.get_transaction(transaction_id)
        if transaction is None:
            raise NotFoundError(transaction_not_found(transaction_id))
        if transaction.company_id != company_id:
            raise ValidationError(not_owned_by_company("Transaction", transaction_id, company_id))
        if debit_account_id == credit_account_id:
            raise ValidationError("Debit and credit accounts must differ")

        debit_account = self._owned_active_account(company_id, debit_account_id)
        credit_account = self._owned_active_account(company_id, credit_account_id)

        existing = self.db.find_journal_entry_by_transaction_id(transaction_id)
        if existing is not None:
            description, reference = existing.description, existing.reference
        else:
            description = f"{debit_account.name} - {credit_account.name}"
            reference = f"{MANUAL_REFERENCE_PREFIX}-{transaction_id}"

        entry = self.build_entry(
            transaction, debit_account, credit_account, description=description, reference=reference
        )
        self.db.save_or_update_journal_entry(entry)
        return self.db.find_journal_entry_by_transaction_id(transaction_id)

    def resolve_account_id(self, company_id: int, account: str | int) -> int:
        """Resolve an account code or ID within a company.

        Codes take precedence over IDs, since codes are usually numeric too.

        Raises:
            NotFoundError: If no account matches
        """
        found = self.db.get_account_by_code(company_id, str(account))
        if found is not None:
            return found.id
        try:
            account_id = int(account)
        except (TypeError, ValueError):
            raise NotFoundError(account_code_not_found(str(account), company_id))
        if self.db.get_account(account_id) is None:
            raise NotFoundError(account_not_found(account_id))
        return account_id

    def classify_unclassified(self, company_id: int) -> dict[str, Any]:
        """Run the company's rules over every transaction without an entry.

        Returns:
            Dict with "classified" and "unclassified" transaction ID lists
        """
        rules = self.db.list_mapping_rules(company_id)
        classified = []
        unclassified = []
        for transaction in self.db.list_transactions(company_id, unclassified_only=True):
            if self.classify(transaction, rules) is not None:
                classified.append(transaction.id)
            else:
                unclassified.append(transaction.id)
        logger.info(
            "Company %d: %d classified, %d left unclassified",
            company_id,
            len(classified),
            len(unclassified),
        )
        return {"classified": classified, "unclassified": unclassified}
