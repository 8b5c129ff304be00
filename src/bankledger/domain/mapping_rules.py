"""Mapping rule domain service."""

import re
from typing import Optional
from bankledger.database.base import Database
from bankledger.domain.entities import MappingRule as MappingRuleEntity, MatchType
from bankledger.domain.errors import (
    NotFoundError,
    ValidationError,
    account_code_not_found,
    company_not_found,
)

DEFAULT_PRIORITY = 100

# (pattern, match type, debit code, credit code, priority, description)
STANDARD_RULES = [
    ("EXCESS INTEREST", MatchType.CONTAINS, "9500", "1000", 9, "Excess interest charged"),
    ("SERVICE FEE", MatchType.CONTAINS, "9600", "1000", 20, "Bank service fees"),
    (r"\bFEES?\b", MatchType.REGEX, "9600", "1000", 30, "Bank fees"),
    (r"\bCHARGES?\b", MatchType.REGEX, "9600", "1000", 30, "Bank charges"),
    ("INTEREST", MatchType.CONTAINS, "1000", "4100", 40, "Interest received"),
    ("SALARY", MatchType.CONTAINS, "8100", "1000", 50, "Salaries paid"),
    ("WAGES", MatchType.CONTAINS, "8100", "1000", 50, "Wages paid"),
    ("RENT", MatchType.STARTS_WITH, "8200", "1000", 50, "Rent paid"),
    ("INSURANCE", MatchType.CONTAINS, "8500", "1000", 60, "Insurance premiums"),
    ("FUEL", MatchType.CONTAINS, "8600", "1000", 60, "Fuel purchases"),
    ("MAGTAPE CREDIT", MatchType.CONTAINS, "1000", "4000", 70, "Customer receipts"),
    ("DEPOSIT", MatchType.CONTAINS, "1000", "4000", 80, "Deposits received"),
]


def validate_pattern(pattern: str, match_type: MatchType) -> None:
    """Reject blank patterns and regular expressions that do not compile.

    Raises:
        ValidationError: If the pattern is unusable
    """
    if not pattern or not pattern.strip():
        raise ValidationError("Rule pattern cannot be empty")
    if match_type is MatchType.REGEX:
        try:
            re.compile(pattern)
        except re.error as e:
            raise ValidationError(f"Invalid regular expression '{pattern}': {e}")


class MappingRuleService:
    """Service for managing classification rules."""

    def __init__(self, db: Database):
        """Initialize mapping rule service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_rule(
        self,
        company_id: int,
        pattern: str,
        debit_account_code: str,
        credit_account_code: str,
        priority: int = DEFAULT_PRIORITY,
        match_type: MatchType | str = MatchType.CONTAINS,
        description: Optional[str] = None,
    ) -> int:
        """Create a classification rule.

        Args:
            company_id: Owning company ID
            pattern: Text or regular expression matched against details
            debit_account_code: Account debited when the rule matches
            credit_account_code: Account credited when the rule matches
            priority: Lower values are evaluated first
            match_type: How the pattern is compared
            description: Optional note

        Returns:
            Rule ID

        Raises:
            NotFoundError: If the company or either account doesn't exist
            ValidationError: If the pattern or match type is invalid
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))
        try:
            match_type = MatchType(match_type)
        except ValueError:
            choices = ", ".join(m.value for m in MatchType)
            raise ValidationError(f"Unknown match type '{match_type}' (choose from {choices})")
        validate_pattern(pattern, match_type)
        for code in (debit_account_code, credit_account_code):
            if self.db.get_account_by_code(company_id, code) is None:
                raise NotFoundError(account_code_not_found(code, company_id))

        return self.db.create_mapping_rule(
            company_id=company_id,
            pattern=pattern,
            debit_account_code=debit_account_code,
            credit_account_code=credit_account_code,
            priority=priority,
            match_type=match_type,
            description=description,
        )

    def list_rules(self, company_id: int, active_only: bool = True) -> list[MappingRuleEntity]:
        """List a company's rules in evaluation order."""
        return self.db.list_mapping_rules(company_id, active_only=active_only)

    def install_standard_rules(self, company_id: int) -> int:
        """Create the standard rules the company does not have yet.

        Rules whose accounts are missing from the chart are skipped.

        Returns:
            Number of rules created
        """
        existing = {
            (r.pattern, r.match_type, r.debit_account_code, r.credit_account_code)
            for r in self.db.list_mapping_rules(company_id, active_only=False)
        }
        created = 0
        for pattern, match_type, debit, credit, priority, description in STANDARD_RULES:
            if (pattern, match_type, debit, credit) in existing:
                continue
            if (
                self.db.get_account_by_code(company_id, debit) is None
                or self.db.get_account_by_code(company_id, credit) is None
            ):
                continue
            self.create_rule(
                company_id=company_id,
                pattern=pattern,
                debit_account_code=debit,
                credit_account_code=credit,
                priority=priority,
                match_type=match_type,
                description=description,
            )
            created += 1
        return created
