"""Chart of accounts domain service."""

from typing import Optional
from bankledger.database.base import Database
from bankledger.domain.entities import Account as AccountEntity, AccountCategory
from bankledger.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    account_code_not_found,
    company_not_found,
)

# Standard chart installed by "init-chart". Codes are the ones the standard
# mapping rules in bankledger.domain.mapping_rules post to.
STANDARD_ACCOUNTS = [
    ("1000", "Bank", AccountCategory.ASSET),
    ("1100", "Accounts Receivable", AccountCategory.ASSET),
    ("2000", "Accounts Payable", AccountCategory.LIABILITY),
    ("2100", "Loans Payable", AccountCategory.LIABILITY),
    ("3000", "Owner's Equity", AccountCategory.EQUITY),
    ("3100", "Owner's Drawings", AccountCategory.EQUITY),
    ("4000", "Sales Revenue", AccountCategory.REVENUE),
    ("4100", "Other Income", AccountCategory.REVENUE),
    ("5000", "Cost of Sales", AccountCategory.EXPENSE),
    ("8100", "Salaries and Wages", AccountCategory.EXPENSE),
    ("8200", "Rent", AccountCategory.EXPENSE),
    ("8300", "Utilities", AccountCategory.EXPENSE),
    ("8400", "Telephone and Internet", AccountCategory.EXPENSE),
    ("8500", "Insurance", AccountCategory.EXPENSE),
    ("8600", "Fuel and Motor Vehicle", AccountCategory.EXPENSE),
    ("9500", "Interest", AccountCategory.EXPENSE),
    ("9600", "Bank Charges", AccountCategory.EXPENSE),
    ("9999", "Suspense", AccountCategory.ASSET),
]


class AccountService:
    """Service for managing a company's chart of accounts."""

    def __init__(self, db: Database):
        """Initialize account service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_account(
        self,
        company_id: int,
        code: str,
        name: str,
        category: AccountCategory | str,
    ) -> int:
        """Create a new account.

        Args:
            company_id: Owning company ID
            code: Account code, unique per company
            name: Account name
            category: Account category

        Returns:
            Account ID

        Raises:
            NotFoundError: If company doesn't exist
            ValidationError: If code or name is blank, or category unknown
            ConflictError: If code already exists for the company
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))
        code = code.strip()
        name = name.strip()
        if not code or not name:
            raise ValidationError("Account code and name cannot be empty")
        try:
            category = AccountCategory(category)
        except ValueError:
            choices = ", ".join(c.value for c in AccountCategory)
            raise ValidationError(f"Unknown account category '{category}' (choose from {choices})")
        if self.db.get_account_by_code(company_id, code) is not None:
            raise ConflictError(f"Account '{code}' already exists for company {company_id}")

        return self.db.create_account(company_id=company_id, code=code, name=name, category=category)

    def get_account(self, account_id: int) -> Optional[AccountEntity]:
        """Get account by ID."""
        return self.db.get_account(account_id)

    def get_account_by_code(self, company_id: int, code: str) -> Optional[AccountEntity]:
        """Get a company's account by code."""
        return self.db.get_account_by_code(company_id, code)

    def list_accounts(self, company_id: int, include_inactive: bool = True) -> list[AccountEntity]:
        """List a company's accounts ordered by code."""
        return self.db.list_accounts(company_id, include_inactive=include_inactive)

    def deactivate_account(self, company_id: int, code: str) -> None:
        """Deactivate an account so it can no longer be posted to.

        Raises:
            NotFoundError: If the account doesn't exist for the company
        """
        account = self.db.get_account_by_code(company_id, code)
        if account is None:
            raise NotFoundError(account_code_not_found(code, company_id))
        self.db.set_account_active(account.id, False)

    def install_standard_chart(self, company_id: int) -> int:
        """Create the standard accounts the company does not have yet.

        Returns:
            Number of accounts created
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))
        created = 0
        for code, name, category in STANDARD_ACCOUNTS:
            if self.db.get_account_by_code(company_id, code) is None:
                self.db.create_account(company_id=company_id, code=code, name=name, category=category)
                created += 1
        return created
