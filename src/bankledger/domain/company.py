"""Company domain service."""

from typing import Optional
from bankledger.database.base import Database
from bankledger.domain.entities import Company as CompanyEntity
from bankledger.domain.errors import ConflictError, ValidationError


class CompanyService:
    """Service for managing companies."""

    def __init__(self, db: Database):
        """Initialize company service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_company(self, name: str) -> int:
        """Create a new company.

        Args:
            name: Company name

        Returns:
            Company ID

        Raises:
            ValidationError: If name is blank
            ConflictError: If a company with the same name exists
        """
        name = name.strip()
        if not name:
            raise ValidationError("Company name cannot be empty")
        if self.db.get_company_by_name(name) is not None:
            raise ConflictError(f"Company with name '{name}' already exists")
        return self.db.create_company(name=name)

    def get_company(self, company_id: int) -> Optional[CompanyEntity]:
        """Get company by ID."""
        return self.db.get_company(company_id)

    def get_company_by_name(self, name: str) -> Optional[CompanyEntity]:
        """Get company by name."""
        return self.db.get_company_by_name(name)

    def list_companies(self) -> list[CompanyEntity]:
        """List all companies."""
        return self.db.list_companies()
