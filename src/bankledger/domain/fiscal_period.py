"""Fiscal periods and boundary validation."""

from dataclasses import dataclass
from datetime import date
from typing import Optional

from bankledger.database.base import Database
from bankledger.domain.entities import FiscalPeriod
from bankledger.domain.errors import (
    ConflictError,
    NotFoundError,
    OutOfPeriod,
    ValidationError,
    company_not_found,
)


@dataclass(frozen=True)
class BoundaryCheck:
    """Result of checking a date against a fiscal period."""

    is_valid: bool
    message: str


def _days(count: int) -> str:
    return f"{count} day" if count == 1 else f"{count} days"


class FiscalPeriodBoundaryValidator:
    """Checks that transaction dates fall inside a fiscal period.

    Both ends of the period are inclusive.
    """

    def validate(self, tx_date: date, period: FiscalPeriod) -> BoundaryCheck:
        if tx_date is None:
            return BoundaryCheck(False, "Transaction has no date")
        if period.contains(tx_date):
            return BoundaryCheck(
                True, f"Transaction dated {tx_date.isoformat()} is within {period.name}"
            )

        if tx_date < period.start_date:
            margin = f"{_days((period.start_date - tx_date).days)} before period start"
        else:
            margin = f"{_days((tx_date - period.end_date).days)} after period end"
        return BoundaryCheck(
            False,
            f"Transaction dated {tx_date.isoformat()} falls outside selected fiscal period "
            f"{period.name} ({period.start_date.isoformat()} to {period.end_date.isoformat()}): "
            f"{margin}",
        )

    def ensure_within(self, tx_date: date, period: FiscalPeriod) -> None:
        """Raise OutOfPeriod when the date falls outside the period."""
        check = self.validate(tx_date, period)
        if not check.is_valid:
            raise OutOfPeriod(check.message)


class FiscalPeriodService:
    """Service for managing fiscal periods."""

    def __init__(self, db: Database):
        """Initialize fiscal period service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_period(self, company_id: int, name: str, start_date: date, end_date: date) -> int:
        """Create a fiscal period.

        Returns:
            Fiscal period ID

        Raises:
            NotFoundError: If company doesn't exist
            ValidationError: If name is blank or start is after end
            ConflictError: If the name is taken or the range overlaps another period
        """
        if self.db.get_company(company_id) is None:
            raise NotFoundError(company_not_found(company_id))
        name = name.strip()
        if not name:
            raise ValidationError("Fiscal period name cannot be empty")
        if start_date > end_date:
            raise ValidationError(
                f"Fiscal period start {start_date.isoformat()} is after end {end_date.isoformat()}"
            )
        for period in self.db.list_fiscal_periods(company_id):
            if period.name == name:
                raise ConflictError(f"Fiscal period '{name}' already exists")
            if start_date <= period.end_date and period.start_date <= end_date:
                raise ConflictError(
                    f"Fiscal period {name} overlaps {period.name} "
                    f"({period.start_date.isoformat()} to {period.end_date.isoformat()})"
                )

        return self.db.create_fiscal_period(
            company_id=company_id, name=name, start_date=start_date, end_date=end_date
        )

    def get_period(self, period_id: int) -> Optional[FiscalPeriod]:
        """Get fiscal period by ID."""
        return self.db.get_fiscal_period(period_id)

    def get_period_by_name(self, company_id: int, name: str) -> Optional[FiscalPeriod]:
        """Get a company's fiscal period by name."""
        return self.db.get_fiscal_period_by_name(company_id, name)

    def list_periods(self, company_id: int) -> list[FiscalPeriod]:
        """List a company's fiscal periods ordered by start date."""
        return self.db.list_fiscal_periods(company_id)
