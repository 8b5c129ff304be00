"""Utilities for resolving companies and fiscal periods given by name or ID."""

from bankledger.domain.company import CompanyService
from bankledger.domain.errors import (
    NotFoundError,
    company_not_found,
    fiscal_period_not_found,
)
from bankledger.domain.fiscal_period import FiscalPeriodService


def resolve_company(company_service: CompanyService, company: str | int) -> int:
    """Resolve company name or ID to company ID.

    Args:
        company_service: CompanyService instance
        company: Company name (str) or ID (int or string representation of int)

    Returns:
        Company ID

    Raises:
        NotFoundError: If company is not found
    """
    # Names win over IDs so that a company called "2024" can still be found
    by_name = company_service.get_company_by_name(str(company))
    if by_name is not None:
        return by_name.id

    try:
        company_id = int(company)
    except (ValueError, TypeError):
        raise NotFoundError(company_not_found(str(company)))

    if company_service.get_company(company_id) is None:
        raise NotFoundError(company_not_found(company_id))
    return company_id


def resolve_fiscal_period(
    period_service: FiscalPeriodService, company_id: int, period: str | int
) -> int:
    """Resolve a company's fiscal period name or ID to period ID.

    Raises:
        NotFoundError: If the period is not found for the company
    """
    by_name = period_service.get_period_by_name(company_id, str(period))
    if by_name is not None:
        return by_name.id

    try:
        period_id = int(period)
    except (ValueError, TypeError):
        raise NotFoundError(fiscal_period_not_found(str(period)))

    found = period_service.get_period(period_id)
    if found is None or found.company_id != company_id:
        raise NotFoundError(fiscal_period_not_found(period_id))
    return period_id
