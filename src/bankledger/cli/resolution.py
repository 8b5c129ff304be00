"""CLI helpers for company and fiscal period resolution."""

from __future__ import annotations

import click
from bankledger.cli.error_handling import handle_domain_error
from bankledger.domain.company import CompanyService
from bankledger.domain.errors import DomainError
from bankledger.domain.fiscal_period import FiscalPeriodService
from bankledger.utils.resolvers import resolve_company, resolve_fiscal_period


def resolve_company_or_exit(ctx: click.Context, company: str) -> int:
    """Resolve company name or ID, or exit with a CLI error."""
    try:
        return resolve_company(CompanyService(ctx.obj["db"]), company)
    except DomainError as exc:
        handle_domain_error(ctx, exc)


def resolve_period_or_exit(ctx: click.Context, company_id: int, period: str) -> int:
    """Resolve fiscal period name or ID, or exit with a CLI error."""
    try:
        return resolve_fiscal_period(FiscalPeriodService(ctx.obj["db"]), company_id, period)
    except DomainError as exc:
        handle_domain_error(ctx, exc)
