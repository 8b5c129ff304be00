"""Fiscal period commands."""

import click
from bankledger.cli.error_handling import handle_domain_error
from bankledger.cli.resolution import resolve_company_or_exit
from bankledger.domain.errors import DomainError
from bankledger.domain.fiscal_period import FiscalPeriodService
from bankledger.utils.date_parser import parse_date


@click.group()
def period_group():
    """Manage fiscal periods."""
    pass


@period_group.command("create")
@click.argument("company", metavar="COMPANY")
@click.argument("name", metavar="PERIOD_NAME")
@click.argument("start", metavar="START_DATE")
@click.argument("end", metavar="END_DATE")
@click.pass_context
def create_period(ctx, company: str, name: str, start: str, end: str):
    """Create a fiscal period.

    COMPANY can be a company name or ID. Both dates are inclusive.

    Examples:
        bankledger period create "Acme Trading" FY2023-2024 2023-04-01 2024-03-31
    """
    company_id = resolve_company_or_exit(ctx, company)
    try:
        start_date = parse_date(start)
        end_date = parse_date(end)
    except ValueError as e:
        handle_domain_error(ctx, e)

    service = FiscalPeriodService(ctx.obj["db"])
    try:
        period_id = service.create_period(company_id, name, start_date, end_date)
        click.echo(
            f"Created fiscal period '{name}' ({start_date.isoformat()} to "
            f"{end_date.isoformat()}) (ID: {period_id})"
        )
    except DomainError as e:
        handle_domain_error(ctx, e)


@period_group.command("list")
@click.argument("company", metavar="COMPANY")
@click.pass_context
def list_periods(ctx, company: str):
    """List a company's fiscal periods."""
    company_id = resolve_company_or_exit(ctx, company)
    service = FiscalPeriodService(ctx.obj["db"])

    periods = service.list_periods(company_id)
    if not periods:
        click.echo("No fiscal periods found.")
        return

    click.echo("\nFiscal periods:")
    click.echo("-" * 60)
    for p in periods:
        status = " (closed)" if p.is_closed else ""
        click.echo(
            f"ID: {p.id:3d} | {p.name:15s} | {p.start_date.isoformat()} to "
            f"{p.end_date.isoformat()}{status}"
        )


def register_commands(cli):
    """Register fiscal period commands with main CLI."""
    cli.add_command(period_group, name="period")
