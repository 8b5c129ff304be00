"""Chart of accounts commands."""

import click
from bankledger.cli.error_handling import handle_domain_error
from bankledger.cli.resolution import resolve_company_or_exit
from bankledger.domain.account import AccountService
from bankledger.domain.entities import AccountCategory
from bankledger.domain.errors import DomainError


@click.group()
def account_group():
    """Manage the chart of accounts."""
    pass


@account_group.command("create")
@click.argument("company", metavar="COMPANY")
@click.argument("code", metavar="CODE")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option(
    "--category",
    type=click.Choice([c.value for c in AccountCategory]),
    required=True,
    help="Account category",
)
@click.pass_context
def create_account(ctx, company: str, code: str, name: str, category: str):
    """Create a new account.

    Examples:
        bankledger account create "Acme Trading" 9600 "Bank Charges" --category expense
    """
    company_id = resolve_company_or_exit(ctx, company)
    service = AccountService(ctx.obj["db"])
    try:
        account_id = service.create_account(company_id, code, name, category)
        click.echo(f"Created account {code} '{name}' (ID: {account_id})")
    except DomainError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.argument("company", metavar="COMPANY")
@click.pass_context
def list_accounts(ctx, company: str):
    """List a company's accounts."""
    company_id = resolve_company_or_exit(ctx, company)
    service = AccountService(ctx.obj["db"])

    accounts = service.list_accounts(company_id)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 70)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        click.echo(
            f"ID: {acc.id:3d} | {acc.code:8s} | {acc.name:30s} | {acc.category.value}{status}"
        )


@account_group.command("deactivate")
@click.argument("company", metavar="COMPANY")
@click.argument("code", metavar="CODE")
@click.pass_context
def deactivate_account(ctx, company: str, code: str):
    """Deactivate an account so nothing more is posted to it."""
    company_id = resolve_company_or_exit(ctx, company)
    service = AccountService(ctx.obj["db"])
    try:
        service.deactivate_account(company_id, code)
        click.echo(f"Deactivated account {code}")
    except DomainError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
