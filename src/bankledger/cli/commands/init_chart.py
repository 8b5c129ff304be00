"""Install the standard chart of accounts and mapping rules."""

import click
from bankledger.cli.error_handling import handle_domain_error
from bankledger.cli.resolution import resolve_company_or_exit
from bankledger.domain.account import AccountService
from bankledger.domain.errors import DomainError
from bankledger.domain.mapping_rules import MappingRuleService


@click.command("init-chart")
@click.argument("company", metavar="COMPANY")
@click.pass_context
def init_chart(ctx, company: str):
    """Install the standard chart of accounts and mapping rules.

    Accounts and rules the company already has are left alone, so the
    command can be run again safely.
    """
    company_id = resolve_company_or_exit(ctx, company)
    db = ctx.obj["db"]
    try:
        accounts = AccountService(db).install_standard_chart(company_id)
        rules = MappingRuleService(db).install_standard_rules(company_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Created {accounts} accounts and {rules} rules")


def register_commands(cli):
    """Register init-chart command with main CLI."""
    cli.add_command(init_chart)
