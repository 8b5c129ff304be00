"""Mapping rule commands."""

import click
from bankledger.cli.error_handling import handle_domain_error
from bankledger.cli.resolution import resolve_company_or_exit
from bankledger.domain.entities import MatchType
from bankledger.domain.errors import DomainError
from bankledger.domain.mapping_rules import DEFAULT_PRIORITY, MappingRuleService


@click.group()
def rule_group():
    """Manage classification rules."""
    pass


@rule_group.command("add")
@click.argument("company", metavar="COMPANY")
@click.argument("pattern", metavar="PATTERN")
@click.argument("debit", metavar="DEBIT_CODE")
@click.argument("credit", metavar="CREDIT_CODE")
@click.option("--priority", type=int, default=DEFAULT_PRIORITY, show_default=True,
              help="Lower values are evaluated first")
@click.option(
    "--match-type",
    type=click.Choice([m.value for m in MatchType]),
    default=MatchType.CONTAINS.value,
    show_default=True,
    help="How PATTERN is compared to transaction details",
)
@click.option("--description", help="Journal entry description for matched transactions")
@click.pass_context
def add_rule(
    ctx,
    company: str,
    pattern: str,
    debit: str,
    credit: str,
    priority: int,
    match_type: str,
    description: str | None,
):
    """Add a classification rule.

    Examples:
        bankledger rule add "Acme Trading" "SERVICE FEE" 9600 1000 --priority 10
        bankledger rule add "Acme Trading" "^MAGTAPE" 1000 4000 --match-type regex
    """
    company_id = resolve_company_or_exit(ctx, company)
    service = MappingRuleService(ctx.obj["db"])
    try:
        rule_id = service.create_rule(
            company_id=company_id,
            pattern=pattern,
            debit_account_code=debit,
            credit_account_code=credit,
            priority=priority,
            match_type=match_type,
            description=description,
        )
        click.echo(f"Created rule {rule_id}: '{pattern}' -> Dr {debit} / Cr {credit}")
    except DomainError as e:
        handle_domain_error(ctx, e)


@rule_group.command("list")
@click.argument("company", metavar="COMPANY")
@click.pass_context
def list_rules(ctx, company: str):
    """List a company's rules in evaluation order."""
    company_id = resolve_company_or_exit(ctx, company)
    service = MappingRuleService(ctx.obj["db"])

    rules = service.list_rules(company_id, active_only=False)
    if not rules:
        click.echo("No rules found.")
        return

    click.echo("\nRules:")
    click.echo("-" * 80)
    for r in rules:
        status = "" if r.is_active else " (inactive)"
        click.echo(
            f"ID: {r.id:3d} | P{r.priority:<4d} | {r.match_type.value:11s} | "
            f"{r.pattern:25s} | Dr {r.debit_account_code} / Cr {r.credit_account_code}{status}"
        )


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
