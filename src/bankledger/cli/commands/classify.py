"""Classification commands."""

import click
from bankledger.cli.error_handling import handle_domain_error
from bankledger.cli.resolution import resolve_company_or_exit
from bankledger.domain.classification import ClassificationEngine
from bankledger.domain.errors import DomainError


@click.command("classify")
@click.argument("transaction_id", type=int)
@click.option("--company", required=True, help="Company name or ID")
@click.option("--debit", required=True, help="Debit account code or ID")
@click.option("--credit", required=True, help="Credit account code or ID")
@click.pass_context
def classify_transaction(ctx, transaction_id: int, company: str, debit: str, credit: str):
    """Classify a transaction with an explicit account pair.

    Re-running with other accounts updates the existing journal entry.

    Examples:
        bankledger classify 42 --company "Acme Trading" --debit 9600 --credit 1000
    """
    company_id = resolve_company_or_exit(ctx, company)
    engine = ClassificationEngine(ctx.obj["db"])
    try:
        debit_id = engine.resolve_account_id(company_id, debit)
        credit_id = engine.resolve_account_id(company_id, credit)
        entry = engine.update_classification(company_id, transaction_id, debit_id, credit_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
        return

    click.echo(f"Classified transaction {transaction_id} ({entry.reference}):")
    click.echo(f"  Dr {entry.debit_line.account_code}  {entry.total_debit:>12}")
    click.echo(f"  Cr {entry.credit_line.account_code}  {entry.total_credit:>12}")


@click.command("auto-classify")
@click.option("--company", required=True, help="Company name or ID")
@click.pass_context
def auto_classify(ctx, company: str):
    """Apply the company's rules to unclassified transactions."""
    company_id = resolve_company_or_exit(ctx, company)
    engine = ClassificationEngine(ctx.obj["db"])

    result = engine.classify_unclassified(company_id)
    click.echo(f"Classified: {len(result['classified'])} transactions")
    click.echo(f"Still unclassified: {len(result['unclassified'])} transactions")


def register_commands(cli):
    """Register classification commands with main CLI."""
    cli.add_command(classify_transaction)
    cli.add_command(auto_classify)
