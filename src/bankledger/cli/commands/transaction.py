"""Transaction viewing commands."""

import click
from bankledger.cli.resolution import resolve_company_or_exit
from bankledger.domain.transaction import TransactionService
from bankledger.utils.date_parser import parse_date


def _amount_column(txn) -> str:
    if txn.debit_amount > 0:
        return f"{-txn.debit_amount:>12}"
    if txn.credit_amount > 0:
        return f"{txn.credit_amount:>12}"
    if txn.service_fee > 0:
        return f"{-txn.service_fee:>12}"
    return f"{'':>12}"


@click.group()
def transaction_group():
    """View imported transactions."""
    pass


@transaction_group.command("list")
@click.option("--company", required=True, help="Company name or ID")
@click.option("--start-date", help="Earliest date to include")
@click.option("--end-date", help="Latest date to include")
@click.option("--unclassified", is_flag=True, help="Only transactions without a journal entry")
@click.pass_context
def list_transactions(
    ctx, company: str, start_date: str | None, end_date: str | None, unclassified: bool
):
    """List imported transactions."""
    company_id = resolve_company_or_exit(ctx, company)
    try:
        start = parse_date(start_date) if start_date else None
        end = parse_date(end_date) if end_date else None
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    service = TransactionService(ctx.obj["db"])
    transactions = service.list_transactions(
        company_id, start_date=start, end_date=end, unclassified_only=unclassified
    )
    if not transactions:
        click.echo("No transactions found.")
        return

    click.echo(f"\n{'ID':>5} | {'Date':10s} | {'Amount':>12} | {'Balance':>12} | Details")
    click.echo("-" * 90)
    for txn in transactions:
        click.echo(
            f"{txn.id:5d} | {txn.date.isoformat()} | {_amount_column(txn)} | "
            f"{txn.balance:>12} | {txn.details}"
        )


@transaction_group.command("show")
@click.argument("transaction_id", type=int)
@click.pass_context
def show_transaction(ctx, transaction_id: int):
    """Show a transaction and its journal entry."""
    service = TransactionService(ctx.obj["db"])
    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    click.echo(f"Transaction {txn.id}")
    click.echo(f"  Date:        {txn.date.isoformat()}")
    click.echo(f"  Details:     {txn.details}")
    click.echo(f"  Debit:       {txn.debit_amount}")
    click.echo(f"  Credit:      {txn.credit_amount}")
    click.echo(f"  Service fee: {txn.service_fee}")
    click.echo(f"  Balance:     {txn.balance}")
    if txn.source_reference:
        click.echo(f"  Source:      {txn.source_reference}")

    entry = service.get_journal_entry(transaction_id)
    if entry is None:
        click.echo("  Unclassified")
        return
    click.echo(f"  Journal entry {entry.reference}: {entry.description}")
    for line in entry.lines:
        side = "Dr" if line.debit_amount > 0 else "Cr"
        amount = line.debit_amount if line.debit_amount > 0 else line.credit_amount
        click.echo(f"    {line.line_number}. {side} {line.account_code:8s} {amount:>12}")


def register_commands(cli):
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
