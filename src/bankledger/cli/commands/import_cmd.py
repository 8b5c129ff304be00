"""Statement import command."""

import click
from bankledger.cli.error_handling import handle_domain_error
from bankledger.cli.resolution import resolve_company_or_exit, resolve_period_or_exit
from bankledger.domain.entities import StatementDocument, UploadResult
from bankledger.domain.errors import DomainError
from bankledger.domain.statement_import import StatementImportService, read_statement_lines
from bankledger.parsing.formats import BankFormat


def _echo_result(result: UploadResult) -> None:
    if result.error is not None:
        click.echo(f"\n{result.source_name}: failed")
        click.echo(f"  Error: {result.error}", err=True)
        return

    click.echo(f"\n{result.source_name} ({result.bank_format}):")
    click.echo(f"  Transactions:    {result.total_transactions}")
    click.echo(f"  Saved:           {result.saved_count}")
    click.echo(f"  Duplicates:      {result.duplicate_count}")
    click.echo(f"  Out of period:   {result.out_of_period_count}")
    click.echo(f"  Invalid:         {result.validation_error_count}")
    click.echo(f"  Unclassified:    {len(result.unclassified_transaction_ids)}")

    if result.rejected:
        click.echo("  Rejected:")
        for rejected in result.rejected:
            day = rejected.date.isoformat() if rejected.date else "----------"
            click.echo(
                f"    {day} | {rejected.description[:40]:40s} | "
                f"{rejected.reason.value}: {rejected.reason_detail}"
            )
    if result.skipped_lines:
        click.echo("  Skipped lines:")
        for skipped in result.skipped_lines:
            click.echo(f"    line {skipped.line_number}: {skipped.reason}")


@click.command("import")
@click.argument("files", nargs=-1, required=True, type=click.Path(exists=True, dir_okay=False))
@click.option("--company", required=True, help="Company name or ID")
@click.option("--period", required=True, help="Fiscal period name or ID")
@click.option(
    "--bank",
    type=click.Choice([f.name.lower() for f in BankFormat]),
    help="Statement layout (detected when omitted)",
)
@click.option("--workers", type=int, default=1, show_default=True,
              help="Number of statements processed in parallel")
@click.pass_context
def import_statements(
    ctx, files: tuple[str, ...], company: str, period: str, bank: str | None, workers: int
):
    """Import bank statement text files.

    Examples:
        bankledger import march.txt --company "Acme Trading" --period FY2023-2024
        bankledger import *.txt --company 1 --period 1 --bank absa --workers 4
    """
    company_id = resolve_company_or_exit(ctx, company)
    period_id = resolve_period_or_exit(ctx, company_id, period)
    bank_format = BankFormat.from_name(bank) if bank else None
    service = StatementImportService(ctx.obj["db"])

    try:
        documents = [
            StatementDocument(
                lines=read_statement_lines(path),
                company_id=company_id,
                fiscal_period_id=period_id,
                source_name=click.format_filename(path, shorten=True),
            )
            for path in files
        ]
    except DomainError as e:
        handle_domain_error(ctx, e)

    results = service.process_documents(documents, bank_format=bank_format, max_workers=workers)
    for result in results:
        _echo_result(result)

    if len(results) > 1:
        click.echo(
            f"\nImport complete: {sum(r.saved_count for r in results)} saved, "
            f"{sum(len(r.rejected) for r in results)} rejected"
        )
    if any(r.error is not None for r in results):
        ctx.exit(1)


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_statements)
