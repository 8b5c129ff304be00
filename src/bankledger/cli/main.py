"""Main CLI entry point."""

import logging

import click
from bankledger.database.factories import DB_PATH_ENV, create_sqlite_database

# Import and register all commands at module level
from bankledger.cli.commands import (
    account,
    classify,
    company,
    import_cmd,
    init_chart,
    period,
    rule,
    transaction,
)


def setup_logging(verbose: bool = False, debug: bool = False):
    """Configure logging."""
    if debug:
        level = logging.DEBUG
    elif verbose:
        level = logging.INFO
    else:
        level = logging.WARNING

    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENV} environment variable)",
    envvar=DB_PATH_ENV,
)
@click.option("-v", "--verbose", is_flag=True, help="Log import summaries")
@click.option("--debug", is_flag=True, help="Log parser and classifier details")
@click.pass_context
def cli(ctx, db_path: str | None, verbose: bool, debug: bool):
    """Bankledger - bank statement import and classification.

    Parse bank statement text from Standard Bank, FNB and Absa, reject
    duplicates and out-of-period rows, and post balanced journal entries
    using each company's mapping rules.
    """
    ctx.ensure_object(dict)
    setup_logging(verbose=verbose, debug=debug)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
company.register_commands(cli)
period.register_commands(cli)
account.register_commands(cli)
rule.register_commands(cli)
init_chart.register_commands(cli)
import_cmd.register_commands(cli)
classify.register_commands(cli)
transaction.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
