"""CLI error handling helpers."""

import logging

import click

from bankledger.domain.errors import DomainError

logger = logging.getLogger(__name__)


def handle_domain_error(
    ctx: click.Context, error: DomainError | ValueError, exit_code: int = 1
) -> None:
    """Print ``Error: <message>`` on stderr and exit.

    The traceback is only logged at DEBUG level, so ``--debug`` shows where
    the error was raised.
    """
    logger.debug("%s in '%s'", type(error).__name__, ctx.command_path, exc_info=error)
    click.echo(f"Error: {error}", err=True)
    ctx.exit(exit_code)
