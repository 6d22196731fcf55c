"""CLI error rendering."""

import click

from bookkit.config.logging import get_logger

logger = get_logger(__name__)


def handle_domain_error(ctx: click.Context, error: ValueError, exit_code: int = 1) -> None:
    """Print a service or parsing error to stderr and exit.

    Domain errors subclass ValueError, so commands catch ValueError once for
    both service and parser failures.
    """
    logger.debug(
        "command_failed",
        command=ctx.command_path,
        error_type=type(error).__name__,
        error=str(error),
    )
    click.echo(f"Error: {error}", err=True)
    ctx.exit(exit_code)
