"""Main CLI entry point."""

import click
from bookkit.config.logging import configure_logging
from bookkit.database.factories import create_sqlite_database

# Import and register all commands at module level
from bookkit.cli.commands import (
    account,
    category,
    init_categories,
    add,
    transaction,
    tax_rate,
    report,
    import_cmd,
    rule,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BOOKKIT_DB_PATH environment variable)",
    envvar="BOOKKIT_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="BOOKKIT_LOG_LEVEL",
    help="Log level for diagnostics written to stderr",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """Bookkit - Small-business bookkeeping.

    Record income and expenses, keep bank balances up to date and derive
    profit & loss, balance sheet, cash flow and tax summary reports for any
    month, quarter or year.
    """
    ctx.ensure_object(dict)
    configure_logging(level=log_level.upper())

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db


# Register all commands
account.register_commands(cli)
category.register_commands(cli)
init_categories.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
tax_rate.register_commands(cli)
report.register_commands(cli)
import_cmd.register_commands(cli)
rule.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
