"""CSV import command."""

import click
from bookkit.cli.account_resolution import resolve_account_or_exit
from bookkit.cli.error_handling import handle_domain_error
from bookkit.domain.account import BankAccountService
from bookkit.domain.csv_import import CsvImportService
from bookkit.domain.rules import RuleService


@click.command("import")
@click.argument("csv_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--account", help="Bank account name or ID the rows belong to")
@click.option(
    "--apply-rules",
    is_flag=True,
    help="Categorize the imported transactions with the active rules",
)
@click.pass_context
def import_csv(ctx, csv_file: str, account: str | None, apply_rules: bool):
    """Import transactions from a bank CSV export.

    Positive amounts are imported as income and negative amounts as
    expenses unless the file has a Type column. Rows already recorded
    (same date, description and amount) are skipped.

    Examples:
        bookkit import mercury.csv --account "Business Checking"
        bookkit import export.csv --apply-rules
    """
    db = ctx.obj["db"]
    service = CsvImportService(db)

    account_id = None
    if account:
        account_id = resolve_account_or_exit(ctx, BankAccountService(db), account)

    try:
        result = service.import_csv(csv_file_path=csv_file, bank_account_id=account_id)
    except FileNotFoundError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo("\nImport complete:")
    click.echo(f"  Imported: {result.imported} transactions")
    click.echo(f"  Skipped: {result.skipped} duplicates")
    if result.errors:
        click.echo(f"  Errors: {len(result.errors)}")
        for error in result.errors:
            click.echo(f"    {error}", err=True)

    if apply_rules and result.transaction_ids:
        categorized = RuleService(db).apply_rules(list(result.transaction_ids))
        click.echo(f"  Categorized by rules: {categorized}")


def register_commands(cli):
    """Register import command with main CLI."""
    cli.add_command(import_csv)
