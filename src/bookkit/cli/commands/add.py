"""Add transaction command."""

import click
from bookkit.cli.account_resolution import resolve_account_or_exit
from bookkit.cli.error_handling import handle_domain_error
from bookkit.cli.formatting import money
from bookkit.domain.account import BankAccountService
from bookkit.domain.category import CategoryService
from bookkit.domain.entities import TransactionStatus, TransactionType
from bookkit.domain.transaction import TransactionService
from bookkit.utils.amount_parser import parse_amount
from bookkit.utils.date_parser import parse_date


@click.command("add")
@click.option(
    "--type",
    "txn_type",
    required=True,
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    help="Transaction direction",
)
@click.option(
    "--date",
    required=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Transaction amount (e.g., 123.45)")
@click.option("--description", required=True, help="Transaction description")
@click.option("--category", help="Category name (e.g., 'Office Supplies')")
@click.option("--account", help="Bank account name or ID")
@click.option("--vendor", help="Vendor or customer name")
@click.option("--pending", is_flag=True, help="Mark as pending (not yet settled)")
@click.option("--tax-deductible", is_flag=True, help="Mark expense as tax deductible")
@click.option("--transfer", is_flag=True, help="Mark as a transfer between your own accounts")
@click.option("--review", is_flag=True, help="Flag for manual review")
@click.option("--notes", help="Notes")
@click.pass_context
def add_transaction(
    ctx,
    txn_type: str,
    date: str,
    amount: str,
    description: str,
    category: str | None,
    account: str | None,
    vendor: str | None,
    pending: bool,
    tax_deductible: bool,
    transfer: bool,
    review: bool,
    notes: str | None,
):
    """Add a transaction manually.

    Examples:
        bookkit add --type income --date 2024-01-15 --amount 5000 --description "Invoice 1001" --category Sales
        bookkit add --type expense --date today --amount 49.99 --description "Adobe" --category Software --tax-deductible
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)
    account_service = BankAccountService(db)
    category_service = CategoryService(db)

    account_id = None
    if account is not None:
        account_id = resolve_account_or_exit(ctx, account_service, account)

    try:
        txn_date = parse_date(date)
    except ValueError as e:
        click.echo(f"Error: Invalid date format: {e}", err=True)
        ctx.exit(1)

    try:
        txn_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    category_id = None
    if category:
        try:
            category_id = category_service.require_category_by_name(category).id
        except ValueError as e:
            handle_domain_error(ctx, e)

    status = TransactionStatus.PENDING if pending else TransactionStatus.POSTED

    try:
        transaction_id = transaction_service.create_transaction(
            description=description,
            amount=txn_amount,
            type=txn_type.lower(),
            transaction_date=txn_date,
            category_id=category_id,
            bank_account_id=account_id,
            vendor_name=vendor,
            status=status,
            tax_deductible=tax_deductible,
            is_internal_transfer=transfer,
            needs_review=review,
            notes=notes,
        )
    except ValueError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {transaction_id}")
    click.echo(f"  Date: {txn_date}")
    click.echo(f"  Type: {txn_type.lower()}")
    click.echo(f"  Amount: {money(txn_amount)}")
    click.echo(f"  Description: {description}")
    if category:
        click.echo(f"  Category: {category}")
    if status == TransactionStatus.PENDING:
        click.echo("  Status: pending")


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
