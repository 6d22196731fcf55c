"""Transaction management commands."""

import click
from decimal import Decimal
from bookkit.cli.error_handling import handle_domain_error
from bookkit.cli.formatting import money, percent
from bookkit.domain.account import BankAccountService
from bookkit.domain.entities import TransactionStatus, TransactionType
from bookkit.domain.transaction import TransactionService
from bookkit.utils.date_parser import parse_date


def _parse_date_option(ctx, value: str | None, label: str):
    if value is None:
        return None
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("list")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--category", help="Category name (e.g., 'Software')")
@click.option("--uncategorized", is_flag=True, help="Show only uncategorized transactions")
@click.option(
    "--type",
    "txn_type",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    help="Only show income or expense transactions",
)
@click.option("--needs-review", is_flag=True, help="Show only transactions flagged for review")
@click.option("--verbose", "-v", is_flag=True, help="Show all fields including flags and notes")
@click.pass_context
def list_transactions(
    ctx,
    start_date: str | None,
    end_date: str | None,
    category: str | None,
    uncategorized: bool,
    txn_type: str | None,
    needs_review: bool,
    verbose: bool,
):
    """View transactions with optional filters.

    Use --uncategorized to show only transactions without a category.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)
    account_service = BankAccountService(db)

    start = _parse_date_option(ctx, start_date, "start date")
    end = _parse_date_option(ctx, end_date, "end date")

    if uncategorized:
        category = ""  # Empty category name means uncategorized

    transactions = service.list_transactions(
        start_date=start,
        end_date=end,
        category_name=category,
        type=txn_type.lower() if txn_type else None,
        needs_review=True if needs_review else None,
    )

    if not transactions:
        click.echo("No transactions found.")
        return

    accounts = {acc.id: acc.name for acc in account_service.list_accounts()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    if verbose:
        click.echo("=" * 100)
        for txn in transactions:
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Date: {txn.date}")
            click.echo(f"  Type: {txn.type.value}")
            click.echo(f"  Amount: {money(txn.amount)}")
            click.echo(f"  Description: {txn.description}")
            click.echo(f"  Category: {txn.category_name}")
            if txn.vendor_name:
                click.echo(f"  Vendor: {txn.vendor_name}")
            if txn.bank_account_id is not None:
                account_name = accounts.get(txn.bank_account_id, "Unknown")
                click.echo(f"  Account: {account_name} (ID: {txn.bank_account_id})")
            click.echo(f"  Status: {txn.status.value}")
            flags = [
                label
                for label, enabled in (
                    ("tax deductible", txn.tax_deductible),
                    ("internal transfer", txn.is_internal_transfer),
                    ("needs review", txn.needs_review),
                )
                if enabled
            ]
            if flags:
                click.echo(f"  Flags: {', '.join(flags)}")
            if txn.ai_confidence is not None:
                click.echo(f"  AI confidence: {txn.ai_confidence}")
            if txn.notes:
                click.echo(f"  Notes: {txn.notes}")
            click.echo("-" * 100)
    else:
        click.echo("-" * 100)
        click.echo(
            f"{'ID':<6} {'Date':<12} {'Type':<8} {'Amount':>14} {'Category':<24} {'Description':<30}"
        )
        click.echo("-" * 100)
        for txn in transactions:
            marker = " (transfer)" if txn.is_internal_transfer else ""
            description = (txn.description + marker)[:30]
            click.echo(
                f"{txn.id:<6} {str(txn.date):<12} {txn.type.value:<8} {money(txn.amount):>14} "
                f"{txn.category_name[:24]:<24} {description:<30}"
            )

    total_income = sum(
        (t.amount for t in transactions if t.type == TransactionType.INCOME and not t.is_internal_transfer),
        Decimal("0"),
    )
    total_expenses = sum(
        (t.amount for t in transactions if t.type == TransactionType.EXPENSE and not t.is_internal_transfer),
        Decimal("0"),
    )
    click.echo("-" * 100)
    click.echo(
        f"{'TOTAL':<6} Income: {money(total_income)} | "
        f"Expenses: {money(total_expenses)} | Count: {len(transactions)}"
    )


@transaction_group.command("categorize")
@click.argument("transaction_id", type=int)
@click.argument("category", metavar="CATEGORY")
@click.pass_context
def categorize_transaction(ctx, transaction_id: int, category: str):
    """Assign a category to a transaction.

    Pass an empty string as CATEGORY to clear the category.

    Examples:
        bookkit transaction categorize 12 "Office Supplies"
        bookkit transaction categorize 12 ""
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    try:
        service.update_category(transaction_id, category or None)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if category:
        click.echo(f"Categorized transaction {transaction_id} as '{category}'")
    else:
        click.echo(f"Cleared category of transaction {transaction_id}")


@transaction_group.command("flag")
@click.argument("transaction_id", type=int)
@click.option("--tax-deductible/--not-tax-deductible", default=None, help="Tax deductible flag")
@click.option("--transfer/--no-transfer", default=None, help="Internal transfer flag")
@click.option("--review/--no-review", default=None, help="Needs review flag")
@click.option(
    "--status",
    type=click.Choice([s.value for s in TransactionStatus], case_sensitive=False),
    help="Settlement status",
)
@click.pass_context
def flag_transaction(
    ctx,
    transaction_id: int,
    tax_deductible: bool | None,
    transfer: bool | None,
    review: bool | None,
    status: str | None,
):
    """Update the flags of a transaction.

    Only the flags that are given are changed.

    Examples:
        bookkit transaction flag 7 --transfer
        bookkit transaction flag 9 --tax-deductible --no-review --status posted
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    if tax_deductible is None and transfer is None and review is None and status is None:
        click.echo("Error: Nothing to update. Pass at least one flag option.", err=True)
        ctx.exit(1)

    try:
        service.update_flags(
            transaction_id,
            tax_deductible=tax_deductible,
            is_internal_transfer=transfer,
            needs_review=review,
            status=status.lower() if status else None,
        )
        click.echo(f"Updated transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("delete")
@click.argument("transaction_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_transaction(ctx, transaction_id: int, yes: bool) -> None:
    """Delete a transaction.

    Examples:
        bookkit transaction delete 1
    """
    db = ctx.obj["db"]
    transaction_service = TransactionService(db)

    txn = transaction_service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    if not yes and not click.confirm(f"Are you sure you want to delete transaction {transaction_id}?"):
        click.echo("Deletion cancelled.")
        return

    try:
        transaction_service.delete_transaction(transaction_id)
        click.echo(f"Deleted transaction {transaction_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@transaction_group.command("stats")
@click.option("--start-date", help="Start date (YYYY-MM-DD or 'today', 'yesterday')")
@click.option("--end-date", help="End date (YYYY-MM-DD or 'today', 'yesterday')")
@click.pass_context
def transaction_stats(ctx, start_date: str | None, end_date: str | None):
    """Show income, expense and profit totals for a date range.

    Internal transfers are excluded from the totals.
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    start = _parse_date_option(ctx, start_date, "start date")
    end = _parse_date_option(ctx, end_date, "end date")

    stats = service.get_stats(start_date=start, end_date=end)

    click.echo(f"{'Total Income:':<20} {money(stats.total_income):>16}")
    click.echo(f"{'Total Expenses:':<20} {money(stats.total_expenses):>16}")
    click.echo(f"{'Net Profit:':<20} {money(stats.net_profit):>16}")
    click.echo(f"{'Profit Margin:':<20} {percent(stats.profit_margin):>16}")
    click.echo(f"{'Transactions:':<20} {stats.transaction_count:>16}")
    click.echo(f"{'Needs Review:':<20} {stats.needs_review_count:>16}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
