"""Bank account management commands."""

import click
from bookkit.cli.account_resolution import resolve_account_or_exit
from bookkit.cli.error_handling import handle_domain_error
from bookkit.cli.formatting import money
from bookkit.domain.account import BankAccountService
from bookkit.utils.amount_parser import parse_amount


@click.group()
def account_group():
    """Manage bank accounts."""
    pass


@account_group.command("create")
@click.argument("name", metavar="ACCOUNT_NAME")
@click.option("--bank", help="Bank name")
@click.option("--type", "account_type", help="Account type (e.g., checking, savings)")
@click.option("--balance", help="Current balance (e.g., 1234.56)")
@click.pass_context
def create_account(ctx, name: str, bank: str | None, account_type: str | None, balance: str | None):
    """Create a new bank account.

    Examples:
        bookkit account create "Business Checking" --bank "Chase" --balance 12500
        bookkit account create "Savings" --type savings
    """
    db = ctx.obj["db"]
    service = BankAccountService(db)

    try:
        current_balance = parse_amount(balance, allow_negative=True) if balance else None
    except ValueError as e:
        click.echo(f"Error: Invalid balance: {e}", err=True)
        ctx.exit(1)

    try:
        kwargs = {"name": name, "bank_name": bank, "account_type": account_type}
        if current_balance is not None:
            kwargs["current_balance"] = current_balance
        account_id = service.create_account(**kwargs)
        click.echo(f"Created account '{name}' (ID: {account_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("list")
@click.option("--active-only", is_flag=True, help="Hide deactivated accounts")
@click.pass_context
def list_accounts(ctx, active_only: bool):
    """List bank accounts with their current balances."""
    db = ctx.obj["db"]
    service = BankAccountService(db)

    accounts = service.list_accounts(active_only=active_only)
    if not accounts:
        click.echo("No accounts found.")
        return

    click.echo("\nAccounts:")
    click.echo("-" * 80)
    for acc in accounts:
        status = "" if acc.is_active else " (inactive)"
        bank = acc.bank_name or "-"
        click.echo(
            f"ID: {acc.id:3d} | {acc.name:24s} | Bank: {bank:16s} | "
            f"{money(acc.current_balance):>14}{status}"
        )


@account_group.command("set-balance")
@click.argument("account", metavar="ACCOUNT")
@click.argument("balance", metavar="BALANCE")
@click.pass_context
def set_balance(ctx, account: str, balance: str):
    """Record the current balance of an account.

    ACCOUNT can be an account name or ID.

    Examples:
        bookkit account set-balance "Business Checking" 15230.10
        bookkit account set-balance 2 -- -120.00
    """
    db = ctx.obj["db"]
    service = BankAccountService(db)

    account_id = resolve_account_or_exit(ctx, service, account)

    try:
        new_balance = parse_amount(balance, allow_negative=True)
    except ValueError as e:
        click.echo(f"Error: Invalid balance: {e}", err=True)
        ctx.exit(1)

    try:
        service.update_balance(account_id, new_balance)
        click.echo(f"Updated balance of account {account_id} to {money(new_balance)}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("deactivate")
@click.argument("account", metavar="ACCOUNT")
@click.pass_context
def deactivate_account(ctx, account: str):
    """Deactivate an account so its balance no longer counts as cash.

    ACCOUNT can be an account name or ID.
    """
    db = ctx.obj["db"]
    service = BankAccountService(db)

    account_id = resolve_account_or_exit(ctx, service, account)
    try:
        service.deactivate_account(account_id)
        click.echo(f"Deactivated account {account_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@account_group.command("delete")
@click.argument("account", metavar="ACCOUNT")
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_account(ctx, account: str, yes: bool):
    """Delete an account.

    ACCOUNT can be an account name or ID. Accounts referenced by
    transactions cannot be deleted; deactivate them instead.
    """
    db = ctx.obj["db"]
    service = BankAccountService(db)

    account_id = resolve_account_or_exit(ctx, service, account)
    account_obj = service.get_account(account_id)

    if not yes and not click.confirm(
        f"Are you sure you want to delete account '{account_obj.name}' (ID: {account_id})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_account(account_id)
        click.echo(f"Deleted account '{account_obj.name}'")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register account commands with main CLI."""
    cli.add_command(account_group, name="account")
