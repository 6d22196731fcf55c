"""CLI helpers for bank account resolution."""

from __future__ import annotations

import click
from bookkit.cli.error_handling import handle_domain_error
from bookkit.domain.account import BankAccountService
from bookkit.utils.account_resolver import resolve_account


def resolve_account_or_exit(
    ctx: click.Context, account_service: BankAccountService, account: str | int
) -> int:
    """Resolve bank account name or ID, or exit with a CLI error."""
    try:
        return resolve_account(account_service, account)
    except ValueError as exc:
        handle_domain_error(ctx, exc)
