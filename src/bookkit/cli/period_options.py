"""CLI helpers for reporting period selection."""

from datetime import date
from typing import Callable, Optional

import click

from bookkit.domain.entities import Granularity, Period
from bookkit.domain.errors import DomainError
from bookkit.domain.period import resolve_period
from bookkit.utils.date_parser import parse_month


def period_options(func: Callable) -> Callable:
    """Add --granularity, --year and --month options to a command."""
    func = click.option(
        "--month",
        help="Month number or name (default: current month). Selects the quarter for --granularity quarter",
    )(func)
    func = click.option("--year", type=int, help="Calendar year (default: current year)")(func)
    func = click.option(
        "--granularity",
        type=click.Choice([g.value for g in Granularity], case_sensitive=False),
        default=Granularity.MONTH.value,
        show_default=True,
        help="Reporting period length",
    )(func)
    return func


def resolve_cli_period(
    ctx: click.Context,
    *,
    granularity: str,
    year: Optional[int],
    month: Optional[str],
    today: Optional[date] = None,
) -> Period:
    """Resolve CLI period options into a Period, or exit with a CLI error."""
    today = today or date.today()
    resolved_year = year if year is not None else today.year

    resolved_month = None
    if granularity.lower() != Granularity.YEAR.value:
        if month is None:
            resolved_month = today.month
        else:
            try:
                resolved_month = parse_month(month)
            except ValueError as e:
                click.echo(f"Error: Invalid month: {e}", err=True)
                ctx.exit(1)

    try:
        return resolve_period(granularity.lower(), resolved_year, resolved_month)
    except DomainError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)
