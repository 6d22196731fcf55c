"""Tax rate settings commands."""

from datetime import date

import click
from bookkit.cli.error_handling import handle_domain_error
from bookkit.domain.tax import TaxSettingsService
from bookkit.utils.amount_parser import parse_amount


@click.group()
def tax_rate_group():
    """Show or change the flat tax rate used by tax summaries."""
    pass


@tax_rate_group.command("show")
@click.option("--year", type=int, help="Tax year (default: current year)")
@click.pass_context
def show_tax_rate(ctx, year: int | None):
    """Show the tax rate for a year."""
    db = ctx.obj["db"]
    service = TaxSettingsService(db)

    year = year if year is not None else date.today().year
    rate = service.get_tax_rate(year)
    click.echo(f"Tax rate for {year}: {rate}%")


@tax_rate_group.command("set")
@click.argument("rate", metavar="RATE")
@click.option("--year", type=int, help="Tax year (default: current year)")
@click.pass_context
def set_tax_rate(ctx, rate: str, year: int | None):
    """Set the tax rate percentage for a year.

    Examples:
        bookkit tax-rate set 30
        bookkit tax-rate set 22.5 --year 2024
    """
    db = ctx.obj["db"]
    service = TaxSettingsService(db)

    try:
        tax_rate = parse_amount(rate.rstrip("%"))
    except ValueError as e:
        click.echo(f"Error: Invalid tax rate: {e}", err=True)
        ctx.exit(1)

    year = year if year is not None else date.today().year
    try:
        service.set_tax_rate(year, tax_rate)
        click.echo(f"Tax rate for {year} set to {tax_rate}%")
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register tax-rate commands with main CLI."""
    cli.add_command(tax_rate_group, name="tax-rate")
