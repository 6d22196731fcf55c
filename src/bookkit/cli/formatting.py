"""Text formatting helpers shared by CLI commands."""

from decimal import Decimal
from typing import Optional

import click

from bookkit.domain.entities import StatementSection

WIDTH = 80


def money(amount: Decimal) -> str:
    """Format an amount as currency (e.g., "$1,234.56")."""
    return f"${amount:,.2f}"


def percent(value: Optional[Decimal]) -> str:
    """Format a percentage with one decimal place."""
    if value is None:
        return ""
    return f"{value:.1f}%"


def echo_line(label: str, amount: Decimal, indent: int = 0, extra: str = "") -> None:
    """Echo a label/amount row aligned to the report width."""
    prefix = " " * indent
    label_width = 50 - indent
    click.echo(f"{prefix}{label:<{label_width}} {money(amount):>20} {extra:>8}".rstrip())


def echo_section(title: str, section: StatementSection, total_label: str, show_percent: bool = False) -> None:
    """Echo a statement section: title, indented line items and total."""
    click.echo(title)
    click.echo("*" * WIDTH)
    for item in section.items:
        extra = percent(item.percentage) if show_percent else ""
        echo_line(item.name, item.amount, indent=4, extra=extra)
    click.echo("-" * WIDTH)
    echo_line(total_label, section.total)
    click.echo("=" * WIDTH)
