"""Initialize default categories."""

import click
from bookkit.domain.category import CategoryService


# (name, type, color); cash flow activity is derived from the name
DEFAULT_CATEGORIES = [
    # Income
    ("Sales", "income", "#10B981"),
    ("Consulting Income", "income", "#059669"),
    ("Investments", "income", "#0EA5E9"),
    ("Loan Proceeds", "income", "#6366F1"),
    ("Owner Capital", "income", "#8B5CF6"),
    ("Other Income", "income", "#84CC16"),
    # Expenses
    ("Rent", "expense", "#EF4444"),
    ("Utilities", "expense", "#F97316"),
    ("Software", "expense", "#F59E0B"),
    ("Office Supplies", "expense", "#EAB308"),
    ("Marketing", "expense", "#EC4899"),
    ("Travel", "expense", "#14B8A6"),
    ("Insurance", "expense", "#64748B"),
    ("Payroll", "expense", "#DC2626"),
    ("Equipment", "expense", "#0EA5E9"),
    ("Loan Payments", "expense", "#6366F1"),
    ("Dividends", "expense", "#8B5CF6"),
    ("Other Expenses", "expense", "#6B7280"),
]


@click.command("init-categories")
@click.pass_context
def init_categories(ctx):
    """Initialize database with the default business categories.

    Categories that already exist are left untouched.
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    click.echo("Creating default categories...")

    created = 0
    skipped = 0
    for name, category_type, color in DEFAULT_CATEGORIES:
        if service.get_category_by_name(name) is not None:
            skipped += 1
            continue
        try:
            service.create_category(name=name, type=category_type, color=color)
            created += 1
        except ValueError as e:
            click.echo(f"Warning: Could not create category '{name}': {e}", err=True)

    if skipped:
        click.echo(f"Created {created} categories ({skipped} already existed).")
    else:
        click.echo(f"Successfully created {created} categories.")


def register_commands(cli):
    """Register init-categories command with main CLI."""
    cli.add_command(init_categories)
