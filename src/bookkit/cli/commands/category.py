"""Category management commands."""

import click
from bookkit.cli.error_handling import handle_domain_error
from bookkit.domain.category import CategoryService
from bookkit.domain.entities import CashFlowActivity, TransactionType


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option(
    "--type",
    "category_type",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    help="Only show income or expense categories",
)
@click.pass_context
def list_categories(ctx, category_type: str | None):
    """List categories with their type and cash flow activity."""
    db = ctx.obj["db"]
    service = CategoryService(db)

    categories = service.list_categories(type=category_type.lower() if category_type else None)
    if not categories:
        click.echo("No categories found. Run 'init-categories' to create default categories.")
        return

    click.echo("\nCategories:")
    click.echo("-" * 60)
    for cat in categories:
        click.echo(
            f"ID: {cat.id:3d} | {cat.name:28s} | {cat.type.value:7s} | {cat.cash_flow_activity.value}"
        )


@category_group.command("create")
@click.argument("name")
@click.option(
    "--type",
    "category_type",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    default=TransactionType.EXPENSE.value,
    show_default=True,
    help="Category type",
)
@click.option(
    "--activity",
    type=click.Choice([a.value for a in CashFlowActivity], case_sensitive=False),
    help="Cash flow section (guessed from the name when omitted)",
)
@click.option("--color", help="Display color (e.g., '#10B981')")
@click.pass_context
def create_category(ctx, name: str, category_type: str, activity: str | None, color: str | None):
    """Create a new category.

    Examples:
        bookkit category create "Consulting Income" --type income
        bookkit category create "Vehicle Purchase" --activity investing
    """
    db = ctx.obj["db"]
    service = CategoryService(db)

    try:
        category_id = service.create_category(
            name=name,
            type=category_type.lower(),
            cash_flow_activity=activity.lower() if activity else None,
            color=color,
        )
        category = service.get_category(category_id)
        click.echo(
            f"Created {category.type.value} category '{category.name}' "
            f"({category.cash_flow_activity.value}, ID: {category_id})"
        )
    except ValueError as e:
        handle_domain_error(ctx, e)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
