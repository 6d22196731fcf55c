"""Categorization rule commands."""

import click
from bookkit.cli.error_handling import handle_domain_error
from bookkit.cli.formatting import money
from bookkit.domain.entities import RuleField, RuleOperator, TransactionType
from bookkit.domain.rules import RuleService


@click.group()
def rule_group():
    """Manage rules that categorize transactions automatically."""
    pass


@rule_group.command("create")
@click.argument("name")
@click.argument("value")
@click.option("--category", required=True, help="Category name to assign")
@click.option(
    "--field",
    type=click.Choice([f.value for f in RuleField]),
    default=RuleField.DESCRIPTION.value,
    show_default=True,
    help="Transaction field to inspect",
)
@click.option(
    "--operator",
    type=click.Choice([o.value for o in RuleOperator]),
    default=RuleOperator.CONTAINS.value,
    show_default=True,
    help="How the field is compared with VALUE",
)
@click.option(
    "--type",
    "txn_type",
    type=click.Choice([t.value for t in TransactionType], case_sensitive=False),
    help="Type given to matches (default: the category's type)",
)
@click.option("--priority", type=int, default=100, show_default=True, help="Higher runs first")
@click.pass_context
def create_rule(
    ctx,
    name: str,
    value: str,
    category: str,
    field: str,
    operator: str,
    txn_type: str | None,
    priority: int,
):
    """Create a categorization rule.

    Examples:
        bookkit rule create "Adobe" adobe --category Software
        bookkit rule create "Big deposits" 5000 --field amount --operator greater_than --category Sales
    """
    db = ctx.obj["db"]
    service = RuleService(db)

    try:
        rule_id = service.create_rule(
            name=name,
            value=value,
            category_name=category,
            field=field,
            operator=operator,
            type=txn_type.lower() if txn_type else None,
            priority=priority,
        )
        click.echo(f"Created rule '{name}' (ID: {rule_id})")
    except ValueError as e:
        handle_domain_error(ctx, e)


@rule_group.command("list")
@click.option("--active-only", is_flag=True, help="Hide disabled rules")
@click.pass_context
def list_rules(ctx, active_only: bool):
    """List rules in the order they are tried."""
    db = ctx.obj["db"]
    service = RuleService(db)

    rules = service.list_rules(active_only=active_only)
    if not rules:
        click.echo("No rules found.")
        return

    click.echo("\nRules:")
    click.echo("-" * 80)
    for rule in rules:
        status = "" if rule.is_active else " (disabled)"
        click.echo(
            f"ID: {rule.id:3d} | {rule.name}{status} | if {rule.field.value} "
            f"{rule.operator.value} '{rule.value}' -> {rule.category_name} "
            f"({rule.type.value}, priority {rule.priority})"
        )


def _set_active(ctx, rule_id: int, is_active: bool) -> None:
    service = RuleService(ctx.obj["db"])
    try:
        service.set_active(rule_id, is_active)
        click.echo(f"Rule {rule_id} {'enabled' if is_active else 'disabled'}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@rule_group.command("enable")
@click.argument("rule_id", type=int)
@click.pass_context
def enable_rule(ctx, rule_id: int):
    """Enable a rule."""
    _set_active(ctx, rule_id, True)


@rule_group.command("disable")
@click.argument("rule_id", type=int)
@click.pass_context
def disable_rule(ctx, rule_id: int):
    """Disable a rule without deleting it."""
    _set_active(ctx, rule_id, False)


@rule_group.command("delete")
@click.argument("rule_id", type=int)
@click.option("--yes", is_flag=True, help="Skip confirmation prompt")
@click.pass_context
def delete_rule(ctx, rule_id: int, yes: bool):
    """Delete a rule."""
    db = ctx.obj["db"]
    service = RuleService(db)

    try:
        rule = service.require_rule(rule_id)
    except ValueError as e:
        handle_domain_error(ctx, e)

    if not yes and not click.confirm(f"Are you sure you want to delete rule '{rule.name}'?"):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_rule(rule_id)
        click.echo(f"Deleted rule {rule_id}")
    except ValueError as e:
        handle_domain_error(ctx, e)


@rule_group.command("apply")
@click.option("--dry-run", is_flag=True, help="Show matches without changing anything")
@click.pass_context
def apply_rules(ctx, dry_run: bool):
    """Categorize uncategorized transactions with the first matching rule."""
    db = ctx.obj["db"]
    service = RuleService(db)

    if dry_run:
        matches = service.find_matches()
        if not matches:
            click.echo("No uncategorized transactions match a rule.")
            return
        for txn, rule in matches:
            click.echo(
                f"{txn.id:5d} | {txn.date} | {txn.description[:30]:30s} | "
                f"{money(txn.amount):>12} -> {rule.category_name} (rule '{rule.name}')"
            )
        click.echo(f"\n{len(matches)} transaction(s) would be categorized.")
        return

    categorized = service.apply_rules()
    click.echo(f"Categorized {categorized} transaction(s) using rules.")


def register_commands(cli):
    """Register rule commands with main CLI."""
    cli.add_command(rule_group, name="rule")
