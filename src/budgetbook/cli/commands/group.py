"""Group commands: children, moves and group detail."""

import click

from budgetbook.cli.commands.month import category_names
from budgetbook.cli.error_handling import handle_domain_error
from budgetbook.cli.rendering import format_amount, print_month
from budgetbook.cli.resolution import resolve_category_or_exit
from budgetbook.domain.category import CategoryService
from budgetbook.domain.entities import ChildDraft
from budgetbook.domain.errors import DomainError
from budgetbook.domain.line_item import LineItemService
from budgetbook.domain.periods import scheduled_date
from budgetbook.utils.amount_parser import parse_amount


@click.group()
def group_group():
    """Manage group items and their children."""
    pass


@group_group.command("add-child")
@click.argument("group_id", type=int)
@click.option("--name", required=True, help="Child name")
@click.option("--amount", required=True, help="Child amount, greater than zero")
@click.option("--day", type=click.IntRange(1, 31), help="Scheduled day of month")
@click.option("--category", help="Category ID or name")
@click.option("--completed", is_flag=True, help="Mark as received/paid")
@click.pass_context
def add_child(ctx, group_id: int, name: str, amount: str, day, category, completed: bool):
    """Add a child item to a group.

    The child takes the kind and month of its group.

    Examples:
        budgetbook group add-child 2 --name "Groceries" --amount 320.50
    """
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = LineItemService(db)

    try:
        child_amount = parse_amount(amount)
    except ValueError as e:
        click.echo(f"Error: Invalid amount format: {e}", err=True)
        ctx.exit(1)

    try:
        group = service.get_group(owner, group_id).item
    except DomainError as e:
        handle_domain_error(ctx, e)

    category_id = resolve_category_or_exit(ctx, CategoryService(db), owner, category, group.kind)

    try:
        snapshot = service.create_child(
            owner,
            group_id,
            ChildDraft(
                kind=group.kind,
                name=name,
                amount=child_amount,
                completed=completed,
                scheduled_date=scheduled_date(group.period, day),
                category_id=category_id,
            ),
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Added '{name.strip()}' ({format_amount(child_amount)}) to group {group_id}")
    print_month(snapshot, category_names(db, owner))


@group_group.command("move")
@click.argument("child_id", type=int)
@click.argument("group_id", type=int)
@click.pass_context
def move_child(ctx, child_id: int, group_id: int):
    """Move a child item to another group of the same kind and month."""
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = LineItemService(db)

    try:
        snapshot = service.move_child(owner, child_id, group_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Moved line item {child_id} to group {group_id}")
    print_month(snapshot, category_names(db, owner))


@group_group.command("show")
@click.argument("group_id", type=int)
@click.pass_context
def show_group(ctx, group_id: int):
    """Show a group, its children and its effective amount."""
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = LineItemService(db)

    try:
        resolved = service.get_group(owner, group_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    group = resolved.item
    click.echo(f"\nGroup {group.id}: {group.name} ({group.kind.value}, {group.period})")
    click.echo(f"  Mode: {group.valuation_mode.value}")
    click.echo(f"  Stored amount: {format_amount(group.amount)}")
    click.echo(f"  Effective amount: {format_amount(resolved.effective_amount)}")
    if resolved.difference is not None:
        click.echo(f"  Difference to children: {format_amount(resolved.difference)}")

    if not resolved.children:
        click.echo("  No child items")
        return

    click.echo(f"  Children ({len(resolved.children)}):")
    for child in resolved.children:
        click.echo(f"    {child.id:<5} {child.name:<40} {format_amount(child.amount):>12}")


def register_commands(cli: click.Group) -> None:
    """Register group commands with main CLI."""
    cli.add_command(group_group, name="group")
