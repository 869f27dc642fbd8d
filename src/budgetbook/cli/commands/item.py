"""Line item management commands."""

from datetime import datetime

import click

from budgetbook.cli.commands.add import MODE_CHOICE
from budgetbook.cli.commands.month import category_names
from budgetbook.cli.error_handling import handle_domain_error
from budgetbook.cli.rendering import format_amount, print_month
from budgetbook.cli.resolution import resolve_category_or_exit
from budgetbook.domain.category import CategoryService
from budgetbook.domain.entities import LineItemPatch, ValuationMode
from budgetbook.domain.errors import DomainError, InvalidOperationError
from budgetbook.domain.line_item import LineItemService
from budgetbook.utils.amount_parser import parse_amount


@click.group()
def item_group():
    """Manage single line items."""
    pass


@item_group.command("show")
@click.argument("item_id", type=int)
@click.pass_context
def show_item(ctx, item_id: int):
    """Show all fields of a line item."""
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = LineItemService(db)

    try:
        item = service.get_item(owner, item_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    names = category_names(db, owner)
    click.echo(f"\nLine item {item.id}")
    click.echo(f"  Kind: {item.kind.value}")
    click.echo(f"  Name: {item.name}")
    click.echo(f"  Amount: {format_amount(item.amount)}")
    click.echo(f"  Period: {item.period}")
    click.echo(f"  Completed: {'yes' if item.completed else 'no'}")
    if item.scheduled_date:
        click.echo(f"  Scheduled: {item.scheduled_date}")
    if item.due_date:
        click.echo(f"  Due: {item.due_date}")
    if item.category_id:
        click.echo(f"  Category: {names.get(item.category_id, item.category_id)}")
    if item.is_group:
        click.echo(f"  Group: yes ({item.valuation_mode.value})")
    if item.parent_id is not None:
        click.echo(f"  Parent group: {item.parent_id}")
    if item.series_id:
        click.echo(f"  Series: {item.series_id}")


def build_patch(
    ctx,
    service: LineItemService,
    item_id: int,
    name: str | None,
    amount: str | None,
    day: int | None,
    clear_day: bool,
    due: datetime | None,
    due_day: int | None,
    clear_due: bool,
    category: str | None,
    is_group: bool | None,
    mode: str | None,
) -> LineItemPatch:
    """Translate update options into a patch for the given item."""
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]

    try:
        item = service.get_item(owner, item_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    patch_amount = None
    if amount is not None:
        try:
            patch_amount = parse_amount(amount)
        except ValueError as e:
            click.echo(f"Error: Invalid amount format: {e}", err=True)
            ctx.exit(1)

    # Empty string clears the category
    clear_category = category == ""
    category_id = None
    if category:
        category_id = resolve_category_or_exit(ctx, CategoryService(db), owner, category, item.kind)

    return LineItemPatch(
        name=name,
        amount=patch_amount,
        due_date=due.date() if due else None,
        scheduled_day=day,
        due_day=due_day,
        category_id=category_id,
        is_group=is_group,
        valuation_mode=ValuationMode(mode.lower()) if mode else None,
        clear_scheduled_date=clear_day,
        clear_due_date=clear_due,
        clear_category=clear_category,
    )


def update_options(func):
    """Options shared by 'item update' and 'series update'."""
    options = [
        click.option("--name", help="New name"),
        click.option("--amount", help="New amount"),
        click.option("--day", type=click.IntRange(1, 31), help="New scheduled day of month"),
        click.option("--clear-day", is_flag=True, help="Remove the scheduled day"),
        click.option("--due", type=click.DateTime(formats=["%Y-%m-%d"]), help="New due date (single item)"),
        click.option("--due-day", type=click.IntRange(1, 31), help="New due day of month"),
        click.option("--clear-due", is_flag=True, help="Remove the due date"),
        click.option("--category", help="Category ID or name, or empty string to clear"),
        click.option("--group/--no-group", "is_group", default=None, help="Turn grouping on or off"),
        click.option("--mode", type=MODE_CHOICE, help="Group valuation mode"),
    ]
    for option in reversed(options):
        func = option(func)
    return func


@item_group.command("update")
@click.argument("item_id", type=int)
@update_options
@click.pass_context
def update_item(
    ctx, item_id: int, name, amount, day, clear_day, due, due_day, clear_due, category, is_group, mode
):
    """Update a line item.

    Updates only the fields that are provided. Use --category "" to clear
    the category.

    Examples:
        budgetbook item update 3 --amount 75.00
        budgetbook item update 3 --no-group
    """
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = LineItemService(db)
    patch = build_patch(
        ctx, service, item_id, name, amount, day, clear_day, due, due_day, clear_due, category, is_group, mode
    )

    try:
        snapshot = service.update(owner, item_id, patch)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated line item {item_id}")
    print_month(snapshot, category_names(db, owner))


@item_group.command("toggle")
@click.argument("item_id", type=int)
@click.pass_context
def toggle_item(ctx, item_id: int):
    """Mark a line item as received/paid, or undo it."""
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = LineItemService(db)

    try:
        snapshot = service.toggle_completed(owner, item_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Toggled line item {item_id}")
    print_month(snapshot, category_names(db, owner))


@item_group.command("delete")
@click.argument("item_id", type=int)
@click.option("--force", is_flag=True, help="Also delete the children of a group")
@click.pass_context
def delete_item(ctx, item_id: int, force: bool):
    """Delete a line item.

    Deleting a group that still has children requires --force.

    Examples:
        budgetbook item delete 4
        budgetbook item delete 2 --force
    """
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = LineItemService(db)

    try:
        snapshot = service.delete(owner, item_id, force=force)
    except InvalidOperationError as e:
        if e.child_count:
            click.echo(f"Error: {e}", err=True)
            click.echo(f"Re-run with --force to delete the group and its {e.child_count} child item(s).", err=True)
            ctx.exit(1)
        handle_domain_error(ctx, e)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Deleted line item {item_id}")
    print_month(snapshot, category_names(db, owner))


def register_commands(cli: click.Group) -> None:
    """Register item commands with main CLI."""
    cli.add_command(item_group, name="item")
