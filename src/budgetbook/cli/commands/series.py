"""Recurring series commands."""

import click

from budgetbook.cli.commands.add import KIND_CHOICE, MODE_CHOICE
from budgetbook.cli.commands.item import build_patch, update_options
from budgetbook.cli.error_handling import handle_domain_error
from budgetbook.cli.rendering import SCOPE_LABELS, print_mutation_result, print_series_info
from budgetbook.cli.resolution import resolve_category_or_exit
from budgetbook.domain.category import CategoryService
from budgetbook.domain.entities import (
    ItemKind,
    RecurrenceMode,
    RecurringSeriesSpec,
    SeriesScope,
    ValuationMode,
)
from budgetbook.domain.errors import DomainError
from budgetbook.domain.line_item import LineItemService
from budgetbook.utils.amount_parser import parse_amount
from budgetbook.utils.period_parser import parse_period_input

SCOPE_CHOICE = click.Choice([s.value for s in SeriesScope])
RECURRENCE_CHOICE = click.Choice([m.value for m in RecurrenceMode], case_sensitive=False)


@click.group()
def series_group():
    """Manage recurring series."""
    pass


@series_group.command("create")
@click.option("--kind", required=True, type=KIND_CHOICE, help="income or expense")
@click.option("--name", required=True, help="Item name")
@click.option("--amount", default="0", show_default=True, help="Amount repeated in every month")
@click.option("--start", "start_period", help="First month (default: this month)")
@click.option(
    "--recurrence",
    type=RECURRENCE_CHOICE,
    default="monthly",
    show_default=True,
    help="monthly repeats the name, installments numbers it (1/N)",
)
@click.option("--count", required=True, type=int, help="Number of months (2-60)")
@click.option("--day", type=click.IntRange(1, 31), help="Scheduled day of month")
@click.option("--category", help="Category ID or name")
@click.option("--group", "is_group", is_flag=True, help="Every month gets a group item")
@click.option("--mode", type=MODE_CHOICE, default="sum", show_default=True, help="Group valuation mode")
@click.option("--completed", is_flag=True, help="Mark every item as received/paid")
@click.pass_context
def create_series(
    ctx,
    kind: str,
    name: str,
    amount: str,
    start_period: str | None,
    recurrence: str,
    count: int,
    day: int | None,
    category: str | None,
    is_group: bool,
    mode: str,
    completed: bool,
):
    """Create a recurring series of line items.

    Examples:
        budgetbook series create --kind expense --name Rent --amount 1500 --count 12 --day 10
        budgetbook series create --kind expense --name TV --amount 300 --recurrence installments --count 10
    """
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = LineItemService(db)
    item_kind = ItemKind(kind.lower())

    try:
        series_amount = parse_amount(amount)
        first_period = parse_period_input(start_period)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    category_id = resolve_category_or_exit(ctx, CategoryService(db), owner, category, item_kind)

    spec = RecurringSeriesSpec(
        kind=item_kind,
        name=name,
        amount=series_amount,
        start_period=first_period,
        mode=RecurrenceMode(recurrence.lower()),
        count=count,
        scheduled_day=day,
        completed=completed,
        category_id=category_id,
        is_group=is_group,
        valuation_mode=ValuationMode(mode.lower()),
    )
    try:
        result = service.create_recurring_series(owner, spec)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {result['created']} item(s) starting {first_period} (series {result['series_id']})")


@series_group.command("info")
@click.argument("item_id", type=int)
@click.pass_context
def series_info(ctx, item_id: int):
    """Show the series of an item and how many items each scope covers."""
    service = LineItemService(ctx.obj["db"])

    try:
        info = service.get_series_info(ctx.obj["owner"], item_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    print_series_info(info)


@series_group.command("update")
@click.argument("item_id", type=int)
@click.option("--scope", type=SCOPE_CHOICE, default=SeriesScope.THIS_ONLY.value, show_default=True)
@update_options
@click.pass_context
def update_series(
    ctx, item_id: int, scope: str, name, amount, day, clear_day, due, due_day, clear_due, category, is_group, mode
):
    """Update items of a series.

    --scope apenas_este changes only ITEM_ID, este_e_proximos changes it and
    every later month, todos changes the whole series.

    Examples:
        budgetbook series update 7 --scope este_e_proximos --amount 1600
        budgetbook series update 7 --scope todos --day 10
    """
    owner = ctx.obj["owner"]
    service = LineItemService(ctx.obj["db"])
    patch = build_patch(
        ctx, service, item_id, name, amount, day, clear_day, due, due_day, clear_due, category, is_group, mode
    )

    try:
        result = service.update_series(owner, item_id, SeriesScope(scope), patch)
    except DomainError as e:
        handle_domain_error(ctx, e)

    print_mutation_result("Updated", result)


@series_group.command("delete")
@click.argument("item_id", type=int)
@click.option("--scope", type=SCOPE_CHOICE, default=SeriesScope.THIS_ONLY.value, show_default=True)
@click.option("--force", is_flag=True, help="Also delete the children of selected groups")
@click.option("--yes", "assume_yes", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_series(ctx, item_id: int, scope: str, force: bool, assume_yes: bool):
    """Delete items of a series.

    Examples:
        budgetbook series delete 7 --scope todos
        budgetbook series delete 7 --scope este_e_proximos --yes
    """
    owner = ctx.obj["owner"]
    service = LineItemService(ctx.obj["db"])
    series_scope = SeriesScope(scope)

    try:
        info = service.get_series_info(owner, item_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    count = info.scope_counts[series_scope]
    if not assume_yes and not click.confirm(
        f"Delete {count} item(s) ({SCOPE_LABELS[series_scope]})?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        result = service.delete_series(owner, item_id, series_scope, force=force)
    except DomainError as e:
        handle_domain_error(ctx, e)

    print_mutation_result("Deleted", result)


def register_commands(cli: click.Group) -> None:
    """Register series commands with main CLI."""
    cli.add_command(series_group, name="series")
