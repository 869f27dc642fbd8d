"""Add line item command."""

from datetime import datetime

import click

from budgetbook.cli.commands.month import category_names
from budgetbook.cli.error_handling import handle_domain_error
from budgetbook.cli.rendering import format_amount, print_month
from budgetbook.cli.resolution import resolve_category_or_exit
from budgetbook.domain.category import CategoryService
from budgetbook.domain.entities import ItemKind, LineItemDraft, ValuationMode
from budgetbook.domain.errors import DomainError
from budgetbook.domain.line_item import LineItemService
from budgetbook.domain.periods import scheduled_date
from budgetbook.utils.amount_parser import parse_amount
from budgetbook.utils.period_parser import parse_period_input

KIND_CHOICE = click.Choice([k.value for k in ItemKind], case_sensitive=False)
MODE_CHOICE = click.Choice([m.value for m in ValuationMode], case_sensitive=False)


@click.command("add")
@click.option("--kind", required=True, type=KIND_CHOICE, help="income or expense")
@click.option("--name", required=True, help="Item name (max 100 characters)")
@click.option("--amount", default="0", show_default=True, help="Amount (e.g., 123.45)")
@click.option("--period", help="Month (YYYY-MM or 'next month'; default: this month)")
@click.option("--day", type=click.IntRange(1, 31), help="Scheduled day of month")
@click.option("--due", type=click.DateTime(formats=["%Y-%m-%d"]), help="Due date (expenses only)")
@click.option("--category", help="Category ID or name")
@click.option("--group", "is_group", is_flag=True, help="Create a group that can hold child items")
@click.option("--mode", type=MODE_CHOICE, default="sum", show_default=True, help="Group valuation mode")
@click.option("--completed", is_flag=True, help="Mark as received/paid")
@click.pass_context
def add_item(
    ctx,
    kind: str,
    name: str,
    amount: str,
    period: str | None,
    day: int | None,
    due: datetime | None,
    category: str | None,
    is_group: bool,
    mode: str,
    completed: bool,
):
    """Add a line item to a month.

    Examples:
        budgetbook add --kind income --name Salary --amount 5000 --day 5
        budgetbook add --kind expense --name "Visa bill" --group --mode sum
    """
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = LineItemService(db)
    item_kind = ItemKind(kind.lower())

    try:
        item_amount = parse_amount(amount)
        item_period = parse_period_input(period)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)

    category_id = resolve_category_or_exit(ctx, CategoryService(db), owner, category, item_kind)

    try:
        draft = LineItemDraft(
            kind=item_kind,
            name=name,
            amount=item_amount,
            period=item_period,
            completed=completed,
            scheduled_date=scheduled_date(item_period, day),
            due_date=due.date() if due else None,
            category_id=category_id,
            is_group=is_group,
            valuation_mode=ValuationMode(mode.lower()),
        )
        snapshot = service.create(owner, draft)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created {item_kind.value} '{name.strip()}' ({format_amount(item_amount)}) in {item_period}")
    print_month(snapshot, category_names(db, owner))


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_item)
