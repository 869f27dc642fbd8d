"""Month view command."""

import click

from budgetbook.cli.error_handling import handle_domain_error
from budgetbook.cli.rendering import print_month
from budgetbook.domain.category import CategoryService
from budgetbook.domain.errors import DomainError
from budgetbook.domain.line_item import LineItemService
from budgetbook.utils.period_parser import parse_period_input


def category_names(db, owner) -> dict[str, str]:
    """Map category IDs to display names for an owner."""
    return {cat.id: cat.name for cat in CategoryService(db).list_categories(owner)}


@click.command("month")
@click.argument("period", required=False)
@click.pass_context
def show_month(ctx, period: str | None):
    """Show income, expenses and totals of a month.

    PERIOD accepts YYYY-MM or relative values like 'last month'
    (default: this month).

    Examples:
        budgetbook month
        budgetbook month 2025-03
        budgetbook month "next month"
    """
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = LineItemService(db)

    try:
        snapshot = service.list_month(owner, parse_period_input(period))
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    print_month(snapshot, category_names(db, owner))


def register_commands(cli):
    """Register month command with main CLI."""
    cli.add_command(show_month)
