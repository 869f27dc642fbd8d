"""Dashboard summary command."""

import click

from budgetbook.cli.error_handling import handle_domain_error
from budgetbook.cli.rendering import print_dashboard
from budgetbook.domain.errors import DomainError
from budgetbook.domain.summary import DEFAULT_HISTORY_MONTHS, MAX_HISTORY_MONTHS, SummaryService
from budgetbook.utils.period_parser import parse_period_input


@click.command("summary")
@click.argument("period", required=False)
@click.option(
    "--months",
    type=click.IntRange(1, MAX_HISTORY_MONTHS),
    default=DEFAULT_HISTORY_MONTHS,
    show_default=True,
    help="History months up to the current one",
)
@click.pass_context
def summary(ctx, period: str | None, months: int):
    """Show the dashboard of a month.

    Lists the month's totals and pending counts, income and expenses of
    recent months, expenses by category, upcoming expenses and recently
    added items.

    Examples:
        budgetbook summary
        budgetbook summary "last month" --months 12
    """
    db = ctx.obj["db"]
    owner = ctx.obj["owner"]
    service = SummaryService(db)

    try:
        dashboard = service.build_dashboard(owner, parse_period_input(period), months=months)
    except (DomainError, ValueError) as e:
        handle_domain_error(ctx, e)

    print_dashboard(dashboard)


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
