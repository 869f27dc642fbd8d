"""Text rendering of month snapshots, dashboards and series summaries."""

from decimal import Decimal

import click

from budgetbook.domain.entities import (
    Dashboard,
    LineItem,
    MonthSnapshot,
    ResolvedItem,
    SeriesInfo,
    SeriesMutationResult,
    SeriesScope,
    ValuationMode,
)

SCOPE_LABELS = {
    SeriesScope.THIS_ONLY: "this item only",
    SeriesScope.THIS_AND_FOLLOWING: "this and following",
    SeriesScope.ALL: "whole series",
}


def format_amount(amount: Decimal) -> str:
    return f"{amount:,.2f}"


def _status(resolved: ResolvedItem) -> str:
    return "[x]" if resolved.item.completed else "[ ]"


def _print_item(resolved: ResolvedItem, category_names: dict[str, str]) -> None:
    item = resolved.item
    label = item.name
    if item.is_group:
        label += f" ({item.valuation_mode.value})"
    category = category_names.get(item.category_id, "") if item.category_id else ""
    date_str = str(item.scheduled_date) if item.scheduled_date else ""
    click.echo(
        f"  {_status(resolved)} {item.id:<5} {label:<40} "
        f"{format_amount(resolved.effective_amount):>12}  {date_str:<10}  {category}"
    )
    for child in resolved.children:
        click.echo(f"        {child.id:<5} - {child.name:<36} {format_amount(child.amount):>12}")
    if (
        item.is_group
        and item.valuation_mode == ValuationMode.FIXED
        and resolved.difference is not None
        and resolved.difference != 0
    ):
        click.echo(f"        difference to children: {format_amount(resolved.difference)}")


def print_month(snapshot: MonthSnapshot, category_names: dict[str, str]) -> None:
    """Print the month view: income, expenses, then totals."""
    click.echo(f"\nMonth {snapshot.period}")

    for title, items in (("Income", snapshot.income), ("Expenses", snapshot.expense)):
        click.echo("-" * 90)
        click.echo(f"{title}:")
        if not items:
            click.echo("  (none)")
        for resolved in items:
            _print_item(resolved, category_names)

    totals = snapshot.totals
    click.echo("=" * 90)
    click.echo(
        f"Income:   {format_amount(totals.total_income):>12} | "
        f"received {format_amount(totals.received_income)} | "
        f"pending {format_amount(totals.pending_income)}"
    )
    click.echo(
        f"Expenses: {format_amount(totals.total_expense):>12} | "
        f"paid {format_amount(totals.paid_expense)} | "
        f"pending {format_amount(totals.pending_expense)}"
    )
    click.echo(f"Balance:  {format_amount(totals.balance):>12}")


def print_series_info(info: SeriesInfo) -> None:
    """Print a series summary with the count of each scope."""
    if info.series_id is None:
        click.echo(f"Standalone item in {info.anchor_period} (not part of a series)")
        return

    click.echo(f"Series {info.series_id}")
    click.echo(f"  Periods: {info.first_period} to {info.last_period} ({info.total} items)")
    click.echo(f"  Completed: {info.completed} | Pending: {info.pending}")
    click.echo(f"  Selected item: {info.anchor_period}")
    for scope in SeriesScope:
        click.echo(f"  {scope.value:<16} {SCOPE_LABELS[scope]:<20} {info.scope_counts[scope]}")


def print_mutation_result(verb: str, result: SeriesMutationResult) -> None:
    click.echo(f"{verb} {result.affected_count} item(s): {', '.join(result.affected_periods)}")


def _print_dated(items: tuple[LineItem, ...], when) -> None:
    if not items:
        click.echo("  (none)")
    for item in items:
        click.echo(f"  {item.id:<5} {item.name:<40} {format_amount(item.amount):>12}  {when(item) or ''}")


def print_dashboard(dashboard: Dashboard) -> None:
    """Print the dashboard: month totals, history, categories and item lists."""
    totals = dashboard.totals
    click.echo(f"\nSummary {dashboard.period}")
    click.echo("=" * 90)
    click.echo(
        f"Income:   {format_amount(totals.total_income):>12} | "
        f"received {format_amount(totals.received_income)} | "
        f"pending {format_amount(totals.pending_income)} ({dashboard.pending_income_count} items)"
    )
    click.echo(
        f"Expenses: {format_amount(totals.total_expense):>12} | "
        f"paid {format_amount(totals.paid_expense)} | "
        f"pending {format_amount(totals.pending_expense)} ({dashboard.pending_expense_count} items)"
    )
    click.echo(f"Balance:  {format_amount(totals.balance):>12}")

    click.echo("-" * 90)
    click.echo("History:")
    for month in dashboard.history:
        click.echo(
            f"  {month.label} {month.period}  income {format_amount(month.income):>12}  "
            f"expenses {format_amount(month.expense):>12}  balance {format_amount(month.balance):>12}"
        )

    click.echo("-" * 90)
    click.echo("Expenses by category:")
    if not dashboard.expenses_by_category:
        click.echo("  (none)")
    for share in dashboard.expenses_by_category:
        click.echo(f"  {share.name:<30} {format_amount(share.total):>12} {share.percentage:>7}%")

    click.echo("-" * 90)
    click.echo("Upcoming expenses:")
    _print_dated(dashboard.upcoming, lambda item: item.due_date or item.scheduled_date)

    click.echo("-" * 90)
    click.echo("Recently added:")
    _print_dated(dashboard.recent, lambda item: item.period)
