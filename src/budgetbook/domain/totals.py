"""Month totals over resolved line items."""

from decimal import Decimal
from typing import Iterable

from budgetbook.domain.entities import MonthTotals, ResolvedItem


def _sum(items: Iterable[ResolvedItem]) -> Decimal:
    return sum((resolved.effective_amount for resolved in items), Decimal("0"))


def compute_totals(
    income: Iterable[ResolvedItem], expense: Iterable[ResolvedItem]
) -> MonthTotals:
    """Fold a month's items into expected, realized and pending totals.

    Args:
        income: Resolved income items of the month
        expense: Resolved expense items of the month

    Returns:
        MonthTotals computed from effective amounts, never raw amounts
    """
    income = list(income)
    expense = list(expense)

    total_income = _sum(income)
    received_income = _sum(r for r in income if r.item.completed)
    total_expense = _sum(expense)
    paid_expense = _sum(r for r in expense if r.item.completed)

    return MonthTotals(
        total_income=total_income,
        received_income=received_income,
        pending_income=total_income - received_income,
        total_expense=total_expense,
        paid_expense=paid_expense,
        pending_expense=total_expense - paid_expense,
        balance=total_income - total_expense,
    )
