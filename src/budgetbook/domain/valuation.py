"""Effective amount of a line item."""

from decimal import Decimal
from typing import Optional

from budgetbook.domain.entities import LineItem, ResolvedItem, ValuationMode


def children_total(item: LineItem) -> Decimal:
    """Sum of the raw amounts of the attached children."""
    return sum((child.amount for child in item.children), Decimal("0"))


def effective_amount(item: LineItem) -> Decimal:
    """Return the amount used for display and totals.

    Plain items and fixed-mode groups use their own stored amount. Sum-mode
    groups use the sum of their children (zero when they have none); a child
    is never a group, so no recursion is needed.
    """
    if not item.is_group or item.valuation_mode == ValuationMode.FIXED:
        return item.amount
    return children_total(item)


def group_difference(item: LineItem) -> Optional[Decimal]:
    """Stored amount minus the children's sum, for fixed-mode groups only."""
    if item.is_group and item.valuation_mode == ValuationMode.FIXED:
        return item.amount - children_total(item)
    return None


def resolve(item: LineItem) -> ResolvedItem:
    """Enrich an item with its effective amount."""
    return ResolvedItem(
        item=item,
        effective_amount=effective_amount(item),
        difference=group_difference(item),
    )
