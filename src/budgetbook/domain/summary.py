"""Dashboard summary domain service."""

import logging
from collections import defaultdict
from datetime import date, timedelta
from decimal import Decimal
from typing import Iterable, Optional

from budgetbook.database.base import Database
from budgetbook.domain.category import CategoryService
from budgetbook.domain.entities import (
    CategoryShare,
    Dashboard,
    LineItem,
    MonthHistory,
    MonthSnapshot,
    OwnerContext,
    ResolvedItem,
    ValuationMode,
)
from budgetbook.domain.line_item import LineItemService
from budgetbook.domain.periods import parse_period, period_for_date, shift_period

logger = logging.getLogger(__name__)

MONTH_LABELS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")
DEFAULT_HISTORY_MONTHS = 6
MAX_HISTORY_MONTHS = 24
UPCOMING_DAYS = 7
LIST_LIMIT = 5
UNCATEGORIZED = "Uncategorized"


def month_label(period: str) -> str:
    """Return the three-letter label of a period's month."""
    _, month = parse_period(period)
    return MONTH_LABELS[month - 1]


def history_periods(today: date, months: int) -> list[str]:
    """Return the last ``months`` periods ending at today's month, oldest first.

    The count is clamped to 1..24.
    """
    months = max(1, min(months, MAX_HISTORY_MONTHS))
    current = period_for_date(today)
    return [shift_period(current, -offset) for offset in range(months - 1, -1, -1)]


def expected_date(item: LineItem) -> Optional[date]:
    """Date an expense is expected to be paid: its due date, else its scheduled date."""
    return item.due_date or item.scheduled_date


def expense_parts(resolved: ResolvedItem) -> Iterable[tuple[Optional[str], Decimal]]:
    """Split an expense into (category ID, amount) parts.

    Sum-mode groups contribute their children, each under its own category
    or the group's when it has none. Everything else contributes its
    effective amount under its own category.
    """
    item = resolved.item
    if item.is_group and item.valuation_mode == ValuationMode.SUM:
        for child in item.children:
            yield child.category_id or item.category_id, child.amount
    else:
        yield item.category_id, resolved.effective_amount


class SummaryService:
    """Service for building the dashboard summary."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db
        self.line_items = LineItemService(db)
        self.categories = CategoryService(db)

    def build_dashboard(
        self,
        owner: OwnerContext,
        period: Optional[str] = None,
        today: Optional[date] = None,
        months: int = DEFAULT_HISTORY_MONTHS,
    ) -> Dashboard:
        """Build the dashboard of a month.

        Totals, pending counts and recent items describe the selected month.
        History and expenses by category cover the last ``months`` months up
        to the current one. Upcoming expenses are the pending ones expected
        within the next seven days when the selected month is the current
        month, otherwise the selected month's pending expenses by date.

        Args:
            owner: Owner context
            period: Month in YYYY-MM format (default: current month)
            today: Reference date (defaults to today)
            months: Number of history months, clamped to 1..24

        Returns:
            Dashboard for the selected month

        Raises:
            ValidationError: If the period is malformed
        """
        today = today or date.today()
        current = period_for_date(today)
        period = period or current

        snapshot = self.line_items.list_month(owner, period)
        snapshots = {period: snapshot}
        periods = history_periods(today, months)
        for history_period in periods:
            if history_period not in snapshots:
                snapshots[history_period] = self.line_items.list_month(owner, history_period)

        if period == current:
            upcoming = self.upcoming_expenses(owner, today, snapshots)
        else:
            upcoming = self.pending_expenses_by_date(snapshot)

        dashboard = Dashboard(
            period=period,
            totals=snapshot.totals,
            pending_income_count=sum(1 for r in snapshot.income if not r.item.completed),
            pending_expense_count=sum(1 for r in snapshot.expense if not r.item.completed),
            history=tuple(self.month_history(snapshots[p]) for p in periods),
            expenses_by_category=self.expenses_by_category(owner, [snapshots[p] for p in periods]),
            upcoming=upcoming,
            recent=self.recent_items(snapshot),
        )
        logger.debug("Built dashboard of %s for %s over %d months", period, owner, len(periods))
        return dashboard

    @staticmethod
    def month_history(snapshot: MonthSnapshot) -> MonthHistory:
        return MonthHistory(
            period=snapshot.period,
            label=month_label(snapshot.period),
            income=snapshot.totals.total_income,
            expense=snapshot.totals.total_expense,
        )

    def expenses_by_category(
        self, owner: OwnerContext, snapshots: Iterable[MonthSnapshot]
    ) -> tuple[CategoryShare, ...]:
        """Total expenses per category with each category's percentage.

        Args:
            owner: Owner context
            snapshots: Months to include

        Returns:
            Category shares, largest total first. Categories without
            expenses are omitted.
        """
        totals: dict[Optional[str], Decimal] = defaultdict(Decimal)
        for snapshot in snapshots:
            for resolved in snapshot.expense:
                for category_id, amount in expense_parts(resolved):
                    totals[category_id] += amount

        grand_total = sum(totals.values(), Decimal("0"))
        names = {cat.id: cat.name for cat in self.categories.list_categories(owner)}
        shares = []
        for category_id, total in totals.items():
            if not total:
                continue
            percentage = Decimal("0")
            if grand_total > 0:
                percentage = (total / grand_total * 100).quantize(Decimal("0.01"))
            shares.append(
                CategoryShare(category_id, names.get(category_id, UNCATEGORIZED), total, percentage)
            )
        shares.sort(key=lambda share: (-share.total, share.name))
        return tuple(shares)

    def upcoming_expenses(
        self, owner: OwnerContext, today: date, snapshots: dict[str, MonthSnapshot]
    ) -> tuple[LineItem, ...]:
        """Pending expenses expected between today and seven days from now."""
        end = today + timedelta(days=UPCOMING_DAYS)
        candidates = []
        for window_period in sorted({period_for_date(today), period_for_date(end)}):
            snapshot = snapshots.get(window_period) or self.line_items.list_month(owner, window_period)
            candidates.extend(r.item for r in snapshot.expense)

        upcoming = [
            item
            for item in candidates
            if not item.completed
            and expected_date(item) is not None
            and today <= expected_date(item) <= end
        ]
        upcoming.sort(key=lambda item: (expected_date(item), item.id))
        return tuple(upcoming[:LIST_LIMIT])

    @staticmethod
    def pending_expenses_by_date(snapshot: MonthSnapshot) -> tuple[LineItem, ...]:
        """Pending dated expenses of a month, earliest first."""
        pending = [
            r.item
            for r in snapshot.expense
            if not r.item.completed and expected_date(r.item) is not None
        ]
        pending.sort(key=lambda item: (expected_date(item), item.id))
        return tuple(pending[:LIST_LIMIT])

    @staticmethod
    def recent_items(snapshot: MonthSnapshot) -> tuple[LineItem, ...]:
        """Most recently created items of a month, newest first."""
        items = [r.item for r in snapshot.income + snapshot.expense]
        items.sort(key=lambda item: (item.created_at, item.id), reverse=True)
        return tuple(items[:LIST_LIMIT])
