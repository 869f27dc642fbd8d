"""Domain model entities for budgetbook.

These are pure data classes representing business concepts, independent of
database schema. Storage implementations convert their rows into these
entities so the services never see ORM objects.
"""

import enum
from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from typing import Optional

from budgetbook.domain.errors import ValidationError
from budgetbook.domain.periods import parse_period, scheduled_date as project_day, validate_day

MAX_NAME_LENGTH = 100


class ItemKind(str, enum.Enum):
    """Direction of a line item."""

    INCOME = "income"
    EXPENSE = "expense"


class ValuationMode(str, enum.Enum):
    """How a group item derives its effective amount."""

    SUM = "sum"
    FIXED = "fixed"


class RecurrenceMode(str, enum.Enum):
    """Shape of a recurring series."""

    MONTHLY = "monthly"
    INSTALLMENTS = "installments"


class SeriesScope(str, enum.Enum):
    """Breadth of a batch operation over a series."""

    THIS_ONLY = "apenas_este"
    THIS_AND_FOLLOWING = "este_e_proximos"
    ALL = "todos"


@dataclass(frozen=True)
class OwnerContext:
    """Data isolation boundary for every query.

    A profile (workspace) scopes data when present; otherwise the legacy
    user identifier does.
    """

    user_id: str
    profile_id: Optional[str] = None

    @property
    def scoped_by_profile(self) -> bool:
        return self.profile_id is not None

    def __str__(self) -> str:
        if self.scoped_by_profile:
            return f"profile:{self.profile_id}"
        return f"user:{self.user_id}"


@dataclass(frozen=True)
class LineItem:
    """Income or expense record for one month."""

    id: int
    user_id: str
    profile_id: Optional[str]
    kind: ItemKind
    name: str
    amount: Decimal
    period: str
    completed: bool
    scheduled_date: Optional[date]
    due_date: Optional[date]
    category_id: Optional[str]
    parent_id: Optional[int]
    is_group: bool
    valuation_mode: ValuationMode
    series_id: Optional[str]
    created_at: datetime
    updated_at: datetime
    # Attached at read time only, never persisted with the item
    children: tuple["LineItem", ...] = field(default=(), compare=False)

    @property
    def is_child(self) -> bool:
        return self.parent_id is not None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None


def validate_name(name: str) -> str:
    """Return the stripped name, or raise if empty or too long."""
    if name is None or not name.strip():
        raise ValidationError("Name is required")
    name = name.strip()
    if len(name) > MAX_NAME_LENGTH:
        raise ValidationError(f"Name must be at most {MAX_NAME_LENGTH} characters")
    return name


def validate_amount(amount: Decimal) -> Decimal:
    """Raise if amount is negative."""
    if amount < 0:
        raise ValidationError("Amount must be zero or greater")
    return amount


@dataclass(frozen=True)
class LineItemDraft:
    """A line item that has not been persisted yet."""

    kind: ItemKind
    name: str
    amount: Decimal
    period: str
    completed: bool = False
    scheduled_date: Optional[date] = None
    due_date: Optional[date] = None
    category_id: Optional[str] = None
    parent_id: Optional[int] = None
    is_group: bool = False
    valuation_mode: ValuationMode = ValuationMode.SUM
    series_id: Optional[str] = None

    def validate(self) -> None:
        """Check field-level rules.

        Raises:
            ValidationError: If any field is malformed
        """
        validate_name(self.name)
        validate_amount(self.amount)
        parse_period(self.period)
        if self.parent_id is not None and self.is_group:
            raise ValidationError("A child item cannot be a group")
        if self.due_date is not None and self.kind != ItemKind.EXPENSE:
            raise ValidationError("Only expenses can have a due date")


@dataclass(frozen=True)
class ChildDraft:
    """A line item to be created inside an existing group."""

    kind: ItemKind
    name: str
    amount: Decimal
    completed: bool = False
    scheduled_date: Optional[date] = None
    category_id: Optional[str] = None

    def validate(self) -> None:
        validate_name(self.name)
        if self.amount <= 0:
            raise ValidationError("Child amount must be greater than zero")

    def to_draft(self, group: LineItem) -> LineItemDraft:
        """Build the persisted draft; the period is inherited from the group."""
        return LineItemDraft(
            kind=self.kind,
            name=self.name.strip(),
            amount=self.amount,
            period=group.period,
            completed=self.completed,
            scheduled_date=self.scheduled_date,
            category_id=self.category_id,
            parent_id=group.id,
        )


@dataclass(frozen=True)
class LineItemPatch:
    """Partial update of a line item.

    ``None`` means "leave unchanged". Nullable fields are cleared through
    the explicit ``clear_*`` flags. Kind and period are not patchable.

    ``scheduled_day`` and ``due_day`` are days of month. They are projected
    onto the period of every item the patch reaches, clamped to the month's
    end, so one patch can move the dates of a whole series.
    """

    name: Optional[str] = None
    amount: Optional[Decimal] = None
    completed: Optional[bool] = None
    scheduled_date: Optional[date] = None
    due_date: Optional[date] = None
    category_id: Optional[str] = None
    is_group: Optional[bool] = None
    valuation_mode: Optional[ValuationMode] = None
    scheduled_day: Optional[int] = None
    due_day: Optional[int] = None
    clear_scheduled_date: bool = False
    clear_due_date: bool = False
    clear_category: bool = False

    def validate(self) -> None:
        if self.name is not None:
            validate_name(self.name)
        if self.amount is not None:
            validate_amount(self.amount)
        scheduled_inputs = [self.scheduled_date is not None, self.scheduled_day is not None, self.clear_scheduled_date]
        if sum(scheduled_inputs) > 1:
            raise ValidationError("Conflicting changes to the scheduled date")
        due_inputs = [self.due_date is not None, self.due_day is not None, self.clear_due_date]
        if sum(due_inputs) > 1:
            raise ValidationError("Conflicting changes to the due date")
        for day in (self.scheduled_day, self.due_day):
            if day is not None:
                validate_day(day)
        if self.clear_category and self.category_id is not None:
            raise ValidationError("Cannot set and clear the category at once")

    def changes(self) -> dict:
        """Return the column values this patch writes."""
        result = {}
        if self.name is not None:
            result["name"] = self.name.strip()
        if self.amount is not None:
            result["amount"] = self.amount
        if self.completed is not None:
            result["completed"] = self.completed
        if self.is_group is not None:
            result["is_group"] = self.is_group
        if self.valuation_mode is not None:
            result["valuation_mode"] = self.valuation_mode
        if self.clear_scheduled_date:
            result["scheduled_date"] = None
        elif self.scheduled_date is not None:
            result["scheduled_date"] = self.scheduled_date
        if self.clear_due_date:
            result["due_date"] = None
        elif self.due_date is not None:
            result["due_date"] = self.due_date
        if self.clear_category:
            result["category_id"] = None
        elif self.category_id is not None:
            result["category_id"] = self.category_id
        return result

    def day_changes(self) -> dict:
        """Return the date columns set by day of month, keyed to that day."""
        days = (("scheduled_date", self.scheduled_day), ("due_date", self.due_day))
        return {field: day for field, day in days if day is not None}

    def changes_for(self, period: str) -> dict:
        """Return the column values for an item in ``period``, days projected."""
        result = self.changes()
        for field, day in self.day_changes().items():
            result[field] = project_day(period, day)
        return result

    def is_empty(self) -> bool:
        return not self.changes() and not self.day_changes()


@dataclass(frozen=True)
class RecurringSeriesSpec:
    """Input for generating a recurring series."""

    kind: ItemKind
    name: str
    amount: Decimal
    start_period: str
    mode: RecurrenceMode
    count: int
    scheduled_day: Optional[int] = None
    completed: bool = False
    category_id: Optional[str] = None
    is_group: bool = False
    valuation_mode: ValuationMode = ValuationMode.SUM


@dataclass(frozen=True)
class GeneratedSeries:
    """Ready-to-persist batch for one series."""

    series_id: str
    drafts: tuple[LineItemDraft, ...]


@dataclass(frozen=True)
class ResolvedItem:
    """Line item enriched with its effective amount."""

    item: LineItem
    effective_amount: Decimal
    # Only set for fixed-mode groups: amount minus the children's sum
    difference: Optional[Decimal] = None

    @property
    def children(self) -> tuple[LineItem, ...]:
        return self.item.children


@dataclass(frozen=True)
class MonthTotals:
    """Summary totals for one month."""

    total_income: Decimal
    received_income: Decimal
    pending_income: Decimal
    total_expense: Decimal
    paid_expense: Decimal
    pending_expense: Decimal
    balance: Decimal


@dataclass(frozen=True)
class MonthSnapshot:
    """Everything the month view needs."""

    period: str
    income: tuple[ResolvedItem, ...]
    expense: tuple[ResolvedItem, ...]
    groups: tuple[ResolvedItem, ...]
    totals: MonthTotals


@dataclass(frozen=True)
class MonthHistory:
    """Income and expense totals of one month in the dashboard history."""

    period: str
    label: str
    income: Decimal
    expense: Decimal

    @property
    def balance(self) -> Decimal:
        return self.income - self.expense


@dataclass(frozen=True)
class CategoryShare:
    """Expense total of one category and its share of all expenses."""

    category_id: Optional[str]
    name: str
    total: Decimal
    percentage: Decimal


@dataclass(frozen=True)
class Dashboard:
    """Consolidated view of a month with recent history."""

    period: str
    totals: MonthTotals
    pending_income_count: int
    pending_expense_count: int
    history: tuple[MonthHistory, ...]
    expenses_by_category: tuple[CategoryShare, ...]
    upcoming: tuple[LineItem, ...]
    recent: tuple[LineItem, ...]


@dataclass(frozen=True)
class SeriesInfo:
    """Summary of a series shown before a batch operation."""

    series_id: Optional[str]
    total: int
    completed: int
    pending: int
    first_period: str
    last_period: str
    anchor_period: str
    scope_counts: dict[SeriesScope, int]


@dataclass(frozen=True)
class SeriesMutationResult:
    """Outcome of a scoped batch update or delete."""

    affected_count: int
    affected_periods: tuple[str, ...]


@dataclass(frozen=True)
class Category:
    """Category domain entity, either built-in or user-defined."""

    id: str
    name: str
    kind: ItemKind
    icon: Optional[str]
    color: Optional[str]
    order: int
    is_default: bool
