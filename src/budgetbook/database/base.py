"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional, Sequence

# Import entities directly to avoid circular import through domain/__init__.py
from budgetbook.domain.entities import (
    Category,
    ItemKind,
    LineItem,
    LineItemDraft,
    OwnerContext,
)

# Columns a caller may change through update/update_batch
UPDATABLE_FIELDS = frozenset(
    {
        "name",
        "amount",
        "completed",
        "scheduled_date",
        "due_date",
        "category_id",
        "is_group",
        "valuation_mode",
        "parent_id",
    }
)


class Database(ABC):
    """Abstract storage interface for budgetbook.

    Every operation is scoped by an OwnerContext. Batch and cascade
    operations must be applied as one atomic storage call, never as a loop
    of single writes.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Line item reads
    @abstractmethod
    def find_root_by_period(self, owner: OwnerContext, period: str) -> list[LineItem]:
        """List items of a period that have no parent, oldest first."""
        pass

    @abstractmethod
    def find_children(self, owner: OwnerContext, parent_ids: Sequence[int]) -> list[LineItem]:
        """List children of the given parents, oldest first."""
        pass

    @abstractmethod
    def find_by_id(self, owner: OwnerContext, item_id: int) -> Optional[LineItem]:
        """Get line item by ID."""
        pass

    @abstractmethod
    def find_by_series_id(self, owner: OwnerContext, series_id: str) -> list[LineItem]:
        """List every item of a series ordered by period."""
        pass

    @abstractmethod
    def count_children(self, owner: OwnerContext, parent_ids: Sequence[int]) -> dict[int, int]:
        """Count children per parent. Parents without children are omitted."""
        pass

    # Line item writes
    @abstractmethod
    def insert(self, owner: OwnerContext, draft: LineItemDraft) -> int:
        """Insert one line item. Returns its ID."""
        pass

    @abstractmethod
    def insert_batch(self, owner: OwnerContext, drafts: Sequence[LineItemDraft]) -> list[int]:
        """Insert several line items in one transaction. Returns their IDs."""
        pass

    @abstractmethod
    def update(self, owner: OwnerContext, item_id: int, changes: dict[str, Any]) -> None:
        """Apply column changes to one line item."""
        pass

    @abstractmethod
    def update_batch(
        self,
        owner: OwnerContext,
        series_id: str,
        changes: dict[str, Any],
        from_period: Optional[str] = None,
        days: Optional[dict[str, int]] = None,
    ) -> list[str]:
        """Apply column changes to a series in one transaction.

        Args:
            owner: Owner context
            series_id: Series to update
            changes: Column values to write
            from_period: If given, only items with period >= from_period
            days: Date columns to set from a day of month. Each item gets
                the day within its own period, clamped to the month's end.

        Returns:
            Periods of the updated items, ascending
        """
        pass

    @abstractmethod
    def delete(self, owner: OwnerContext, item_id: int) -> None:
        """Delete one line item."""
        pass

    @abstractmethod
    def delete_cascade(self, owner: OwnerContext, item_id: int) -> int:
        """Delete an item and its children in one transaction. Returns rows removed."""
        pass

    @abstractmethod
    def delete_batch(
        self, owner: OwnerContext, series_id: str, from_period: Optional[str] = None
    ) -> list[str]:
        """Delete a series (and children of its groups) in one statement.

        Returns:
            Periods of the deleted series items, ascending
        """
        pass

    # Category operations
    @abstractmethod
    def insert_category(
        self,
        owner: OwnerContext,
        name: str,
        kind: ItemKind,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> str:
        """Create a user-defined category. Returns category ID."""
        pass

    @abstractmethod
    def get_category(self, owner: OwnerContext, category_id: str) -> Optional[Category]:
        """Get user-defined category by ID."""
        pass

    @abstractmethod
    def list_categories(
        self, owner: OwnerContext, kind: Optional[ItemKind] = None
    ) -> list[Category]:
        """List user-defined categories, optionally filtered by kind."""
        pass
