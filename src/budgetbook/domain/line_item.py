"""Line item domain service."""

import dataclasses
import logging
from collections import defaultdict
from typing import Optional, Sequence

from budgetbook.database.base import Database
from budgetbook.domain.category import CategoryService
from budgetbook.domain.entities import (
    ChildDraft,
    ItemKind,
    LineItem,
    LineItemDraft,
    LineItemPatch,
    MonthSnapshot,
    OwnerContext,
    RecurringSeriesSpec,
    ResolvedItem,
    SeriesInfo,
    SeriesMutationResult,
    SeriesScope,
    validate_name,
)
from budgetbook.domain.errors import (
    InvalidOperationError,
    NotFoundError,
    ValidationError,
    child_cannot_be_group,
    child_toggle_blocked,
    group_delete_needs_force,
    group_not_found,
    item_not_found,
    kind_mismatch,
    not_a_child,
    not_a_group,
    period_mismatch,
    series_delete_needs_force,
    series_ungroup_blocked,
    ungroup_blocked,
)
from budgetbook.domain.periods import parse_period
from budgetbook.domain.series import SeriesGenerator
from budgetbook.domain.series_info import build_series_info, standalone_info
from budgetbook.domain.totals import compute_totals
from budgetbook.domain.valuation import resolve

logger = logging.getLogger(__name__)

MAX_BATCH_SIZE = 50


class LineItemService:
    """Service for managing line items, groups and recurring series."""

    def __init__(self, db: Database, series_generator: Optional[SeriesGenerator] = None):
        """Initialize line item service.

        Args:
            db: Database instance
            series_generator: Optional generator (defaults to one using uuid4 IDs)
        """
        self.db = db
        self.series_generator = series_generator or SeriesGenerator()
        self.categories = CategoryService(db)

    # Reads
    def list_month(self, owner: OwnerContext, period: str) -> MonthSnapshot:
        """List a month's root items with children attached and totals.

        Args:
            owner: Owner context
            period: Month in YYYY-MM format

        Returns:
            MonthSnapshot with income, expense and group items plus totals

        Raises:
            ValidationError: If the period is malformed
        """
        parse_period(period)
        roots = self.db.find_root_by_period(owner, period)
        items = self._attach_children(owner, roots)

        resolved = [resolve(item) for item in items]
        income = tuple(r for r in resolved if r.item.kind == ItemKind.INCOME)
        expense = tuple(r for r in resolved if r.item.kind == ItemKind.EXPENSE)
        groups = tuple(r for r in resolved if r.item.is_group)

        return MonthSnapshot(
            period=period,
            income=income,
            expense=expense,
            groups=groups,
            totals=compute_totals(income, expense),
        )

    def get_item(self, owner: OwnerContext, item_id: int) -> LineItem:
        """Get line item by ID.

        Raises:
            NotFoundError: If the item does not exist for this owner
        """
        item = self.db.find_by_id(owner, item_id)
        if item is None:
            raise NotFoundError(item_not_found(item_id))
        return item

    def list_children(self, owner: OwnerContext, group_id: int) -> list[LineItem]:
        """List the children of a group.

        Raises:
            NotFoundError: If the group does not exist
            InvalidOperationError: If the item is not a group
        """
        group = self._require_group(owner, group_id)
        return self.db.find_children(owner, [group.id])

    def get_group(self, owner: OwnerContext, group_id: int) -> ResolvedItem:
        """Get a group with its children attached and its effective amount."""
        group = self._require_group(owner, group_id)
        children = self.db.find_children(owner, [group.id])
        return resolve(dataclasses.replace(group, children=tuple(children)))

    # Single-item writes
    def create(self, owner: OwnerContext, draft: LineItemDraft) -> MonthSnapshot:
        """Create a standalone line item.

        Args:
            owner: Owner context
            draft: Item to create (no parent, no series)

        Returns:
            Refreshed snapshot of the item's month

        Raises:
            ValidationError: If the draft is malformed
            NotFoundError: If the category does not exist
        """
        draft = self._prepare_standalone(owner, draft)
        item_id = self.db.insert(owner, draft)
        logger.info("Created line item %s in %s for %s", item_id, draft.period, owner)
        return self.list_month(owner, draft.period)

    def create_batch(self, owner: OwnerContext, drafts: Sequence[LineItemDraft]) -> dict:
        """Create several standalone items in one storage call.

        Every draft is validated before anything is written.

        Returns:
            Dict with the number of created items under ``created``
        """
        if not 1 <= len(drafts) <= MAX_BATCH_SIZE:
            raise ValidationError(
                f"A batch must contain between 1 and {MAX_BATCH_SIZE} items, got {len(drafts)}"
            )
        prepared = [self._prepare_standalone(owner, draft) for draft in drafts]
        ids = self.db.insert_batch(owner, prepared)
        logger.info("Created %d line items in one batch for %s", len(ids), owner)
        return {"created": len(ids)}

    def update(self, owner: OwnerContext, item_id: int, patch: LineItemPatch) -> MonthSnapshot:
        """Update a line item.

        Args:
            owner: Owner context
            item_id: Item to update
            patch: Fields to change

        Returns:
            Refreshed snapshot of the item's month

        Raises:
            NotFoundError: If the item or category does not exist
            InvalidOperationError: If ungrouping an item with children, making
                a child a group, or changing completion of a child
        """
        item = self.get_item(owner, item_id)
        self._apply_patch(owner, item, patch)
        return self.list_month(owner, item.period)

    def toggle_completed(self, owner: OwnerContext, item_id: int) -> MonthSnapshot:
        """Flip the completion flag of a root item.

        Raises:
            NotFoundError: If the item does not exist
            InvalidOperationError: If the item belongs to a group
        """
        item = self.get_item(owner, item_id)
        if item.is_child:
            logger.warning("Rejected completion toggle on child item %s", item_id)
            raise InvalidOperationError(child_toggle_blocked(item_id))

        self.db.update(owner, item_id, {"completed": not item.completed})
        logger.info("Set completed=%s on line item %s", not item.completed, item_id)
        return self.list_month(owner, item.period)

    def delete(self, owner: OwnerContext, item_id: int, force: bool = False) -> MonthSnapshot:
        """Delete a line item, cascading to the children of a group.

        Args:
            owner: Owner context
            item_id: Item to delete
            force: Confirms deletion of a group that still has children

        Returns:
            Refreshed snapshot of the item's month

        Raises:
            NotFoundError: If the item does not exist
            InvalidOperationError: If the item is a group with children and
                force is not set (``child_count`` carries the number)
        """
        item = self.get_item(owner, item_id)
        self._delete_item(owner, item, force)
        return self.list_month(owner, item.period)

    # Groups
    def create_child(
        self, owner: OwnerContext, group_id: int, child: ChildDraft
    ) -> MonthSnapshot:
        """Create an item inside a group; it inherits the group's period.

        Raises:
            ValidationError: If the child draft is malformed
            NotFoundError: If the group or category does not exist
            InvalidOperationError: If the target is not a group or its kind
                differs from the child's
        """
        child.validate()
        group = self._require_group(owner, group_id)
        if child.kind != group.kind:
            raise InvalidOperationError(kind_mismatch(child.kind.value, group.kind.value))
        self._check_category(owner, child.category_id, child.kind)

        child_id = self.db.insert(owner, child.to_draft(group))
        logger.info("Created child %s in group %s for %s", child_id, group_id, owner)
        return self.list_month(owner, group.period)

    def move_child(
        self, owner: OwnerContext, child_id: int, new_group_id: int
    ) -> MonthSnapshot:
        """Reassign a child to another group of the same kind and month.

        Raises:
            NotFoundError: If the child or the target group does not exist
            InvalidOperationError: If the item is not a child or the target
                is not a compatible group
        """
        child = self.get_item(owner, child_id)
        if not child.is_child:
            raise InvalidOperationError(not_a_child(child_id))
        if child.parent_id == new_group_id:
            return self.list_month(owner, child.period)

        target = self.db.find_by_id(owner, new_group_id)
        if target is None:
            raise NotFoundError(group_not_found(new_group_id))
        if not target.is_group:
            raise InvalidOperationError(not_a_group(new_group_id))
        if target.kind != child.kind:
            raise InvalidOperationError(kind_mismatch(child.kind.value, target.kind.value))
        if target.period != child.period:
            raise InvalidOperationError(period_mismatch(child.period, target.period))

        self.db.update(owner, child_id, {"parent_id": new_group_id})
        logger.info(
            "Moved child %s from group %s to group %s", child_id, child.parent_id, new_group_id
        )
        return self.list_month(owner, child.period)

    # Recurring series
    def create_recurring_series(self, owner: OwnerContext, spec: RecurringSeriesSpec) -> dict:
        """Generate a series and persist it with one batch write.

        Returns:
            Dict with ``created`` (number of items) and ``series_id``

        Raises:
            ValidationError: If the series input is malformed
            NotFoundError: If the category does not exist
        """
        self._check_category(owner, spec.category_id, spec.kind)
        series = self.series_generator.generate(spec)
        ids = self.db.insert_batch(owner, series.drafts)
        logger.info(
            "Created %s series %s with %d items from %s for %s",
            spec.mode.value,
            series.series_id,
            len(ids),
            spec.start_period,
            owner,
        )
        return {"created": len(ids), "series_id": series.series_id}

    def get_series_info(self, owner: OwnerContext, item_id: int) -> SeriesInfo:
        """Summarize the series of an item for a confirmation prompt."""
        item = self.get_item(owner, item_id)
        if item.series_id is None:
            return standalone_info(item)
        members = self.db.find_by_series_id(owner, item.series_id)
        return build_series_info(item, members)

    def update_series(
        self,
        owner: OwnerContext,
        item_id: int,
        scope: SeriesScope,
        patch: LineItemPatch,
    ) -> SeriesMutationResult:
        """Apply a patch to the items of a series selected by scope.

        Items outside any series, and the THIS_ONLY scope, update just the
        item itself. Otherwise the patch is written with one batch call.
        Dates given as a day of month land in each member's own period;
        an absolute date is refused when the scope spans several items.

        Returns:
            SeriesMutationResult with the affected count and periods

        Raises:
            NotFoundError: If the item or category does not exist
            ValidationError: If the patch is malformed, or carries an
                absolute date for several items
            InvalidOperationError: If the patch would ungroup groups that
                still have children
        """
        item = self.get_item(owner, item_id)
        if item.series_id is None or scope == SeriesScope.THIS_ONLY:
            self._apply_patch(owner, item, patch)
            return SeriesMutationResult(affected_count=1, affected_periods=(item.period,))

        patch.validate()
        if patch.scheduled_date is not None or patch.due_date is not None:
            raise ValidationError(
                "A date cannot be copied across a series; give a day of month instead"
            )
        self._check_patch_fields(owner, item, patch)
        targets = self._series_targets(owner, item, scope)
        if patch.is_group is False:
            child_count = self._count_group_children(owner, targets)
            if child_count:
                logger.warning("Rejected series ungroup of %s: %d children", item.series_id, child_count)
                raise InvalidOperationError(
                    series_ungroup_blocked(child_count), child_count=child_count
                )

        periods = self.db.update_batch(
            owner,
            item.series_id,
            patch.changes(),
            from_period=self._from_period(item, scope),
            days=patch.day_changes(),
        )
        logger.info(
            "Updated %d items of series %s (scope %s) for %s",
            len(periods),
            item.series_id,
            scope.value,
            owner,
        )
        return SeriesMutationResult(affected_count=len(periods), affected_periods=tuple(periods))

    def delete_series(
        self,
        owner: OwnerContext,
        item_id: int,
        scope: SeriesScope,
        force: bool = False,
    ) -> SeriesMutationResult:
        """Delete the items of a series selected by scope.

        Children of deleted groups are removed in the same storage call.

        Returns:
            SeriesMutationResult with the affected count and periods

        Raises:
            NotFoundError: If the item does not exist
            InvalidOperationError: If selected groups have children and force
                is not set
        """
        item = self.get_item(owner, item_id)
        if item.series_id is None or scope == SeriesScope.THIS_ONLY:
            self._delete_item(owner, item, force)
            return SeriesMutationResult(affected_count=1, affected_periods=(item.period,))

        targets = self._series_targets(owner, item, scope)
        child_count = self._count_group_children(owner, targets)
        if child_count and not force:
            logger.warning("Rejected unforced delete of series %s: %d children", item.series_id, child_count)
            raise InvalidOperationError(
                series_delete_needs_force(child_count), child_count=child_count
            )

        periods = self.db.delete_batch(
            owner, item.series_id, from_period=self._from_period(item, scope)
        )
        logger.info(
            "Deleted %d items of series %s (scope %s) for %s",
            len(periods),
            item.series_id,
            scope.value,
            owner,
        )
        return SeriesMutationResult(affected_count=len(periods), affected_periods=tuple(periods))

    # Helpers
    def _attach_children(self, owner: OwnerContext, roots: list[LineItem]) -> list[LineItem]:
        group_ids = [item.id for item in roots if item.is_group]
        children_by_parent: dict[int, list[LineItem]] = defaultdict(list)
        for child in self.db.find_children(owner, group_ids):
            children_by_parent[child.parent_id].append(child)

        result = []
        for item in roots:
            if item.is_group:
                item = dataclasses.replace(item, children=tuple(children_by_parent[item.id]))
            result.append(item)
        return result

    def _require_group(self, owner: OwnerContext, group_id: int) -> LineItem:
        group = self.db.find_by_id(owner, group_id)
        if group is None:
            raise NotFoundError(group_not_found(group_id))
        if not group.is_group:
            raise InvalidOperationError(not_a_group(group_id))
        return group

    def _prepare_standalone(self, owner: OwnerContext, draft: LineItemDraft) -> LineItemDraft:
        draft.validate()
        if draft.parent_id is not None:
            raise ValidationError("Use create_child to add an item to a group")
        if draft.series_id is not None:
            raise ValidationError("Series items can only be created as a recurring series")
        self._check_category(owner, draft.category_id, draft.kind)
        return dataclasses.replace(draft, name=validate_name(draft.name))

    def _check_category(
        self, owner: OwnerContext, category_id: Optional[str], kind: ItemKind
    ) -> None:
        if category_id is None:
            return
        category = self.categories.require_category(owner, category_id)
        if category.kind != kind:
            raise ValidationError(
                f"Category '{category.name}' is for {category.kind.value}, not {kind.value}"
            )

    def _check_patch_fields(self, owner: OwnerContext, item: LineItem, patch: LineItemPatch) -> None:
        if patch.is_group and item.is_child:
            raise InvalidOperationError(child_cannot_be_group(item.id))
        if patch.completed is not None and item.is_child:
            raise InvalidOperationError(child_toggle_blocked(item.id))
        has_due = patch.due_date is not None or patch.due_day is not None
        if has_due and item.kind != ItemKind.EXPENSE:
            raise ValidationError("Only expenses can have a due date")
        self._check_category(owner, patch.category_id, item.kind)

    def _apply_patch(self, owner: OwnerContext, item: LineItem, patch: LineItemPatch) -> None:
        patch.validate()
        self._check_patch_fields(owner, item, patch)
        if patch.is_group is False and item.is_group:
            child_count = self.db.count_children(owner, [item.id]).get(item.id, 0)
            if child_count:
                logger.warning("Rejected ungroup of item %s: %d children", item.id, child_count)
                raise InvalidOperationError(
                    ungroup_blocked(item.id, child_count), child_count=child_count
                )

        changes = patch.changes_for(item.period)
        if changes:
            self.db.update(owner, item.id, changes)
            logger.info("Updated line item %s (%s)", item.id, ", ".join(sorted(changes)))

    def _delete_item(self, owner: OwnerContext, item: LineItem, force: bool) -> None:
        if not item.is_group:
            self.db.delete(owner, item.id)
            logger.info("Deleted line item %s", item.id)
            return

        child_count = self.db.count_children(owner, [item.id]).get(item.id, 0)
        if child_count and not force:
            logger.warning("Rejected unforced delete of group %s: %d children", item.id, child_count)
            raise InvalidOperationError(
                group_delete_needs_force(item.id, child_count), child_count=child_count
            )
        removed = self.db.delete_cascade(owner, item.id)
        logger.info("Deleted group %s with its children (%d rows)", item.id, removed)

    @staticmethod
    def _from_period(item: LineItem, scope: SeriesScope) -> Optional[str]:
        if scope == SeriesScope.THIS_AND_FOLLOWING:
            return item.period
        return None

    def _series_targets(
        self, owner: OwnerContext, item: LineItem, scope: SeriesScope
    ) -> list[LineItem]:
        from_period = self._from_period(item, scope)
        members = self.db.find_by_series_id(owner, item.series_id)
        return [m for m in members if from_period is None or m.period >= from_period]

    def _count_group_children(self, owner: OwnerContext, items: Sequence[LineItem]) -> int:
        group_ids = [item.id for item in items if item.is_group]
        return sum(self.db.count_children(owner, group_ids).values())
