"""Shared domain error messages and error types."""

from typing import Optional


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for callers that only catch ValueError.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested item, group or category does not exist for this owner."""


class InvalidOperationError(DomainError):
    """Operation rejected because it would break a structural rule.

    ``child_count`` is set when the rejection is caused by live children,
    so callers can offer a forced retry.
    """

    def __init__(self, message: str, child_count: Optional[int] = None):
        super().__init__(message)
        self.child_count = child_count


class StorageError(RuntimeError):
    """Failure reported by the storage layer.

    Not a DomainError: the domain services propagate it without
    interpreting it.
    """


def item_not_found(item_id: int) -> str:
    """Return message for missing line item."""
    return f"Line item {item_id} not found"


def group_not_found(group_id: int) -> str:
    """Return message for missing group."""
    return f"Group {group_id} not found"


def category_not_found(category_id: str) -> str:
    """Return message for missing category."""
    return f"Category '{category_id}' not found"


def not_a_group(item_id: int) -> str:
    """Return message when a group operation targets a plain item."""
    return f"Line item {item_id} is not a group"


def _children(count: int) -> str:
    return f"{count} child item{'s' if count != 1 else ''}"


def ungroup_blocked(item_id: int, child_count: int) -> str:
    """Return message when ungrouping an item that still has children."""
    return (
        f"Cannot ungroup line item {item_id}: it has {_children(child_count)}. "
        "Move or delete them first."
    )


def group_delete_needs_force(item_id: int, child_count: int) -> str:
    """Return message when deleting a group with children without force."""
    return (
        f"Group {item_id} has {_children(child_count)}. "
        "Deleting it removes them too; confirm with force to proceed."
    )


def child_toggle_blocked(item_id: int) -> str:
    """Return message when toggling completion on a child item."""
    return (
        f"Cannot toggle completion of line item {item_id}: it belongs to a group. "
        "Toggle the group instead."
    )


def child_cannot_be_group(item_id: int) -> str:
    """Return message when a child would become a group."""
    return f"Line item {item_id} belongs to a group and cannot itself be a group"


def not_a_child(item_id: int) -> str:
    """Return message when a move targets an item outside any group."""
    return f"Line item {item_id} does not belong to a group"


def kind_mismatch(item_kind: str, group_kind: str) -> str:
    """Return message when a child's kind differs from its group's."""
    return f"Child kind ({item_kind}) must match group kind ({group_kind})"


def period_mismatch(item_period: str, group_period: str) -> str:
    """Return message when a child would leave its group's month."""
    return f"Child period ({item_period}) must match group period ({group_period})"


def series_ungroup_blocked(child_count: int) -> str:
    """Return message when a series patch would ungroup groups with children."""
    return (
        f"Cannot ungroup these series items: they have {_children(child_count)}. "
        "Move or delete them first."
    )


def series_delete_needs_force(child_count: int) -> str:
    """Return message when a series delete would remove group children."""
    return (
        f"The selected series items have {_children(child_count)}. "
        "Deleting them removes the children too; confirm with force to proceed."
    )
