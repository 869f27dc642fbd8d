"""Domain layer for budgetbook application.

Services live in their own modules (``budgetbook.domain.line_item``,
``budgetbook.domain.category``); they are not re-exported here because the
database layer imports the entities from this package.
"""

from budgetbook.domain.entities import (
    ItemKind,
    LineItem,
    OwnerContext,
    RecurrenceMode,
    SeriesScope,
    ValuationMode,
)
from budgetbook.domain.errors import (
    DomainError,
    InvalidOperationError,
    NotFoundError,
    StorageError,
    ValidationError,
)

__all__ = [
    "ItemKind",
    "LineItem",
    "OwnerContext",
    "RecurrenceMode",
    "SeriesScope",
    "ValuationMode",
    "DomainError",
    "InvalidOperationError",
    "NotFoundError",
    "StorageError",
    "ValidationError",
]
