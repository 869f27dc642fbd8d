"""Category domain service."""

from typing import Optional

from budgetbook.database.base import Database
from budgetbook.domain.entities import Category, ItemKind, OwnerContext
from budgetbook.domain.errors import NotFoundError, ValidationError, category_not_found

DEFAULT_PREFIX = "default-"

MAX_CATEGORY_NAME_LENGTH = 50

# Built-in categories every owner sees; they are constants, not stored rows
DEFAULT_CATEGORIES: tuple[Category, ...] = (
    Category("default-salary", "Salary", ItemKind.INCOME, "Wallet", "#22C55E", 1, True),
    Category("default-investments", "Investments", ItemKind.INCOME, "TrendingUp", "#8B5CF6", 2, True),
    Category("default-other-income", "Other", ItemKind.INCOME, "CircleDollarSign", "#6B7280", 3, True),
    Category("default-housing", "Housing", ItemKind.EXPENSE, "Home", "#EF4444", 1, True),
    Category("default-food", "Food", ItemKind.EXPENSE, "Utensils", "#F97316", 2, True),
    Category("default-transport", "Transport", ItemKind.EXPENSE, "Car", "#EAB308", 3, True),
    Category("default-health", "Health", ItemKind.EXPENSE, "Heart", "#EC4899", 4, True),
    Category("default-leisure", "Leisure", ItemKind.EXPENSE, "Gamepad2", "#06B6D4", 5, True),
    Category("default-credit-card", "Credit Card", ItemKind.EXPENSE, "CreditCard", "#6366F1", 6, True),
    Category("default-other-expense", "Other", ItemKind.EXPENSE, "CircleDollarSign", "#6B7280", 7, True),
)


def is_default_category(category_id: str) -> bool:
    return category_id.startswith(DEFAULT_PREFIX)


def get_default_category(category_id: str) -> Optional[Category]:
    for category in DEFAULT_CATEGORIES:
        if category.id == category_id:
            return category
    return None


class CategoryService:
    """Read access to built-in and user-defined categories."""

    def __init__(self, db: Database):
        """Initialize category service.

        Args:
            db: Database instance
        """
        self.db = db

    def list_categories(
        self, owner: OwnerContext, kind: Optional[ItemKind] = None
    ) -> list[Category]:
        """List categories available to an owner.

        Built-in categories come first in their fixed order, followed by the
        owner's own categories sorted by name.

        Args:
            owner: Owner context
            kind: Optional kind filter

        Returns:
            List of category entities
        """
        defaults = [c for c in DEFAULT_CATEGORIES if kind is None or c.kind == kind]
        defaults.sort(key=lambda c: (c.kind != ItemKind.INCOME, c.order))
        return defaults + self.db.list_categories(owner, kind=kind)

    def get_category(self, owner: OwnerContext, category_id: str) -> Optional[Category]:
        """Get category by ID.

        Args:
            owner: Owner context
            category_id: Built-in (``default-*``) or user-defined category ID

        Returns:
            Category entity or None if not found
        """
        if is_default_category(category_id):
            return get_default_category(category_id)
        return self.db.get_category(owner, category_id)

    def require_category(self, owner: OwnerContext, category_id: str) -> Category:
        """Get category by ID or raise NotFoundError."""
        category = self.get_category(owner, category_id)
        if category is None:
            raise NotFoundError(category_not_found(category_id))
        return category

    def create_category(
        self,
        owner: OwnerContext,
        name: str,
        kind: ItemKind,
        icon: Optional[str] = None,
        color: Optional[str] = None,
    ) -> str:
        """Create a user-defined category.

        Returns:
            Category ID

        Raises:
            ValidationError: If the name is empty, too long or already used
                for this kind
        """
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        name = name.strip()
        if len(name) > MAX_CATEGORY_NAME_LENGTH:
            raise ValidationError(
                f"Category name must be at most {MAX_CATEGORY_NAME_LENGTH} characters"
            )
        for existing in self.db.list_categories(owner, kind=kind):
            if existing.name.lower() == name.lower():
                raise ValidationError(f"Category '{name}' already exists")

        return self.db.insert_category(owner, name=name, kind=kind, icon=icon, color=color)
