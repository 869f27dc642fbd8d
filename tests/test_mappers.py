"""Tests for database mappers."""

from datetime import UTC, date, datetime
from decimal import Decimal

from budgetbook.database.mappers import (
    category_to_domain,
    changes_to_columns,
    draft_to_orm,
    line_item_to_domain,
)
from budgetbook.database.models import Category as ORMCategory, LineItem as ORMLineItem
from budgetbook.domain.entities import (
    Category,
    ItemKind,
    LineItem,
    LineItemDraft,
    OwnerContext,
    ValuationMode,
)


class TestLineItemMapper:
    """Tests for LineItem mapper."""

    def test_line_item_to_domain(self):
        now = datetime.now(UTC)
        orm_item = ORMLineItem(
            id=7,
            user_id="alice",
            profile_id="family",
            kind="expense",
            name="Card",
            amount=Decimal("0.00"),
            period="2025-03",
            completed=False,
            scheduled_date=date(2025, 3, 10),
            due_date=date(2025, 3, 15),
            category_id="default-credit-card",
            parent_id=None,
            is_group=True,
            valuation_mode="fixed",
            series_id="s1",
            created_at=now,
            updated_at=now,
        )

        item = line_item_to_domain(orm_item)

        assert isinstance(item, LineItem)
        assert item.kind == ItemKind.EXPENSE
        assert item.valuation_mode == ValuationMode.FIXED
        assert item.due_date == date(2025, 3, 15)
        assert item.profile_id == "family"
        assert item.children == ()

    def test_draft_to_orm_uses_owner(self):
        draft = LineItemDraft(
            kind=ItemKind.INCOME,
            name="Salary",
            amount=Decimal("5000"),
            period="2025-03",
            valuation_mode=ValuationMode.SUM,
        )

        orm_item = draft_to_orm(draft, OwnerContext(user_id="alice", profile_id="family"))

        assert orm_item.user_id == "alice"
        assert orm_item.profile_id == "family"
        assert orm_item.kind == "income"
        assert orm_item.valuation_mode == "sum"
        assert orm_item.id is None

    def test_changes_to_columns_converts_enums(self):
        columns = changes_to_columns({"valuation_mode": ValuationMode.FIXED, "name": "x", "category_id": None})
        assert columns == {"valuation_mode": "fixed", "name": "x", "category_id": None}


class TestCategoryMapper:
    """Tests for Category mapper."""

    def test_category_to_domain(self):
        orm_category = ORMCategory(
            id="abc",
            user_id="alice",
            profile_id=None,
            name="Pets",
            kind="expense",
            icon="Dog",
            color="#000000",
            sort_order=3,
        )

        category = category_to_domain(orm_category)

        assert isinstance(category, Category)
        assert category.order == 3
        assert category.kind == ItemKind.EXPENSE
        assert category.is_default is False
