"""Tests for the Database interface returning domain models."""

from datetime import date
from decimal import Decimal

import pytest
from sqlalchemy import update

from budgetbook.database.models import LineItem
from budgetbook.domain import entities
from budgetbook.domain.entities import ItemKind, LineItemDraft, OwnerContext, ValuationMode
from budgetbook.domain.errors import NotFoundError


def draft(name="Rent", period="2025-03", **fields):
    return LineItemDraft(kind=ItemKind.EXPENSE, name=name, amount=Decimal("12.34"), period=period, **fields)


class TestDatabaseInterface:
    """Reads return domain entities, never ORM rows."""

    def test_find_by_id_returns_domain_model(self, temp_db, owner):
        item_id = temp_db.insert(
            owner, draft(scheduled_date=date(2025, 3, 5), category_id="default-housing")
        )

        item = temp_db.find_by_id(owner, item_id)

        assert isinstance(item, entities.LineItem)
        assert item.id == item_id
        assert item.kind == ItemKind.EXPENSE
        assert item.amount == Decimal("12.34")
        assert item.scheduled_date == date(2025, 3, 5)
        assert item.valuation_mode == ValuationMode.SUM
        assert item.user_id == "alice"
        assert item.children == ()

    def test_find_by_id_other_owner(self, temp_db, owner, other_owner):
        item_id = temp_db.insert(owner, draft())
        assert temp_db.find_by_id(other_owner, item_id) is None

    def test_find_root_by_period_excludes_children(self, temp_db, owner):
        group_id = temp_db.insert(owner, draft(name="Card", is_group=True))
        temp_db.insert(owner, draft(name="Fuel", parent_id=group_id))
        temp_db.insert(owner, draft(name="April", period="2025-04"))

        roots = temp_db.find_root_by_period(owner, "2025-03")

        assert [item.name for item in roots] == ["Card"]

    def test_find_children_and_count(self, temp_db, owner):
        first = temp_db.insert(owner, draft(name="A", is_group=True))
        second = temp_db.insert(owner, draft(name="B", is_group=True))
        empty = temp_db.insert(owner, draft(name="C", is_group=True))
        temp_db.insert(owner, draft(name="A1", parent_id=first))
        temp_db.insert(owner, draft(name="A2", parent_id=first))
        temp_db.insert(owner, draft(name="B1", parent_id=second))

        children = temp_db.find_children(owner, [first, second])

        assert [c.name for c in children] == ["A1", "A2", "B1"]
        assert temp_db.count_children(owner, [first, second, empty]) == {first: 2, second: 1}
        assert temp_db.find_children(owner, []) == []
        assert temp_db.count_children(owner, []) == {}

    def test_insert_batch(self, temp_db, owner):
        ids = temp_db.insert_batch(owner, [draft(name="A", series_id="s"), draft(name="B", period="2025-04", series_id="s")])

        assert len(ids) == 2
        members = temp_db.find_by_series_id(owner, "s")
        assert [m.period for m in members] == ["2025-03", "2025-04"]

    def test_update(self, temp_db, owner):
        item_id = temp_db.insert(owner, draft())
        temp_db.update(owner, item_id, {"name": "Rent 2", "valuation_mode": ValuationMode.FIXED, "is_group": True})

        item = temp_db.find_by_id(owner, item_id)
        assert item.name == "Rent 2"
        assert item.valuation_mode == ValuationMode.FIXED
        assert item.is_group

    def test_update_unknown_field(self, temp_db, owner):
        item_id = temp_db.insert(owner, draft())
        with pytest.raises(ValueError, match="series_id"):
            temp_db.update(owner, item_id, {"series_id": "x"})

    def test_update_missing_item(self, temp_db, owner):
        with pytest.raises(NotFoundError):
            temp_db.update(owner, 404, {"name": "x"})

    def test_update_batch_from_period(self, temp_db, owner):
        temp_db.insert_batch(owner, [draft(period=p, series_id="s") for p in ("2025-01", "2025-02", "2025-03")])

        periods = temp_db.update_batch(owner, "s", {"completed": True}, from_period="2025-02")

        assert periods == ["2025-02", "2025-03"]
        assert [m.completed for m in temp_db.find_by_series_id(owner, "s")] == [False, True, True]

    def test_update_batch_projects_days_per_period(self, temp_db, owner):
        temp_db.insert_batch(
            owner,
            [draft(period=p, series_id="s") for p in ("2025-01", "2025-02", "2025-04")],
        )

        periods = temp_db.update_batch(
            owner, "s", {"name": "Rent v2"}, days={"scheduled_date": 31, "due_date": 10}
        )

        assert periods == ["2025-01", "2025-02", "2025-04"]
        members = temp_db.find_by_series_id(owner, "s")
        assert [m.scheduled_date for m in members] == [date(2025, 1, 31), date(2025, 2, 28), date(2025, 4, 30)]
        assert [m.due_date for m in members] == [date(2025, 1, 10), date(2025, 2, 10), date(2025, 4, 10)]
        assert {m.name for m in members} == {"Rent v2"}

    def test_update_batch_rejects_unknown_day_field(self, temp_db, owner):
        with pytest.raises(ValueError, match="Cannot update"):
            temp_db.update_batch(owner, "s", {}, days={"period": 5})

    def test_update_batch_respects_owner(self, temp_db, owner, other_owner):
        temp_db.insert(owner, draft(series_id="s"))
        assert temp_db.update_batch(other_owner, "s", {"name": "x"}) == []
        assert temp_db.find_by_series_id(owner, "s")[0].name == "Rent"

    def test_delete_cascade(self, temp_db, owner):
        group_id = temp_db.insert(owner, draft(name="Card", is_group=True))
        temp_db.insert(owner, draft(name="A", parent_id=group_id))
        temp_db.insert(owner, draft(name="B", parent_id=group_id))
        keep_id = temp_db.insert(owner, draft(name="Keep"))

        assert temp_db.delete_cascade(owner, group_id) == 3
        assert [i.id for i in temp_db.find_root_by_period(owner, "2025-03")] == [keep_id]

    def test_delete_missing_item(self, temp_db, owner):
        with pytest.raises(NotFoundError):
            temp_db.delete(owner, 404)

    def test_failed_call_leaves_no_open_transaction(self, temp_db, owner):
        item_id = temp_db.insert(owner, draft())
        with pytest.raises(NotFoundError):
            temp_db.update(owner, 404, {"name": "x"})

        assert not temp_db._get_session().in_transaction()
        temp_db.update(owner, item_id, {"name": "Rent v2"})
        assert temp_db.find_by_id(owner, item_id).name == "Rent v2"

    def test_failed_call_discards_pending_writes(self, temp_db, owner):
        item_id = temp_db.insert(owner, draft())
        with pytest.raises(RuntimeError):
            with temp_db._storage_call() as session:
                session.execute(
                    update(LineItem).where(LineItem.id == item_id).values(name="Half written")
                )
                raise RuntimeError("interrupted")

        assert temp_db.find_by_id(owner, item_id).name == "Rent"

    def test_delete_batch_removes_group_children(self, temp_db, owner):
        ids = temp_db.insert_batch(
            owner, [draft(period=p, series_id="s", is_group=True) for p in ("2025-01", "2025-02")]
        )
        temp_db.insert(owner, draft(name="Child", period="2025-02", parent_id=ids[1]))

        periods = temp_db.delete_batch(owner, "s", from_period="2025-02")

        assert periods == ["2025-02"]
        assert [m.id for m in temp_db.find_by_series_id(owner, "s")] == [ids[0]]
        assert temp_db.find_root_by_period(owner, "2025-02") == []
        assert temp_db.count_children(owner, [ids[1]]) == {}


class TestCategoryStorage:
    def test_insert_and_get(self, temp_db, owner):
        category_id = temp_db.insert_category(owner, name="Pets", kind=ItemKind.EXPENSE, icon="Dog")

        category = temp_db.get_category(owner, category_id)

        assert isinstance(category, entities.Category)
        assert category.name == "Pets"
        assert category.kind == ItemKind.EXPENSE
        assert category.order == 1
        assert category.is_default is False

    def test_order_increments_per_kind(self, temp_db, owner):
        temp_db.insert_category(owner, name="Pets", kind=ItemKind.EXPENSE)
        second = temp_db.insert_category(owner, name="Gifts", kind=ItemKind.EXPENSE)
        assert temp_db.get_category(owner, second).order == 2

    def test_isolated_per_profile(self, temp_db):
        family = OwnerContext(user_id="alice", profile_id="family")
        work = OwnerContext(user_id="alice", profile_id="work")
        category_id = temp_db.insert_category(family, name="School", kind=ItemKind.EXPENSE)

        assert temp_db.get_category(work, category_id) is None
        assert temp_db.list_categories(work) == []
        assert [c.name for c in temp_db.list_categories(family, kind=ItemKind.EXPENSE)] == ["School"]
