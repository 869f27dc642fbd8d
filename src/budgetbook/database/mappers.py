"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, so the domain entities stay
stable when the table layout changes.
"""

from decimal import Decimal

from budgetbook.domain import entities as domain
from budgetbook.database.models import (
    Category as ORMCategory,
    LineItem as ORMLineItem,
)


def line_item_to_domain(orm_item: ORMLineItem) -> domain.LineItem:
    """Convert SQLAlchemy LineItem model to domain LineItem entity."""
    return domain.LineItem(
        id=orm_item.id,
        user_id=orm_item.user_id,
        profile_id=orm_item.profile_id,
        kind=domain.ItemKind(orm_item.kind),
        name=orm_item.name,
        amount=Decimal(orm_item.amount),
        period=orm_item.period,
        completed=orm_item.completed,
        scheduled_date=orm_item.scheduled_date,
        due_date=orm_item.due_date,
        category_id=orm_item.category_id,
        parent_id=orm_item.parent_id,
        is_group=orm_item.is_group,
        valuation_mode=domain.ValuationMode(orm_item.valuation_mode),
        series_id=orm_item.series_id,
        created_at=orm_item.created_at,
        updated_at=orm_item.updated_at,
    )


def draft_to_orm(draft: domain.LineItemDraft, owner: domain.OwnerContext) -> ORMLineItem:
    """Build a SQLAlchemy LineItem row from a draft."""
    return ORMLineItem(
        user_id=owner.user_id,
        profile_id=owner.profile_id,
        kind=draft.kind.value,
        name=draft.name,
        amount=draft.amount,
        period=draft.period,
        completed=draft.completed,
        scheduled_date=draft.scheduled_date,
        due_date=draft.due_date,
        category_id=draft.category_id,
        parent_id=draft.parent_id,
        is_group=draft.is_group,
        valuation_mode=draft.valuation_mode.value,
        series_id=draft.series_id,
    )


def changes_to_columns(changes: dict) -> dict:
    """Convert domain values in a change set into column values."""
    columns = {}
    for key, value in changes.items():
        if isinstance(value, (domain.ItemKind, domain.ValuationMode)):
            value = value.value
        columns[key] = value
    return columns


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        name=orm_category.name,
        kind=domain.ItemKind(orm_category.kind),
        icon=orm_category.icon,
        color=orm_category.color,
        order=orm_category.sort_order,
        is_default=False,
    )
