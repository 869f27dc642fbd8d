"""CLI helpers for owner and category resolution."""

from __future__ import annotations

from typing import Optional

import click

from budgetbook.domain.category import CategoryService
from budgetbook.domain.entities import ItemKind, OwnerContext

DEFAULT_USER = "local"


def resolve_owner(user: Optional[str], profile: Optional[str]) -> OwnerContext:
    """Build the owner context from CLI options.

    A missing user falls back to a single local user, so the CLI works
    without any configuration.
    """
    user_id = (user or "").strip() or DEFAULT_USER
    profile_id = (profile or "").strip() or None
    return OwnerContext(user_id=user_id, profile_id=profile_id)


def resolve_category(
    category_service: CategoryService, owner: OwnerContext, category: str, kind: ItemKind
) -> str:
    """Resolve a category ID or name to a category ID.

    Args:
        category_service: CategoryService instance
        owner: Owner context
        category: Category ID or name (case-insensitive)
        kind: Kind the category must belong to

    Returns:
        Category ID

    Raises:
        ValueError: If no category of that kind matches
    """
    available = category_service.list_categories(owner, kind=kind)
    for cat in available:
        if cat.id == category:
            return cat.id
    for cat in available:
        if cat.name.lower() == category.strip().lower():
            return cat.id
    raise ValueError(f"Category '{category}' not found for {kind.value}")


def resolve_category_or_exit(
    ctx: click.Context,
    category_service: CategoryService,
    owner: OwnerContext,
    category: Optional[str],
    kind: ItemKind,
) -> Optional[str]:
    """Resolve a category, or exit with a CLI error.

    This keeps error messaging and exit behavior consistent across commands.
    """
    if category is None:
        return None
    try:
        return resolve_category(category_service, owner, category, kind)
    except ValueError as exc:
        click.echo(f"Error: {exc}", err=True)
        ctx.exit(1)
