"""Category management commands."""

import click

from budgetbook.cli.commands.add import KIND_CHOICE
from budgetbook.domain.category import CategoryService
from budgetbook.domain.entities import ItemKind
from budgetbook.domain.errors import DomainError


@click.group()
def category_group():
    """Manage categories."""
    pass


@category_group.command("list")
@click.option("--kind", type=KIND_CHOICE, help="Only list categories of this kind")
@click.pass_context
def list_categories(ctx, kind: str | None):
    """List built-in and custom categories."""
    service = CategoryService(ctx.obj["db"])
    categories = service.list_categories(ctx.obj["owner"], kind=ItemKind(kind.lower()) if kind else None)

    click.echo("\nCategories:")
    for cat in categories:
        marker = "" if cat.is_default else " (custom)"
        click.echo(f"  {cat.kind.value:<8} {cat.name}{marker} (ID: {cat.id})")


@category_group.command("create")
@click.argument("name")
@click.option("--kind", required=True, type=KIND_CHOICE, help="income or expense")
@click.option("--icon", help="Icon name")
@click.option("--color", help="Color, e.g. #22C55E")
@click.pass_context
def create_category(ctx, name: str, kind: str, icon: str | None, color: str | None):
    """Create a custom category."""
    service = CategoryService(ctx.obj["db"])

    try:
        category_id = service.create_category(
            ctx.obj["owner"], name=name, kind=ItemKind(kind.lower()), icon=icon, color=color
        )
        click.echo(f"Created category '{name.strip()}' (ID: {category_id})")
    except DomainError as e:
        click.echo(f"Error: {e}", err=True)
        ctx.exit(1)


def register_commands(cli):
    """Register category commands with main CLI."""
    cli.add_command(category_group, name="category")
