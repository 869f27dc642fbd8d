"""CLI error handling helpers."""

import click

from budgetbook.domain.errors import DomainError, InvalidOperationError, StorageError


def handle_domain_error(ctx: click.Context, error: DomainError | ValueError) -> None:
    """Render a domain error and exit with failure."""
    click.echo(f"Error: {error}", err=True)
    if isinstance(error, InvalidOperationError) and error.child_count:
        click.echo(f"  Child items affected: {error.child_count}", err=True)
    ctx.exit(1)


def handle_storage_error(ctx: click.Context, error: StorageError) -> None:
    """Render a storage failure and exit with a distinct status."""
    click.echo(f"Storage error: {error}", err=True)
    ctx.exit(2)
