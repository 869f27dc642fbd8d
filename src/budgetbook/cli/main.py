"""Main CLI entry point."""

import logging

import click

from budgetbook.cli.commands import add, category, group, item, month, series, summary
from budgetbook.cli.error_handling import handle_storage_error
from budgetbook.cli.resolution import resolve_owner
from budgetbook.config import get_settings
from budgetbook.database.factories import create_sqlite_database
from budgetbook.domain.errors import StorageError
from budgetbook.logging_config import configure_logging

logger = logging.getLogger(__name__)


class BudgetbookGroup(click.Group):
    """Command group that reports storage failures instead of tracebacks."""

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except StorageError as e:
            logger.error("Storage failure: %s", e)
            handle_storage_error(ctx, e)


@click.group(cls=BudgetbookGroup)
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BUDGETBOOK_DB_PATH environment variable)",
    envvar="BUDGETBOOK_DB_PATH",
)
@click.option("--user", help="User whose data is shown (default: BUDGETBOOK_USER or 'local')")
@click.option("--profile", help="Profile (workspace) whose data is shown; takes precedence over --user")
@click.option("--log-level", help="Log level, e.g. INFO or DEBUG (default: BUDGETBOOK_LOG_LEVEL or WARNING)")
@click.pass_context
def cli(ctx, db_path: str | None, user: str | None, profile: str | None, log_level: str | None):
    """Budgetbook - Monthly income and expense planner.

    Plan each month's income and expenses, group related expenses, and
    spread recurring items or installments over future months.
    """
    ctx.ensure_object(dict)
    settings = get_settings()

    try:
        configure_logging(log_level or settings.log_level)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--log-level")

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["owner"] = resolve_owner(
            user or settings.default_user, profile or settings.default_profile
        )
        ctx.call_on_close(db.disconnect)
        logger.debug("Using database %s for %s", db.database_url, ctx.obj["owner"])


month.register_commands(cli)
add.register_commands(cli)
item.register_commands(cli)
group.register_commands(cli)
series.register_commands(cli)
category.register_commands(cli)
summary.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
