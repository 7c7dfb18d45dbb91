"""Main CLI entry point."""

import logging

import click
from finestra.database.factories import create_sqlite_database
from finestra.domain.errors import DomainError
from finestra.domain.user import UserService
from finestra.cli.error_handling import handle_domain_error

# Import and register all commands at module level
from finestra.cli.commands import (
    init_categories,
    category,
    project,
    cost,
    revenue,
    fixed_cost,
    dashboard,
    deviation,
)

ANONYMOUS_USER = "anonymous"

LOG_LEVELS = {0: logging.WARNING, 1: logging.INFO}


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides FINESTRA_DB_PATH environment variable)",
    envvar="FINESTRA_DB_PATH",
)
@click.option(
    "--user",
    "user_id",
    default=ANONYMOUS_USER,
    show_default=True,
    envvar="FINESTRA_USER_ID",
    help="User whose records are read and written",
)
@click.option("--verbose", "-v", count=True, help="Log more (-v info, -vv debug)")
@click.pass_context
def cli(ctx, db_path: str | None, user_id: str, verbose: int):
    """Finestra - project finance tracking.

    Track projects with their payables and receivables, split totals into
    installments, roll fixed costs forward and watch cost deviations.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=LOG_LEVELS.get(verbose, logging.DEBUG),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["user_id"] = user_id.strip() or ANONYMOUS_USER
        ctx.call_on_close(db.disconnect)

        # First use of a user id seeds the default categories
        try:
            UserService(db).ensure_user(ctx.obj["user_id"])
        except DomainError as e:
            handle_domain_error(ctx, e)


# Register all commands
init_categories.register_commands(cli)
category.register_commands(cli)
project.register_commands(cli)
cost.register_commands(cli)
revenue.register_commands(cli)
fixed_cost.register_commands(cli)
dashboard.register_commands(cli)
deviation.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
