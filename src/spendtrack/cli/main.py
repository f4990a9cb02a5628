"""Main CLI entry point."""

import logging

import click
from spendtrack.database.factories import create_sqlite_database

# Import and register all commands at module level
from spendtrack.cli.commands import expense, payment, goal, stats

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides SPENDTRACK_DB_PATH environment variable)",
    envvar="SPENDTRACK_DB_PATH",
)
@click.option(
    "--user",
    "user_id",
    type=int,
    default=1,
    show_default=True,
    envvar="SPENDTRACK_USER_ID",
    help="ID of the user whose records are read and written",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="SPENDTRACK_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, user_id: int, log_level: str):
    """Spendtrack - personal spending tracker.

    Record expenses and payments, set budget goals and compare spending
    between periods.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.obj["user_id"] = user_id

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
expense.register_commands(cli)
payment.register_commands(cli)
goal.register_commands(cli)
stats.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
