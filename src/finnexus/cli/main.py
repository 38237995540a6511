"""Main CLI entry point."""

import logging

import click

from finnexus.config import get_settings
from finnexus.database.factories import create_database

# Import and register all commands at module level
from finnexus.cli.commands import (
    add,
    advisor,
    dashboard,
    report,
    tax,
    transaction,
)

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to local database file (overrides FINNEXUS_DB_PATH environment variable)",
    envvar="FINNEXUS_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Logging level (overrides FINNEXUS_LOG_LEVEL)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """FinNexus - Financial management for small companies.

    Record income and expenses with commissions and partial payments,
    follow monthly KPIs, and export CSV or PDF reports.
    """
    ctx.ensure_object(dict)
    settings = get_settings()

    logging.basicConfig(
        level=(log_level or settings.app.log_level).upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_database(settings, database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.obj["settings"] = settings


# Register all commands
add.register_commands(cli)
transaction.register_commands(cli)
tax.register_commands(cli)
dashboard.register_commands(cli)
report.register_commands(cli)
advisor.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
