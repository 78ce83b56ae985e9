"""Main CLI entry point."""

import click

from burnrate.cli.error_handling import handle_domain_error
from burnrate.config import BurnRateConfig
from burnrate.database.factories import create_sqlite_database
from burnrate.logging import setup_logging

# Import and register all commands at module level
from burnrate.cli.commands import (
    signal,
    import_cmd,
    insights,
    invest,
    summary,
    tax,
)


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides BURNRATE_DB_PATH environment variable)",
    envvar="BURNRATE_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    help="Log level (overrides BURNRATE_LOG_LEVEL environment variable)",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str | None):
    """BurnRate - Recurring cash-flow insights.

    Store the signals extracted from your statements, see recurring income,
    fixed costs and disposable income, and project investment growth.
    """
    ctx.ensure_object(dict)

    try:
        config = BurnRateConfig.from_env()
    except ValueError as e:
        handle_domain_error(ctx, e)
    if db_path:
        config.db_path = db_path
    if log_level:
        config.log_level = log_level
    setup_logging(config.log_level, config.log_format)
    ctx.obj["config"] = config

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=config.db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
signal.register_commands(cli)
import_cmd.register_commands(cli)
insights.register_commands(cli)
invest.register_commands(cli)
summary.register_commands(cli)
tax.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
