"""Main CLI entry point."""

import logging

import click
from workshopmgr.cli.error_handling import StoreErrorGroup
from workshopmgr.database.factories import DB_PATH_ENVVAR, create_sqlite_database

# Import and register all commands at module level
from workshopmgr.cli.commands import (
    backup,
    billing,
    campaign,
    client,
    company,
    logistics,
    registration,
    reminder,
    report,
    workshop,
)

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(verbose: int = 0) -> None:
    """Configure root logging from the verbosity count."""
    if verbose > 1:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format=LOG_FORMAT)


@click.group(cls=StoreErrorGroup)
@click.option(
    "--db-path",
    type=click.Path(),
    help=f"Path to database file (overrides {DB_PATH_ENVVAR} environment variable)",
    envvar=DB_PATH_ENVVAR,
)
@click.option(
    "--verbose",
    "-v",
    count=True,
    help="Increase log output (-v for INFO, -vv for DEBUG)",
)
@click.pass_context
def cli(ctx, db_path: str | None, verbose: int):
    """Workshopmgr - Children's workshop management.

    Keep track of clients and their children, schedule workshops at your
    locations, register participants, and follow payments, costs, quotes
    and invoices.
    """
    ctx.ensure_object(dict)
    setup_logging(verbose)

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


# Register all commands
company.register_commands(cli)
client.register_commands(cli)
logistics.register_commands(cli)
workshop.register_commands(cli)
registration.register_commands(cli)
billing.register_commands(cli)
report.register_commands(cli)
backup.register_commands(cli)
campaign.register_commands(cli)
reminder.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
