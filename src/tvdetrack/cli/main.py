"""Main CLI entry point."""

import logging

import click
from tvdetrack.database.factories import create_sqlite_database
from tvdetrack.domain.snapshot import SnapshotService

# Import and register all commands at module level
from tvdetrack.cli.commands import (
    add,
    backup,
    driver,
    init_platforms,
    platform,
    summary,
    taxes,
    transaction,
    vehicle,
)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


@click.group()
@click.option(
    "--db-path",
    type=click.Path(),
    help="Path to database file (overrides TVDETRACK_DB_PATH environment variable)",
    envvar="TVDETRACK_DB_PATH",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default="WARNING",
    show_default=True,
    envvar="TVDETRACK_LOG_LEVEL",
    help="Logging verbosity",
)
@click.pass_context
def cli(ctx, db_path: str | None, log_level: str):
    """TVDE Track - finance tracking for TVDE drivers.

    Record income and expenses per driver, vehicle and platform, with
    automatic VAT, IRS and social security estimates for Portuguese
    ride-hailing activity.
    """
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    # Initialize database connection only when actually running a command
    # (not when showing help)
    if ctx.invoked_subcommand is not None:
        db = create_sqlite_database(database_path=db_path)
        db.connect()
        db.initialize_schema()
        ctx.obj["db"] = db
        ctx.call_on_close(db.disconnect)


@cli.result_callback()
@click.pass_context
def run_auto_snapshot(ctx, result, **kwargs):
    """Take the periodic automatic snapshot after a successful command."""
    db = ctx.obj.get("db")
    if db is not None:
        SnapshotService(db).maybe_create_auto_snapshot()
    return result


# Register all commands
platform.register_commands(cli)
driver.register_commands(cli)
vehicle.register_commands(cli)
init_platforms.register_commands(cli)
add.register_commands(cli)
transaction.register_commands(cli)
summary.register_commands(cli)
taxes.register_commands(cli)
backup.register_commands(cli)


def main():
    """Main entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
