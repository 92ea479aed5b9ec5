"""Backup (snapshot) commands."""

import click
from tvdetrack.cli.error_handling import handle_domain_error
from tvdetrack.domain.entities import Backup, BackupType
from tvdetrack.domain.errors import DomainError
from tvdetrack.domain.snapshot import MAX_AUTO_SNAPSHOTS, SnapshotService


def _describe(backup: Backup) -> str:
    data = backup.data
    created = backup.created_at.strftime("%Y-%m-%d %H:%M:%S UTC")
    return (
        f"{backup.id} | {created} | {backup.type.value:6s} | "
        f"{len(data.transactions)} transactions, {len(data.drivers)} drivers, "
        f"{len(data.vehicles)} vehicles, {len(data.platforms)} platforms"
    )


@click.group()
def backup_group():
    """Manage backups of platforms, drivers, vehicles and transactions."""
    pass


@backup_group.command("create")
@click.pass_context
def create_backup(ctx):
    """Create a manual backup.

    Manual backups are kept until deleted. Automatic backups are taken
    weekly and only the most recent ones are kept.
    """
    service = SnapshotService(ctx.obj["db"])
    backup = service.create_manual_snapshot()
    click.echo(f"Created backup {backup.id}")


@backup_group.command("list")
@click.option(
    "--type",
    "backup_type",
    type=click.Choice([t.value for t in BackupType], case_sensitive=False),
    help="Only list manual or automatic backups",
)
@click.pass_context
def list_backups(ctx, backup_type: str | None):
    """List backups, newest first."""
    service = SnapshotService(ctx.obj["db"])

    backups = service.list_snapshots(BackupType(backup_type.lower()) if backup_type else None)
    if not backups:
        click.echo("No backups found.")
        return

    click.echo("\nBackups:")
    click.echo("-" * 110)
    for backup in backups:
        click.echo(_describe(backup))
    click.echo(f"\nAutomatic backups are kept up to {MAX_AUTO_SNAPSHOTS}.")


@backup_group.command("restore")
@click.argument("backup_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def restore_backup(ctx, backup_id: str, yes: bool) -> None:
    """Restore a backup.

    Replaces all platforms, drivers, vehicles and transactions with the
    backup's contents. Backups themselves are kept.
    """
    service = SnapshotService(ctx.obj["db"])

    backup = service.get_snapshot(backup_id)
    if backup is None:
        click.echo(f"Error: Backup {backup_id} not found", err=True)
        ctx.exit(1)

    click.echo(_describe(backup))
    if not yes and not click.confirm(
        "Restoring replaces all current data. Continue?"
    ):
        click.echo("Restore cancelled.")
        return

    try:
        service.restore(backup_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Restored backup {backup_id}")


@backup_group.command("delete")
@click.argument("backup_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_backup(ctx, backup_id: str, yes: bool) -> None:
    """Delete a backup."""
    service = SnapshotService(ctx.obj["db"])

    if service.get_snapshot(backup_id) is None:
        click.echo(f"Backup {backup_id} not found, nothing deleted.")
        return

    if not yes and not click.confirm(f"Are you sure you want to delete backup {backup_id}?"):
        click.echo("Deletion cancelled.")
        return

    service.delete(backup_id)
    click.echo(f"Deleted backup {backup_id}")


def register_commands(cli):
    """Register backup commands with main CLI."""
    cli.add_command(backup_group, name="backup")
