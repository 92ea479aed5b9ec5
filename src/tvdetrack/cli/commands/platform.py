"""Platform management commands."""

import click
from tvdetrack.cli.entity_resolution import resolve_entity_or_exit
from tvdetrack.cli.error_handling import handle_domain_error
from tvdetrack.cli.formatting import format_percentage
from tvdetrack.domain.errors import DomainError
from tvdetrack.domain.platform import PlatformService


@click.group()
def platform_group():
    """Manage ride-hailing platforms."""
    pass


@platform_group.command("create")
@click.argument("name", metavar="PLATFORM_NAME")
@click.option(
    "--commission",
    type=float,
    default=0.0,
    show_default=True,
    help="Platform commission as a percentage (display only)",
)
@click.pass_context
def create_platform(ctx, name: str, commission: float):
    """Create a new platform.

    Examples:
        tvdetrack platform create "Uber" --commission 25
        tvdetrack platform create "FreeNow"
    """
    service = PlatformService(ctx.obj["db"])

    try:
        platform = service.create_platform(name=name, commission_rate=commission)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created platform '{platform.name}' (ID: {platform.id})")


@platform_group.command("list")
@click.pass_context
def list_platforms(ctx):
    """List all platforms."""
    service = PlatformService(ctx.obj["db"])

    platforms = service.list_platforms()
    if not platforms:
        click.echo("No platforms found.")
        return

    click.echo("\nPlatforms:")
    click.echo("-" * 70)
    for p in platforms:
        click.echo(
            f"{p.id} | {p.name:15s} | Commission: {format_percentage(p.commission_rate)}"
        )


@platform_group.command("update")
@click.argument("platform", metavar="PLATFORM")
@click.option("--name", help="New platform name")
@click.option("--commission", type=float, help="New commission percentage")
@click.pass_context
def update_platform(ctx, platform: str, name: str | None, commission: float | None) -> None:
    """Update a platform.

    PLATFORM can be a platform name or ID.

    Examples:
        tvdetrack platform update "Uber" --commission 22
        tvdetrack platform update "Bolt" --name "Bolt PT"
    """
    service = PlatformService(ctx.obj["db"])
    platform_id = resolve_entity_or_exit(ctx, service.list_platforms(), platform, "Platform")

    try:
        updated = service.update_platform(
            platform_id, name=name, commission_rate=commission
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated platform '{updated.name}'")


@platform_group.command("delete")
@click.argument("platform", metavar="PLATFORM")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_platform(ctx, platform: str, yes: bool) -> None:
    """Delete a platform.

    PLATFORM can be a platform name or ID. Transactions recorded on the
    platform are kept and shown with an unknown platform.
    """
    service = PlatformService(ctx.obj["db"])
    platform_id = resolve_entity_or_exit(ctx, service.list_platforms(), platform, "Platform")
    platform_obj = service.get_platform(platform_id)

    count = service.count_transactions(platform_id)
    if count:
        click.echo(
            f"Platform '{platform_obj.name}' is used by {count} "
            f"transaction{'s' if count != 1 else ''}."
        )

    if not yes and not click.confirm(
        f"Are you sure you want to delete platform '{platform_obj.name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_platform(platform_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted platform '{platform_obj.name}'")


def register_commands(cli):
    """Register platform commands with main CLI."""
    cli.add_command(platform_group, name="platform")
