"""Initialize default platforms command."""

import click
from tvdetrack.cli.formatting import format_percentage
from tvdetrack.domain.platform import PlatformService


@click.command("init-platforms")
@click.pass_context
def init_platforms(ctx):
    """Create the default platforms (Uber and Bolt).

    Platforms whose names already exist are left untouched.
    """
    service = PlatformService(ctx.obj["db"])

    created = service.init_default_platforms()
    if not created:
        click.echo("Default platforms already exist.")
        return

    for platform in created:
        click.echo(
            f"Created platform '{platform.name}' "
            f"(commission {format_percentage(platform.commission_rate)})"
        )


def register_commands(cli):
    """Register init-platforms command with main CLI."""
    cli.add_command(init_platforms)
