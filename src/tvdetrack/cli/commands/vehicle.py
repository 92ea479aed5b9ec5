"""Vehicle management commands."""

import click
from tvdetrack.cli.entity_resolution import resolve_entity_or_exit
from tvdetrack.cli.error_handling import handle_domain_error
from tvdetrack.domain.errors import DomainError
from tvdetrack.domain.vehicle import VehicleService


@click.group()
def vehicle_group():
    """Manage vehicles."""
    pass


@vehicle_group.command("create")
@click.argument("name", metavar="VEHICLE_NAME")
@click.option("--plate", required=True, help="License plate (e.g. AA-00-BB)")
@click.pass_context
def create_vehicle(ctx, name: str, plate: str):
    """Create a new vehicle.

    Examples:
        tvdetrack vehicle create "Toyota Corolla" --plate AA-00-BB
    """
    service = VehicleService(ctx.obj["db"])

    try:
        vehicle = service.create_vehicle(name=name, license_plate=plate)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Created vehicle '{vehicle.name}' [{vehicle.license_plate}] (ID: {vehicle.id})")


@vehicle_group.command("list")
@click.pass_context
def list_vehicles(ctx):
    """List all vehicles."""
    service = VehicleService(ctx.obj["db"])

    vehicles = service.list_vehicles()
    if not vehicles:
        click.echo("No vehicles found.")
        return

    click.echo("\nVehicles:")
    click.echo("-" * 70)
    for v in vehicles:
        click.echo(f"{v.id} | {v.name:20s} | {v.license_plate}")


@vehicle_group.command("update")
@click.argument("vehicle", metavar="VEHICLE")
@click.option("--name", help="New vehicle name")
@click.option("--plate", help="New license plate")
@click.pass_context
def update_vehicle(ctx, vehicle: str, name: str | None, plate: str | None) -> None:
    """Update a vehicle.

    VEHICLE can be a vehicle name or ID.
    """
    service = VehicleService(ctx.obj["db"])
    vehicle_id = resolve_entity_or_exit(ctx, service.list_vehicles(), vehicle, "Vehicle")

    try:
        updated = service.update_vehicle(vehicle_id, name=name, license_plate=plate)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated vehicle '{updated.name}' [{updated.license_plate}]")


@vehicle_group.command("delete")
@click.argument("vehicle", metavar="VEHICLE")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_vehicle(ctx, vehicle: str, yes: bool) -> None:
    """Delete a vehicle.

    VEHICLE can be a vehicle name or ID. Transactions recorded with the
    vehicle are kept.
    """
    service = VehicleService(ctx.obj["db"])
    vehicle_id = resolve_entity_or_exit(ctx, service.list_vehicles(), vehicle, "Vehicle")
    vehicle_obj = service.get_vehicle(vehicle_id)

    count = service.count_transactions(vehicle_id)
    if count:
        click.echo(
            f"Vehicle '{vehicle_obj.name}' is used by {count} "
            f"transaction{'s' if count != 1 else ''}."
        )

    if not yes and not click.confirm(
        f"Are you sure you want to delete vehicle '{vehicle_obj.name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_vehicle(vehicle_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted vehicle '{vehicle_obj.name}'")


def register_commands(cli):
    """Register vehicle commands with main CLI."""
    cli.add_command(vehicle_group, name="vehicle")
