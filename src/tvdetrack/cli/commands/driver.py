"""Driver management commands."""

import click
from tvdetrack.cli.entity_resolution import resolve_entity_or_exit
from tvdetrack.cli.error_handling import handle_domain_error
from tvdetrack.cli.formatting import entity_type_label, format_percentage, region_label
from tvdetrack.domain.driver import DEFAULT_IRS_RATE, DEFAULT_SS_RATE, DriverService
from tvdetrack.domain.entities import EntityType, Region
from tvdetrack.domain.errors import DomainError
from tvdetrack.domain.vehicle import VehicleService

REGION_CHOICE = click.Choice([r.value for r in Region], case_sensitive=False)
ENTITY_TYPE_CHOICE = click.Choice([e.value for e in EntityType], case_sensitive=False)


def _resolve_vehicles(ctx, vehicles: tuple[str, ...]) -> list[str]:
    candidates = VehicleService(ctx.obj["db"]).list_vehicles()
    return [resolve_entity_or_exit(ctx, candidates, ref, "Vehicle") for ref in vehicles]


@click.group()
def driver_group():
    """Manage drivers."""
    pass


@driver_group.command("create")
@click.argument("name", metavar="DRIVER_NAME")
@click.option(
    "--region",
    type=REGION_CHOICE,
    default=Region.CONTINENTAL.value,
    show_default=True,
    help="Fiscal region (selects VAT rates)",
)
@click.option(
    "--entity-type",
    type=ENTITY_TYPE_CHOICE,
    default=EntityType.ENI.value,
    show_default=True,
    help="eni (sole trader) or empresa (company)",
)
@click.option(
    "--irs-rate",
    type=float,
    help=f"IRS percentage for estimates, ENI only (default {DEFAULT_IRS_RATE:g})",
)
@click.option(
    "--ss-rate",
    type=float,
    help=f"Social security percentage for estimates, ENI only (default {DEFAULT_SS_RATE:g})",
)
@click.option("--vehicle", "vehicles", multiple=True, help="Vehicle name or ID (repeatable)")
@click.pass_context
def create_driver(
    ctx,
    name: str,
    region: str,
    entity_type: str,
    irs_rate: float | None,
    ss_rate: float | None,
    vehicles: tuple[str, ...],
):
    """Create a new driver.

    Examples:
        tvdetrack driver create "Ana" --vehicle "Toyota Corolla"
        tvdetrack driver create "Rui" --region madeira --irs-rate 25
        tvdetrack driver create "Frota Lda" --entity-type empresa
    """
    service = DriverService(ctx.obj["db"])
    vehicle_ids = _resolve_vehicles(ctx, vehicles)

    if entity_type.lower() == EntityType.ENI.value:
        irs_rate = DEFAULT_IRS_RATE if irs_rate is None else irs_rate
        ss_rate = DEFAULT_SS_RATE if ss_rate is None else ss_rate

    try:
        driver = service.create_driver(
            name=name,
            region=region.lower(),
            entity_type=entity_type.lower(),
            irs_rate=irs_rate,
            ss_rate=ss_rate,
            vehicle_ids=vehicle_ids,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created driver '{driver.name}' (ID: {driver.id})")
    click.echo(f"  Region: {region_label(driver.region)}")
    click.echo(f"  Entity: {entity_type_label(driver.entity_type)}")
    if driver.entity_type == EntityType.ENI:
        click.echo(
            f"  IRS: {format_percentage(driver.irs_rate or 0)} | "
            f"Seg. Social: {format_percentage(driver.ss_rate or 0)}"
        )


@driver_group.command("list")
@click.pass_context
def list_drivers(ctx):
    """List all drivers."""
    db = ctx.obj["db"]
    service = DriverService(db)
    vehicles = {v.id: v.name for v in VehicleService(db).list_vehicles()}

    drivers = service.list_drivers()
    if not drivers:
        click.echo("No drivers found.")
        return

    click.echo("\nDrivers:")
    click.echo("-" * 90)
    for d in drivers:
        rates = ""
        if d.entity_type == EntityType.ENI:
            rates = (
                f" | IRS {format_percentage(d.irs_rate or 0)}"
                f" | SS {format_percentage(d.ss_rate or 0)}"
            )
        click.echo(
            f"{d.id} | {d.name:15s} | {d.region.value:11s} | {d.entity_type.value}{rates}"
        )
        if d.vehicle_ids:
            names = ", ".join(vehicles.get(vid, "Unknown") for vid in d.vehicle_ids)
            click.echo(f"    Vehicles: {names}")


@driver_group.command("update")
@click.argument("driver", metavar="DRIVER")
@click.option("--name", help="New driver name")
@click.option("--region", type=REGION_CHOICE, help="New fiscal region")
@click.option("--entity-type", type=ENTITY_TYPE_CHOICE, help="New entity type")
@click.option("--irs-rate", type=float, help="New IRS percentage")
@click.option("--ss-rate", type=float, help="New social security percentage")
@click.option("--vehicle", "vehicles", multiple=True, help="Replace vehicles (repeatable)")
@click.option("--clear-vehicles", is_flag=True, help="Remove all vehicle associations")
@click.pass_context
def update_driver(
    ctx,
    driver: str,
    name: str | None,
    region: str | None,
    entity_type: str | None,
    irs_rate: float | None,
    ss_rate: float | None,
    vehicles: tuple[str, ...],
    clear_vehicles: bool,
) -> None:
    """Update a driver.

    DRIVER can be a driver name or ID. Existing transactions keep the tax
    entries they were recorded with.

    Examples:
        tvdetrack driver update "Ana" --irs-rate 23
        tvdetrack driver update "Ana" --vehicle "Toyota Corolla" --vehicle "Tesla"
    """
    service = DriverService(ctx.obj["db"])
    driver_id = resolve_entity_or_exit(ctx, service.list_drivers(), driver, "Driver")

    if vehicles and clear_vehicles:
        click.echo("Error: --vehicle cannot be combined with --clear-vehicles.", err=True)
        ctx.exit(1)

    vehicle_ids = None
    if clear_vehicles:
        vehicle_ids = []
    elif vehicles:
        vehicle_ids = _resolve_vehicles(ctx, vehicles)

    try:
        updated = service.update_driver(
            driver_id,
            name=name,
            region=region.lower() if region else None,
            entity_type=entity_type.lower() if entity_type else None,
            irs_rate=irs_rate,
            ss_rate=ss_rate,
            vehicle_ids=vehicle_ids,
        )
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Updated driver '{updated.name}'")


@driver_group.command("delete")
@click.argument("driver", metavar="DRIVER")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_driver(ctx, driver: str, yes: bool) -> None:
    """Delete a driver.

    DRIVER can be a driver name or ID. The driver's transactions are kept
    and reported under an unknown driver.
    """
    service = DriverService(ctx.obj["db"])
    driver_id = resolve_entity_or_exit(ctx, service.list_drivers(), driver, "Driver")
    driver_obj = service.get_driver(driver_id)

    count = service.count_transactions(driver_id)
    if count:
        click.echo(
            f"Driver '{driver_obj.name}' has {count} "
            f"transaction{'s' if count != 1 else ''}."
        )

    if not yes and not click.confirm(
        f"Are you sure you want to delete driver '{driver_obj.name}'?"
    ):
        click.echo("Deletion cancelled.")
        return

    try:
        service.delete_driver(driver_id)
    except DomainError as e:
        handle_domain_error(ctx, e)
    click.echo(f"Deleted driver '{driver_obj.name}'")


def register_commands(cli):
    """Register driver commands with main CLI."""
    cli.add_command(driver_group, name="driver")
