"""Add transaction command."""

import click
from tvdetrack.cli.date_filters import parse_cli_date
from tvdetrack.cli.entity_resolution import resolve_entity_or_exit
from tvdetrack.cli.error_handling import handle_domain_error
from tvdetrack.cli.formatting import category_label, format_currency
from tvdetrack.database.base import Database
from tvdetrack.domain.entities import (
    ExpenseCategory,
    Transaction,
    TransactionInput,
    TransactionType,
)
from tvdetrack.domain.errors import DomainError
from tvdetrack.domain.transaction import TransactionService
from tvdetrack.utils.amount_parser import parse_amount

CATEGORY_CHOICE = click.Choice([c.value for c in ExpenseCategory], case_sensitive=False)


def parse_cli_amount(ctx: click.Context, value: str, label: str = "amount") -> float:
    """Parse an amount option, or exit with a CLI error."""
    try:
        return parse_amount(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label} format: {e}", err=True)
        ctx.exit(1)


def default_vehicle_or_exit(ctx: click.Context, db: Database, driver_id: str) -> str:
    """Return the driver's first vehicle, or exit if the driver has none."""
    driver = db.get_driver(driver_id)
    if driver is None or not driver.vehicle_ids:
        click.echo(
            "Error: The driver has no vehicles; pass --vehicle explicitly.", err=True
        )
        ctx.exit(1)
    return driver.vehicle_ids[0]


def echo_saved_transaction(service: TransactionService, main: Transaction) -> None:
    """Print a saved transaction and the tax entries derived from it."""
    click.echo(f"  Date: {main.date}")
    click.echo(f"  Type: {main.type.value}")
    click.echo(f"  Amount: {format_currency(main.amount)}")
    click.echo(f"  Description: {main.description}")
    if main.category is not None:
        click.echo(f"  Category: {category_label(main.category)}")
    if main.vat_amount is not None:
        click.echo(f"  VAT: {format_currency(main.vat_amount)}")

    derived = service.list_derived_transactions(main.id)
    if derived:
        click.echo("  Tax estimates:")
        for child in derived:
            click.echo(f"    {child.description}: {format_currency(child.amount)}")


@click.command("add")
@click.option("--driver", required=True, help="Driver name or ID")
@click.option("--vehicle", help="Vehicle name or ID (defaults to the driver's first vehicle)")
@click.option(
    "--date",
    "date_str",
    default="today",
    show_default=True,
    help="Transaction date (YYYY-MM-DD or relative like 'today', 'yesterday')",
)
@click.option("--amount", required=True, help="Gross amount in euros (e.g. 45,90)")
@click.option("--description", required=True, help="Transaction description")
@click.option("--platform", help="Platform name or ID; records income")
@click.option("--category", type=CATEGORY_CHOICE, help="Expense category; records an expense")
@click.option("--vat", help="VAT included in the expense, if known")
@click.pass_context
def add_transaction(
    ctx,
    driver: str,
    vehicle: str | None,
    date_str: str,
    amount: str,
    description: str,
    platform: str | None,
    category: str | None,
    vat: str | None,
):
    """Add an income or expense transaction.

    Income (with --platform) gets VAT, and for ENI drivers IRS and social
    security, estimates recorded as separate expenses.

    Examples:
        tvdetrack add --driver "Ana" --platform Uber --amount 100 --description "Semana 12"
        tvdetrack add --driver "Ana" --category combustivel --amount 60 --vat 11,22 --description "Galp"
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    if platform is None and category is None:
        click.echo(
            "Error: Pass --platform for income or --category for an expense.", err=True
        )
        ctx.exit(1)

    driver_id = resolve_entity_or_exit(ctx, db.list_drivers(), driver, "Driver")
    if vehicle is not None:
        vehicle_id = resolve_entity_or_exit(ctx, db.list_vehicles(), vehicle, "Vehicle")
    else:
        vehicle_id = default_vehicle_or_exit(ctx, db, driver_id)
    platform_id = None
    if platform is not None:
        platform_id = resolve_entity_or_exit(ctx, db.list_platforms(), platform, "Platform")

    payload = TransactionInput(
        date=parse_cli_date(ctx, date_str),
        type=TransactionType.INCOME if platform_id else TransactionType.EXPENSE,
        amount=parse_cli_amount(ctx, amount),
        description=description,
        driver_id=driver_id,
        vehicle_id=vehicle_id,
        platform_id=platform_id,
        category=ExpenseCategory(category.lower()) if category else None,
        vat_amount=parse_cli_amount(ctx, vat, "VAT amount") if vat is not None else None,
    )

    try:
        main = service.save_transaction(payload)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Created transaction {main.id}")
    echo_saved_transaction(service, main)


def register_commands(cli):
    """Register add command with main CLI."""
    cli.add_command(add_transaction)
