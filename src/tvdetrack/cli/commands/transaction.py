"""Transaction management commands."""

import csv
from pathlib import Path

import click
from tvdetrack.cli.commands.add import CATEGORY_CHOICE, echo_saved_transaction, parse_cli_amount
from tvdetrack.cli.date_filters import filter_options, parse_cli_date, resolve_cli_date_range
from tvdetrack.cli.entity_resolution import resolve_entity_or_exit
from tvdetrack.cli.error_handling import handle_domain_error
from tvdetrack.cli.formatting import category_label, format_currency
from tvdetrack.domain.entities import ExpenseCategory, TransactionInput
from tvdetrack.domain.errors import DomainError
from tvdetrack.domain.transaction import TransactionService

EXPORT_COLUMNS = (
    "id",
    "date",
    "type",
    "amount",
    "description",
    "driver",
    "vehicle",
    "platform",
    "category",
    "vat_amount",
    "parent_id",
    "derived_kind",
)


def _filtered_transactions(ctx, driver, vehicle, start_date, end_date, period):
    db = ctx.obj["db"]
    start, end = resolve_cli_date_range(
        ctx, start_date=start_date, end_date=end_date, period=period
    )
    driver_id = None
    if driver:
        driver_id = resolve_entity_or_exit(ctx, db.list_drivers(), driver, "Driver")
    vehicle_id = None
    if vehicle:
        vehicle_id = resolve_entity_or_exit(ctx, db.list_vehicles(), vehicle, "Vehicle")

    return TransactionService(db).list_transactions(
        start_date=start, end_date=end, driver_id=driver_id, vehicle_id=vehicle_id
    )


@click.group()
def transaction_group():
    """Manage transactions."""
    pass


@transaction_group.command("update")
@click.argument("transaction_id")
@click.option("--date", "date_str", help="Transaction date (YYYY-MM-DD or relative like 'today')")
@click.option("--amount", help="Gross amount in euros")
@click.option("--description", help="Transaction description")
@click.option("--driver", help="Driver name or ID")
@click.option("--vehicle", help="Vehicle name or ID")
@click.option("--platform", help="Platform name or ID (income only)")
@click.option("--category", type=CATEGORY_CHOICE, help="Expense category (expenses only)")
@click.option("--vat", help="VAT included in the expense, or empty string to clear")
@click.pass_context
def update_transaction(
    ctx,
    transaction_id: str,
    date_str: str | None,
    amount: str | None,
    description: str | None,
    driver: str | None,
    vehicle: str | None,
    platform: str | None,
    category: str | None,
    vat: str | None,
) -> None:
    """Update a transaction.

    Updates only the fields that are provided. Tax estimates of an income
    transaction are recalculated from the new values. Estimates themselves
    cannot be edited; update the income they came from.

    Examples:
        tvdetrack transaction update <ID> --amount 120
        tvdetrack transaction update <ID> --vat ""  # Clear VAT amount
    """
    db = ctx.obj["db"]
    service = TransactionService(db)

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Error: Transaction {transaction_id} not found", err=True)
        ctx.exit(1)

    driver_id = txn.driver_id
    if driver is not None:
        driver_id = resolve_entity_or_exit(ctx, db.list_drivers(), driver, "Driver")
    vehicle_id = txn.vehicle_id
    if vehicle is not None:
        vehicle_id = resolve_entity_or_exit(ctx, db.list_vehicles(), vehicle, "Vehicle")
    platform_id = txn.platform_id
    if platform is not None:
        platform_id = resolve_entity_or_exit(ctx, db.list_platforms(), platform, "Platform")

    vat_amount = txn.vat_amount
    if vat is not None:
        vat_amount = parse_cli_amount(ctx, vat, "VAT amount") if vat != "" else None

    payload = TransactionInput(
        date=parse_cli_date(ctx, date_str) if date_str is not None else txn.date,
        type=txn.type,
        amount=parse_cli_amount(ctx, amount) if amount is not None else txn.amount,
        description=description if description is not None else txn.description,
        driver_id=driver_id,
        vehicle_id=vehicle_id,
        platform_id=platform_id,
        category=ExpenseCategory(category.lower()) if category else txn.category,
        vat_amount=vat_amount,
    )

    try:
        main = service.save_transaction(payload, existing_id=transaction_id)
    except DomainError as e:
        handle_domain_error(ctx, e)

    click.echo(f"Updated transaction {main.id}")
    echo_saved_transaction(service, main)


@transaction_group.command("list")
@filter_options
@click.option("--verbose", "-v", is_flag=True, help="Show all fields of each transaction")
@click.pass_context
def list_transactions(
    ctx,
    driver: str | None,
    vehicle: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
    verbose: bool,
):
    """View transactions with optional filters.

    Tax estimates are listed under the income they were derived from and
    marked with '>'.
    """
    db = ctx.obj["db"]
    transactions = _filtered_transactions(ctx, driver, vehicle, start_date, end_date, period)

    if not transactions:
        click.echo("No transactions found.")
        return

    drivers = {d.id: d.name for d in db.list_drivers()}
    vehicles = {v.id: v.name for v in db.list_vehicles()}
    platforms = {p.id: p.name for p in db.list_platforms()}

    click.echo(f"\nFound {len(transactions)} transaction(s):")
    if verbose:
        click.echo("=" * 110)
        for txn in transactions:
            click.echo(f"\nTransaction ID: {txn.id}")
            click.echo(f"  Date: {txn.date}")
            click.echo(f"  Type: {txn.type.value}")
            click.echo(f"  Amount: {format_currency(txn.amount)}")
            click.echo(f"  Description: {txn.description}")
            click.echo(f"  Driver: {drivers.get(txn.driver_id, 'Unknown')}")
            click.echo(f"  Vehicle: {vehicles.get(txn.vehicle_id, 'Unknown')}")
            if txn.is_income:
                click.echo(f"  Platform: {platforms.get(txn.platform_id, 'Unknown')}")
            else:
                click.echo(f"  Category: {category_label(txn.category)}")
            if txn.vat_amount is not None:
                click.echo(f"  VAT: {format_currency(txn.vat_amount)}")
            if txn.is_derived:
                click.echo(f"  Derived from: {txn.parent_id} ({txn.derived_kind.value})")
            click.echo("-" * 110)
    else:
        click.echo("-" * 110)
        click.echo(
            f"{'ID':<36} {'Date':<10} {'Amount':>13}  {'Driver':<12} {'Source':<20} {'Description'}"
        )
        click.echo("-" * 110)
        for txn in transactions:
            if txn.is_income:
                source = platforms.get(txn.platform_id, "Unknown")
            else:
                source = category_label(txn.category)
            amount_str = format_currency(txn.amount if txn.is_income else -txn.amount)
            marker = "> " if txn.is_derived else ""
            click.echo(
                f"{txn.id:<36} {str(txn.date):<10} {amount_str:>13}  "
                f"{drivers.get(txn.driver_id, 'Unknown')[:12]:<12} {source[:20]:<20} "
                f"{marker}{txn.description[:40]}"
            )

    total_income = sum(txn.amount for txn in transactions if txn.is_income)
    total_expense = sum(txn.amount for txn in transactions if txn.is_expense)
    click.echo("-" * 110)
    click.echo(
        f"TOTAL  Income: {format_currency(total_income)} | "
        f"Expenses: {format_currency(total_expense)} | Count: {len(transactions)}"
    )


@transaction_group.command("delete")
@click.argument("transaction_id")
@click.option("--yes", "-y", is_flag=True, help="Do not ask for confirmation")
@click.pass_context
def delete_transaction(ctx, transaction_id: str, yes: bool) -> None:
    """Delete a transaction and its tax estimates.

    Deleting a single tax estimate removes only that estimate.

    Examples:
        tvdetrack transaction delete <ID>
    """
    service = TransactionService(ctx.obj["db"])

    txn = service.get_transaction(transaction_id)
    if txn is None:
        click.echo(f"Transaction {transaction_id} not found, nothing deleted.")
        return

    derived_count = len(service.list_derived_transactions(transaction_id))
    prompt = f"Are you sure you want to delete transaction '{txn.description}'"
    if derived_count:
        prompt += f" and its {derived_count} tax estimate{'s' if derived_count != 1 else ''}"
    if not yes and not click.confirm(prompt + "?"):
        click.echo("Deletion cancelled.")
        return

    removed = service.delete_transaction(transaction_id)
    click.echo(f"Deleted {removed} transaction{'s' if removed != 1 else ''}")


@transaction_group.command("export")
@click.argument("file_path", metavar="FILE", type=click.Path(dir_okay=False))
@filter_options
@click.pass_context
def export_transactions(
    ctx,
    file_path: str,
    driver: str | None,
    vehicle: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
):
    """Export transactions to a CSV file.

    Entity columns hold names; unknown references are exported as 'Unknown'.

    Examples:
        tvdetrack transaction export 2024.csv --start-date 2024-01-01 --end-date 2024-12-31
    """
    db = ctx.obj["db"]
    transactions = _filtered_transactions(ctx, driver, vehicle, start_date, end_date, period)

    drivers = {d.id: d.name for d in db.list_drivers()}
    vehicles = {v.id: v.name for v in db.list_vehicles()}
    platforms = {p.id: p.name for p in db.list_platforms()}

    with Path(file_path).open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(EXPORT_COLUMNS)
        for txn in transactions:
            writer.writerow(
                [
                    txn.id,
                    txn.date.isoformat(),
                    txn.type.value,
                    f"{txn.amount:.2f}",
                    txn.description,
                    drivers.get(txn.driver_id, "Unknown"),
                    vehicles.get(txn.vehicle_id, "Unknown"),
                    platforms.get(txn.platform_id, "Unknown") if txn.is_income else "",
                    txn.category.value if txn.category else "",
                    f"{txn.vat_amount:.2f}" if txn.vat_amount is not None else "",
                    txn.parent_id or "",
                    txn.derived_kind.value if txn.derived_kind else "",
                ]
            )

    click.echo(f"Exported {len(transactions)} transaction(s) to {file_path}")


def register_commands(cli: click.Group) -> None:
    """Register transaction commands with main CLI."""
    cli.add_command(transaction_group, name="transaction")
