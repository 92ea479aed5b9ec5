"""Summary commands."""

import click
from tvdetrack.cli.date_filters import check_period_exclusive, filter_options, parse_cli_date
from tvdetrack.cli.entity_resolution import resolve_entity_or_exit
from tvdetrack.cli.error_handling import handle_domain_error
from tvdetrack.cli.formatting import category_label, format_currency
from tvdetrack.domain.entities import Period, SummaryFilter, SummaryReport
from tvdetrack.domain.errors import DomainError
from tvdetrack.domain.summary import SummaryService

PERIOD_LABELS = {
    Period.WEEK: "This week",
    Period.MONTH: "This month",
    Period.QUARTER: "This quarter",
    Period.SEMESTER: "Last 6 months",
    Period.YEAR: "This year",
}


def build_summary_report(
    ctx,
    driver: str | None,
    vehicle: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
) -> SummaryReport:
    """Resolve CLI filter options and build the summary report."""
    db = ctx.obj["db"]
    check_period_exclusive(ctx, period, start_date, end_date)

    driver_id = "all"
    if driver:
        driver_id = resolve_entity_or_exit(ctx, db.list_drivers(), driver, "Driver")
    vehicle_id = "all"
    if vehicle:
        vehicle_id = resolve_entity_or_exit(ctx, db.list_vehicles(), vehicle, "Vehicle")

    try:
        summary_filter = SummaryFilter(
            driver_id=driver_id,
            vehicle_id=vehicle_id,
            start_date=parse_cli_date(ctx, start_date, "start date") if start_date else None,
            end_date=parse_cli_date(ctx, end_date, "end date") if end_date else None,
            period=Period(period.lower()) if period else None,
        )
        return SummaryService(db).build_summary_report(summary_filter)
    except DomainError as e:
        handle_domain_error(ctx, e)


def echo_filter_header(report: SummaryReport) -> None:
    summary_filter = report.summary_filter
    if summary_filter.period is not None:
        click.echo(f"Period: {PERIOD_LABELS[summary_filter.period]}")
    elif summary_filter.start_date or summary_filter.end_date:
        start = summary_filter.start_date or "beginning"
        end = summary_filter.end_date or "today"
        click.echo(f"Period: {start} to {end}")


@click.command("summary")
@filter_options
@click.pass_context
def summary(
    ctx,
    driver: str | None,
    vehicle: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
):
    """Show income, expenses and profit.

    Includes totals for the selected filter, the current week, month,
    quarter, semester and year, expenses per category and a breakdown per
    driver.

    Examples:
        tvdetrack summary
        tvdetrack summary --driver "Ana" --period month
        tvdetrack summary --start-date 2024-01-01 --end-date 2024-03-31
    """
    report = build_summary_report(ctx, driver, vehicle, start_date, end_date, period)

    click.echo("\nSummary")
    click.echo("=" * 60)
    echo_filter_header(report)
    click.echo(f"{'Income':<30} {format_currency(report.totals.income):>20}")
    click.echo(f"{'Expenses':<30} {format_currency(report.totals.expense):>20}")
    click.echo(f"{'Profit':<30} {format_currency(report.totals.profit):>20}")

    click.echo("\nPeriods")
    click.echo("-" * 60)
    for period_summary in report.periods:
        label = PERIOD_LABELS[period_summary.period]
        click.echo(
            f"{label:<14} {period_summary.start_date} - {period_summary.end_date}  "
            f"Profit: {format_currency(period_summary.totals.profit)}"
        )
        click.echo(
            f"{'':<14} Income: {format_currency(period_summary.totals.income)} | "
            f"Expenses: {format_currency(period_summary.totals.expense)}"
        )

    if report.expenses_by_category:
        click.echo("\nExpenses by category")
        click.echo("-" * 60)
        for item in report.expenses_by_category:
            click.echo(
                f"{category_label(item.category):<38} {format_currency(item.amount):>20}"
            )

    if report.drivers:
        click.echo("\nDrivers")
        click.echo("-" * 60)
        for item in report.drivers:
            click.echo(
                f"{item.driver_name[:20]:<20} Income: {format_currency(item.income)} | "
                f"Expenses: {format_currency(item.expense)} | "
                f"Profit: {format_currency(item.profit)}"
            )


def register_commands(cli):
    """Register summary command with main CLI."""
    cli.add_command(summary)
