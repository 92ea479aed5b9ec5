"""CLI helpers for date range resolution."""

from datetime import date

import click

from tvdetrack.utils.date_parser import SUPPORTED_PERIODS, get_date_range, parse_date

PERIOD_CHOICE = click.Choice(SUPPORTED_PERIODS, case_sensitive=False)


def parse_cli_date(ctx: click.Context, value: str, label: str = "date") -> date:
    """Parse a date option, or exit with a CLI error."""
    try:
        return parse_date(value)
    except ValueError as e:
        click.echo(f"Error: Invalid {label}: {e}", err=True)
        ctx.exit(1)


def check_period_exclusive(
    ctx: click.Context, period: str | None, start_date: str | None, end_date: str | None
) -> None:
    """Exit with an error when --period is combined with explicit dates."""
    if period and (start_date or end_date):
        click.echo(
            "Error: --period cannot be combined with --start-date or --end-date.",
            err=True,
        )
        ctx.exit(1)


def resolve_cli_date_range(
    ctx,
    *,
    start_date: str | None,
    end_date: str | None,
    period: str | None = None,
    today: date | None = None,
) -> tuple[date | None, date | None]:
    """Resolve CLI date range from a period option or explicit dates."""
    check_period_exclusive(ctx, period, start_date, end_date)

    if period:
        return get_date_range(period, today)

    start = parse_cli_date(ctx, start_date, "start date") if start_date else None
    end = parse_cli_date(ctx, end_date, "end date") if end_date else None

    if start is not None and end is not None and start > end:
        click.echo(
            f"Error: Start date {start} is after end date {end}.",
            err=True,
        )
        ctx.exit(1)

    return start, end


def filter_options(func):
    """Attach the shared driver, vehicle and date filter options."""
    options = [
        click.option("--driver", help="Driver name or ID"),
        click.option("--vehicle", help="Vehicle name or ID"),
        click.option(
            "--start-date",
            help="Start date (YYYY-MM-DD or relative like 'last month', 'this year')",
        ),
        click.option(
            "--end-date", help="End date (YYYY-MM-DD or relative like 'today')"
        ),
        click.option(
            "--period",
            type=PERIOD_CHOICE,
            help="Current week, month, quarter or year, or the last six months (semester)",
        ),
    ]
    for option in reversed(options):
        func = option(func)
    return func
