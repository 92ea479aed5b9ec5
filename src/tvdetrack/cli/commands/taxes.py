"""Tax estimate command."""

import click
from tvdetrack.cli.commands.summary import build_summary_report, echo_filter_header
from tvdetrack.cli.date_filters import filter_options
from tvdetrack.cli.formatting import category_label, format_currency, format_percentage


@click.command("taxes")
@filter_options
@click.pass_context
def taxes(
    ctx,
    driver: str | None,
    vehicle: str | None,
    start_date: str | None,
    end_date: str | None,
    period: str | None,
):
    """Show estimated VAT, IRS and social security.

    VAT collected and the IRS/social security figures add up the estimates
    recorded with each income. Deductible VAT uses the VAT entered on
    expenses, or the standard rate of the driver's region when none was
    entered. These are estimates, not tax filings.

    Examples:
        tvdetrack taxes --period quarter
        tvdetrack taxes --driver "Ana" --period year
    """
    report = build_summary_report(ctx, driver, vehicle, start_date, end_date, period)
    tax = report.taxes

    click.echo("\nTax estimates")
    click.echo("=" * 60)
    echo_filter_header(report)
    click.echo(f"{'IVA liquidado':<30} {format_currency(tax.iva_liquidado):>20}")
    click.echo(f"{'IVA dedutível':<30} {format_currency(tax.iva_dedutivel):>20}")
    label = "IVA a pagar" if tax.iva_a_pagar >= 0 else "IVA a recuperar"
    click.echo(f"{label:<30} {format_currency(tax.iva_a_pagar):>20}")
    click.echo(f"{'IRS estimado':<30} {format_currency(tax.irs_estimado):>20}")
    click.echo(f"{'Segurança Social estimada':<30} {format_currency(tax.ss_estimada):>20}")

    if tax.vat_by_category:
        click.echo("\nDeductible VAT by category")
        click.echo("-" * 60)
        for item in tax.vat_by_category:
            click.echo(
                f"{category_label(item.category):<28} "
                f"{format_currency(item.total):>14} {format_currency(item.vat):>14}"
            )
        click.echo("-" * 60)
        click.echo(
            f"{'Total':<28} {format_currency(tax.manual_expense_total):>14} "
            f"{format_currency(tax.iva_dedutivel):>14}"
        )
        click.echo(
            f"Deductible VAT is {format_percentage(tax.deductible_vat_percentage)} "
            "of expenses"
        )


def register_commands(cli):
    """Register taxes command with main CLI."""
    cli.add_command(taxes)
