"""Summary aggregation domain service."""

from collections import defaultdict
from datetime import date
from typing import Iterable, Optional, Sequence

from tvdetrack.database.base import Database
from tvdetrack.domain.entities import (
    CategoryTotal,
    DerivedKind,
    Driver,
    DriverBreakdown,
    Period,
    PeriodSummary,
    SummaryFilter,
    SummaryReport,
    TaxSummary,
    Totals,
    Transaction,
    VatCategoryBreakdown,
)
from tvdetrack.domain.tax_rules import expense_vat_rate, split_gross
from tvdetrack.utils.date_parser import get_date_range

UNKNOWN_DRIVER_NAME = "Unknown"


def filter_by_owner(
    transactions: Iterable[Transaction], driver_id: str = "all", vehicle_id: str = "all"
) -> list[Transaction]:
    """Keep transactions matching a driver and vehicle ("all" matches any)."""
    return [
        txn
        for txn in transactions
        if (driver_id == "all" or txn.driver_id == driver_id)
        and (vehicle_id == "all" or txn.vehicle_id == vehicle_id)
    ]


def filter_by_dates(
    transactions: Iterable[Transaction],
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> list[Transaction]:
    """Keep transactions dated within the inclusive bounds."""
    return [
        txn
        for txn in transactions
        if (start_date is None or txn.date >= start_date)
        and (end_date is None or txn.date <= end_date)
    ]


def calculate_totals(transactions: Iterable[Transaction]) -> Totals:
    """Sum income and expense amounts."""
    income = 0.0
    expense = 0.0
    for txn in transactions:
        if txn.is_income:
            income += txn.amount
        else:
            expense += txn.amount
    return Totals(income=income, expense=expense)


def summarize_expenses_by_category(
    transactions: Iterable[Transaction],
) -> tuple[CategoryTotal, ...]:
    """Sum expenses per category, largest first."""
    totals: dict = defaultdict(float)
    for txn in transactions:
        if txn.is_expense and txn.category is not None:
            totals[txn.category] += txn.amount
    return tuple(
        sorted(
            (CategoryTotal(category=cat, amount=amount) for cat, amount in totals.items()),
            key=lambda item: item.amount,
            reverse=True,
        )
    )


def summarize_drivers(
    transactions: Iterable[Transaction], drivers: Sequence[Driver] = ()
) -> tuple[DriverBreakdown, ...]:
    """Group income and expense per driver, most profitable first."""
    names = {driver.id: driver.name for driver in drivers}
    grouped: dict[str, dict[str, float]] = defaultdict(
        lambda: {"income": 0.0, "expense": 0.0}
    )
    for txn in transactions:
        grouped[txn.driver_id]["income" if txn.is_income else "expense"] += txn.amount

    breakdown = [
        DriverBreakdown(
            driver_id=driver_id,
            driver_name=names.get(driver_id, UNKNOWN_DRIVER_NAME),
            income=values["income"],
            expense=values["expense"],
        )
        for driver_id, values in grouped.items()
    ]
    return tuple(sorted(breakdown, key=lambda item: item.profit, reverse=True))


def deductible_vat(txn: Transaction, drivers_by_id: dict[str, Driver]) -> float:
    """VAT deductible on a manual expense.

    A recorded vat_amount wins; otherwise the amount is treated as
    VAT-inclusive at the standard rate of the driver's region.
    """
    if txn.vat_amount is not None:
        return txn.vat_amount
    driver = drivers_by_id.get(txn.driver_id)
    rate = expense_vat_rate(driver.region if driver is not None else None)
    return split_gross(txn.amount, rate)[1]


def calculate_taxes(
    transactions: Iterable[Transaction], drivers: Sequence[Driver] = ()
) -> TaxSummary:
    """Estimate the tax position of a set of transactions.

    Collected VAT and the IRS/SS estimates come from derived entries.
    Deductible VAT only looks at expenses entered by hand.
    """
    drivers_by_id = {driver.id: driver for driver in drivers}
    derived_sums = {kind: 0.0 for kind in DerivedKind}
    manual_total = 0.0
    by_category: dict = defaultdict(lambda: {"total": 0.0, "vat": 0.0})

    for txn in transactions:
        if txn.is_derived:
            derived_sums[txn.derived_kind] += txn.amount
        elif txn.is_expense:
            vat = deductible_vat(txn, drivers_by_id)
            manual_total += txn.amount
            by_category[txn.category]["total"] += txn.amount
            by_category[txn.category]["vat"] += vat

    vat_by_category = sorted(
        (
            VatCategoryBreakdown(category=cat, total=values["total"], vat=values["vat"])
            for cat, values in by_category.items()
        ),
        key=lambda item: item.vat,
        reverse=True,
    )
    return TaxSummary(
        iva_liquidado=derived_sums[DerivedKind.VAT_ON_INCOME],
        irs_estimado=derived_sums[DerivedKind.INCOME_TAX_ESTIMATE],
        ss_estimada=derived_sums[DerivedKind.SOCIAL_SECURITY_ESTIMATE],
        iva_dedutivel=sum(item.vat for item in vat_by_category),
        manual_expense_total=manual_total,
        vat_by_category=tuple(vat_by_category),
    )


def summarize(
    transactions: Iterable[Transaction],
    summary_filter: Optional[SummaryFilter] = None,
    drivers: Sequence[Driver] = (),
    today: Optional[date] = None,
) -> SummaryReport:
    """Aggregate transactions into a summary report.

    Does not modify its inputs and reads nothing but its arguments.

    Args:
        transactions: Transactions to aggregate
        summary_filter: Driver, vehicle and date filter, defaults to everything
        drivers: Drivers used for names and expense VAT regions
        today: Reference date for period windows, defaults to the current date

    Returns:
        SummaryReport over the filtered transactions
    """
    if summary_filter is None:
        summary_filter = SummaryFilter()
    if today is None:
        today = date.today()

    owned = filter_by_owner(
        transactions, summary_filter.driver_id, summary_filter.vehicle_id
    )

    start_date, end_date = summary_filter.start_date, summary_filter.end_date
    if summary_filter.period is not None:
        start_date, end_date = get_date_range(summary_filter.period, today)
    filtered = filter_by_dates(owned, start_date, end_date)

    periods = []
    for period in Period:
        window_start, window_end = get_date_range(period, today)
        periods.append(
            PeriodSummary(
                period=period,
                start_date=window_start,
                end_date=window_end,
                totals=calculate_totals(filter_by_dates(owned, window_start, window_end)),
            )
        )

    return SummaryReport(
        summary_filter=summary_filter,
        reference_date=today,
        transactions=tuple(filtered),
        totals=calculate_totals(filtered),
        periods=tuple(periods),
        expenses_by_category=summarize_expenses_by_category(filtered),
        drivers=summarize_drivers(filtered, drivers),
        taxes=calculate_taxes(filtered, drivers),
    )


class SummaryService:
    """Service for building summary reports from the store."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def build_summary_report(
        self,
        summary_filter: Optional[SummaryFilter] = None,
        today: Optional[date] = None,
    ) -> SummaryReport:
        """Build a summary report over every stored transaction."""
        return summarize(
            self.db.list_transactions(),
            summary_filter=summary_filter,
            drivers=self.db.list_drivers(),
            today=today,
        )
