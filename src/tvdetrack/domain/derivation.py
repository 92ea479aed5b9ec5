"""Derivation of estimated tax entries from income transactions."""

import logging
from typing import Callable

from tvdetrack.domain.entities import (
    DerivedKind,
    Driver,
    ExpenseCategory,
    Transaction,
    TransactionType,
)
from tvdetrack.domain.tax_rules import (
    IRS_BASE_COEFFICIENT,
    SS_BASE_COEFFICIENT,
    has_per_entry_estimates,
    income_vat_rate,
    rate_fraction,
    split_gross,
)

logger = logging.getLogger(__name__)

IdGenerator = Callable[[], str]


def _format_rate(percentage) -> str:
    return f"{percentage or 0:g}"


def derive_tax_transactions(
    main: Transaction, driver: Driver, id_generator: IdGenerator
) -> list[Transaction]:
    """Build the tax expense entries implied by an income transaction.

    The income amount is treated as VAT-inclusive. VAT is derived for every
    driver; IRS and social security estimates only for entity types that
    carry per-entry estimates (ENI). Components that come out as zero are
    not emitted.

    Args:
        main: The income transaction, already carrying its final id
        driver: Driver the income belongs to
        id_generator: Callable returning a fresh unique id

    Returns:
        List of derived expense transactions (possibly empty)
    """
    if main.type != TransactionType.INCOME or main.is_derived:
        return []

    vat_rate = income_vat_rate(driver.region)
    net, vat = split_gross(main.amount, vat_rate)

    def child(amount, category, kind, description):
        return Transaction(
            id=id_generator(),
            parent_id=main.id,
            derived_kind=kind,
            date=main.date,
            type=TransactionType.EXPENSE,
            amount=amount,
            description=description,
            driver_id=main.driver_id,
            vehicle_id=main.vehicle_id,
            category=category,
        )

    derived = []
    if vat > 0:
        derived.append(
            child(
                vat,
                ExpenseCategory.IMPOSTOS,
                DerivedKind.VAT_ON_INCOME,
                f"IVA ({vat_rate * 100:.0f}%) sobre {main.description}",
            )
        )

    if has_per_entry_estimates(driver.entity_type):
        irs = net * IRS_BASE_COEFFICIENT * rate_fraction(driver.irs_rate)
        if irs > 0:
            derived.append(
                child(
                    irs,
                    ExpenseCategory.IMPOSTOS,
                    DerivedKind.INCOME_TAX_ESTIMATE,
                    f"Estimativa IRS ({_format_rate(driver.irs_rate)}% sobre base "
                    f"{IRS_BASE_COEFFICIENT * 100:.0f}%) sobre {main.description}",
                )
            )

        ss = net * SS_BASE_COEFFICIENT * rate_fraction(driver.ss_rate)
        if ss > 0:
            derived.append(
                child(
                    ss,
                    ExpenseCategory.SEGURANCA_SOCIAL,
                    DerivedKind.SOCIAL_SECURITY_ESTIMATE,
                    f"Estimativa Seg. Social ({_format_rate(driver.ss_rate)}% sobre base "
                    f"{SS_BASE_COEFFICIENT * 100:.0f}%) sobre {main.description}",
                )
            )

    logger.debug(
        "Derived %d tax entries for transaction %s (driver %s, %s)",
        len(derived),
        main.id,
        driver.id,
        driver.region.value,
    )
    return derived
