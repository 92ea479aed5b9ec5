"""Tests for derivation of tax entries from income."""

from datetime import date
from itertools import count

import pytest

from tvdetrack.domain.derivation import derive_tax_transactions
from tvdetrack.domain.entities import (
    DerivedKind,
    Driver,
    EntityType,
    ExpenseCategory,
    Region,
    Transaction,
    TransactionType,
)


def _ids():
    counter = count(1)
    return lambda: f"child-{next(counter)}"


def _driver(region=Region.CONTINENTAL, entity_type=EntityType.ENI, irs=20.0, ss=21.4):
    return Driver(
        id="d1",
        name="Ana",
        region=region,
        entity_type=entity_type,
        irs_rate=irs,
        ss_rate=ss,
    )


def _income(amount=100.0, **kwargs):
    values = dict(
        id="main",
        date=date(2024, 3, 15),
        type=TransactionType.INCOME,
        amount=amount,
        description="Uber semana 11",
        driver_id="d1",
        vehicle_id="v1",
        platform_id="p1",
    )
    values.update(kwargs)
    return Transaction(**values)


def test_eni_continental_income_yields_three_children():
    derived = derive_tax_transactions(_income(), _driver(), _ids())

    assert [t.derived_kind for t in derived] == [
        DerivedKind.VAT_ON_INCOME,
        DerivedKind.INCOME_TAX_ESTIMATE,
        DerivedKind.SOCIAL_SECURITY_ESTIMATE,
    ]
    assert derived[0].amount == pytest.approx(5.6604, abs=1e-4)
    assert derived[1].amount == pytest.approx(14.1509, abs=1e-4)
    assert derived[2].amount == pytest.approx(100 / 1.06 * 0.70 * 0.214)
    assert derived[2].amount == pytest.approx(14.132, abs=1e-3)

    for child in derived:
        assert child.parent_id == "main"
        assert child.type == TransactionType.EXPENSE
        assert child.date == date(2024, 3, 15)
        assert child.driver_id == "d1"
        assert child.vehicle_id == "v1"
        assert child.platform_id is None
    assert [t.id for t in derived] == ["child-1", "child-2", "child-3"]


def test_children_categories_and_descriptions():
    vat, irs, ss = derive_tax_transactions(_income(), _driver(), _ids())

    assert vat.category == ExpenseCategory.IMPOSTOS
    assert irs.category == ExpenseCategory.IMPOSTOS
    assert ss.category == ExpenseCategory.SEGURANCA_SOCIAL
    assert vat.description == "IVA (6%) sobre Uber semana 11"
    assert irs.description == "Estimativa IRS (20% sobre base 75%) sobre Uber semana 11"
    assert ss.description == (
        "Estimativa Seg. Social (21.4% sobre base 70%) sobre Uber semana 11"
    )


def test_empresa_only_gets_vat():
    derived = derive_tax_transactions(
        _income(), _driver(entity_type=EntityType.EMPRESA, irs=None, ss=None), _ids()
    )

    assert len(derived) == 1
    assert derived[0].derived_kind == DerivedKind.VAT_ON_INCOME
    assert derived[0].amount == pytest.approx(100 - 100 / 1.06)


@pytest.mark.parametrize(
    "region, rate",
    [(Region.ACORES, 0.04), (Region.MADEIRA, 0.05)],
)
def test_vat_uses_driver_region(region, rate):
    derived = derive_tax_transactions(_income(), _driver(region=region), _ids())

    net = 100 / (1 + rate)
    assert derived[0].amount == pytest.approx(100 - net)
    assert derived[1].amount == pytest.approx(net * 0.75 * 0.20)
    assert derived[2].amount == pytest.approx(net * 0.70 * 0.214)


def test_zero_rates_skip_estimates():
    derived = derive_tax_transactions(_income(), _driver(irs=0, ss=None), _ids())

    assert [t.derived_kind for t in derived] == [DerivedKind.VAT_ON_INCOME]


def test_zero_amount_derives_nothing():
    assert derive_tax_transactions(_income(amount=0.0), _driver(), _ids()) == []


def test_expense_derives_nothing():
    expense = Transaction(
        id="e1",
        date=date(2024, 3, 15),
        type=TransactionType.EXPENSE,
        amount=50.0,
        description="Combustível",
        driver_id="d1",
        vehicle_id="v1",
        category=ExpenseCategory.COMBUSTIVEL,
    )

    assert derive_tax_transactions(expense, _driver(), _ids()) == []
