"""Tests for database mappers."""

import json
from datetime import date, datetime, UTC, timedelta, timezone

from tvdetrack.database.models import (
    Backup as ORMBackup,
    Driver as ORMDriver,
    DriverVehicle as ORMDriverVehicle,
    Transaction as ORMTransaction,
)
from tvdetrack.database.mappers import (
    app_data_from_dict,
    app_data_to_dict,
    backup_to_domain,
    backup_to_orm,
    driver_to_domain,
    driver_to_orm,
    transaction_to_domain,
)
from tvdetrack.domain.entities import (
    AppData,
    Backup,
    BackupType,
    DerivedKind,
    Driver,
    EntityType,
    ExpenseCategory,
    Platform,
    Region,
    Transaction,
    TransactionType,
    Vehicle,
)


def _sample_data():
    return AppData(
        platforms=(Platform(id="p1", name="Uber", commission_rate=25.0),),
        drivers=(
            Driver(
                id="d1",
                name="Ana",
                region=Region.MADEIRA,
                entity_type=EntityType.ENI,
                irs_rate=20.0,
                ss_rate=21.4,
                vehicle_ids=("v1",),
            ),
        ),
        vehicles=(Vehicle(id="v1", name="Corolla", license_plate="AA-00-BB"),),
        transactions=(
            Transaction(
                id="t1",
                date=date(2024, 3, 15),
                type=TransactionType.INCOME,
                amount=100.0,
                description="Uber",
                driver_id="d1",
                vehicle_id="v1",
                platform_id="p1",
            ),
            Transaction(
                id="t2",
                date=date(2024, 3, 15),
                type=TransactionType.EXPENSE,
                amount=4.76,
                description="IVA (5%) sobre Uber",
                driver_id="d1",
                vehicle_id="v1",
                category=ExpenseCategory.IMPOSTOS,
                parent_id="t1",
                derived_kind=DerivedKind.VAT_ON_INCOME,
            ),
        ),
    )


class TestDriverMapper:
    """Tests for Driver mapper."""

    def test_driver_to_domain(self):
        orm_driver = ORMDriver(
            id="d1",
            name="Ana",
            region="acores",
            entity_type="empresa",
            irs_rate=None,
            ss_rate=None,
        )
        orm_driver.vehicle_links = [
            ORMDriverVehicle(vehicle_id="v2", position=0),
            ORMDriverVehicle(vehicle_id="v1", position=1),
        ]

        driver = driver_to_domain(orm_driver)

        assert driver.region == Region.ACORES
        assert driver.entity_type == EntityType.EMPRESA
        assert driver.vehicle_ids == ("v2", "v1")

    def test_driver_to_orm_drops_repeated_vehicles(self):
        driver = Driver(
            id="d1",
            name="Ana",
            region=Region.CONTINENTAL,
            entity_type=EntityType.ENI,
            vehicle_ids=("v1", "v2", "v1"),
        )

        orm_driver = driver_to_orm(driver)

        assert [link.vehicle_id for link in orm_driver.vehicle_links] == ["v1", "v2"]
        assert [link.position for link in orm_driver.vehicle_links] == [0, 1]


class TestTransactionMapper:
    """Tests for Transaction mapper."""

    def test_derived_transaction_to_domain(self):
        orm_txn = ORMTransaction(
            id="t2",
            parent_id="t1",
            derived_kind="income_tax_estimate",
            date=date(2024, 3, 15),
            type="expense",
            amount=14.15,
            description="Estimativa IRS",
            driver_id="d1",
            vehicle_id="v1",
            platform_id=None,
            category="impostos",
            vat_amount=None,
        )

        txn = transaction_to_domain(orm_txn)

        assert txn.is_derived
        assert txn.derived_kind == DerivedKind.INCOME_TAX_ESTIMATE
        assert txn.category == ExpenseCategory.IMPOSTOS
        assert txn.type == TransactionType.EXPENSE


class TestAppDataSerialization:
    """Tests for the JSON form of backups."""

    def test_app_data_survives_json(self):
        data = _sample_data()

        payload = json.loads(json.dumps(app_data_to_dict(data)))

        assert app_data_from_dict(payload) == data

    def test_uses_camel_case_keys(self):
        payload = app_data_to_dict(_sample_data())

        assert payload["platforms"][0]["commissionRate"] == 25.0
        assert payload["drivers"][0]["entityType"] == "eni"
        assert payload["transactions"][1]["parentId"] == "t1"
        assert payload["transactions"][1]["derivedKind"] == "vat_on_income"

    def test_missing_collections_are_empty(self):
        assert app_data_from_dict({}) == AppData()


class TestBackupMapper:
    """Tests for Backup mapper."""

    def test_backup_timestamps_are_stored_as_utc(self):
        lisbon_summer = timezone(timedelta(hours=1))
        backup = Backup(
            id="b1",
            created_at=datetime(2024, 7, 1, 13, 0, tzinfo=lisbon_summer),
            type=BackupType.MANUAL,
            data=_sample_data(),
        )

        orm_backup = backup_to_orm(backup)

        assert orm_backup.created_at == datetime(2024, 7, 1, 12, 0)
        restored = backup_to_domain(orm_backup)
        assert restored.created_at == datetime(2024, 7, 1, 12, 0, tzinfo=UTC)
        assert restored.type == BackupType.MANUAL
        assert restored.data == backup.data

    def test_backup_to_domain_reads_payload(self):
        orm_backup = ORMBackup(
            id="b2",
            created_at=datetime(2024, 1, 1),
            type="auto",
            payload='{"platforms": [], "drivers": [], "vehicles": [], "transactions": []}',
        )

        backup = backup_to_domain(orm_backup)

        assert backup.type == BackupType.AUTO
        assert backup.data.is_empty
