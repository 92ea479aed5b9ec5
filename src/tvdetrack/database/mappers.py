"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic, including the JSON payload used to
store backups, so the schema can change without touching business logic.
"""

import json
from datetime import UTC, date, datetime
from typing import Any, Optional

from tvdetrack.domain import entities as domain
from tvdetrack.database.models import (
    Backup as ORMBackup,
    Driver as ORMDriver,
    DriverVehicle as ORMDriverVehicle,
    Platform as ORMPlatform,
    Transaction as ORMTransaction,
    Vehicle as ORMVehicle,
)


def _optional_enum(enum_cls, value):
    return enum_cls(value) if value is not None else None


def _aware(value: datetime) -> datetime:
    # SQLite drops tzinfo; stored timestamps are UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value


def platform_to_domain(orm_platform: ORMPlatform) -> domain.Platform:
    """Convert SQLAlchemy Platform model to domain Platform entity."""
    return domain.Platform(
        id=orm_platform.id,
        name=orm_platform.name,
        commission_rate=orm_platform.commission_rate,
    )


def platform_to_orm(platform: domain.Platform) -> ORMPlatform:
    return ORMPlatform(
        id=platform.id,
        name=platform.name,
        commission_rate=platform.commission_rate,
    )


def vehicle_to_domain(orm_vehicle: ORMVehicle) -> domain.Vehicle:
    """Convert SQLAlchemy Vehicle model to domain Vehicle entity."""
    return domain.Vehicle(
        id=orm_vehicle.id,
        name=orm_vehicle.name,
        license_plate=orm_vehicle.license_plate,
    )


def vehicle_to_orm(vehicle: domain.Vehicle) -> ORMVehicle:
    return ORMVehicle(
        id=vehicle.id,
        name=vehicle.name,
        license_plate=vehicle.license_plate,
    )


def driver_to_domain(orm_driver: ORMDriver) -> domain.Driver:
    """Convert SQLAlchemy Driver model to domain Driver entity."""
    return domain.Driver(
        id=orm_driver.id,
        name=orm_driver.name,
        region=domain.Region(orm_driver.region),
        entity_type=domain.EntityType(orm_driver.entity_type),
        irs_rate=orm_driver.irs_rate,
        ss_rate=orm_driver.ss_rate,
        vehicle_ids=tuple(link.vehicle_id for link in orm_driver.vehicle_links),
    )


def driver_vehicle_links(vehicle_ids) -> list[ORMDriverVehicle]:
    """Build ordered association rows, dropping repeated vehicle IDs."""
    unique_ids = list(dict.fromkeys(vehicle_ids))
    return [
        ORMDriverVehicle(vehicle_id=vehicle_id, position=position)
        for position, vehicle_id in enumerate(unique_ids)
    ]


def driver_to_orm(driver: domain.Driver) -> ORMDriver:
    orm_driver = ORMDriver(
        id=driver.id,
        name=driver.name,
        region=driver.region.value,
        entity_type=driver.entity_type.value,
        irs_rate=driver.irs_rate,
        ss_rate=driver.ss_rate,
    )
    orm_driver.vehicle_links = driver_vehicle_links(driver.vehicle_ids)
    return orm_driver


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        parent_id=orm_transaction.parent_id,
        derived_kind=_optional_enum(domain.DerivedKind, orm_transaction.derived_kind),
        date=orm_transaction.date,
        type=domain.TransactionType(orm_transaction.type),
        amount=orm_transaction.amount,
        description=orm_transaction.description,
        driver_id=orm_transaction.driver_id,
        vehicle_id=orm_transaction.vehicle_id,
        platform_id=orm_transaction.platform_id,
        category=_optional_enum(domain.ExpenseCategory, orm_transaction.category),
        vat_amount=orm_transaction.vat_amount,
    )


def transaction_to_orm(transaction: domain.Transaction) -> ORMTransaction:
    return ORMTransaction(
        id=transaction.id,
        parent_id=transaction.parent_id,
        derived_kind=transaction.derived_kind.value if transaction.derived_kind else None,
        date=transaction.date,
        type=transaction.type.value,
        amount=transaction.amount,
        description=transaction.description,
        driver_id=transaction.driver_id,
        vehicle_id=transaction.vehicle_id,
        platform_id=transaction.platform_id,
        category=transaction.category.value if transaction.category else None,
        vat_amount=transaction.vat_amount,
    )


# Backup payloads


def _platform_to_dict(platform: domain.Platform) -> dict[str, Any]:
    return {
        "id": platform.id,
        "name": platform.name,
        "commissionRate": platform.commission_rate,
    }


def _vehicle_to_dict(vehicle: domain.Vehicle) -> dict[str, Any]:
    return {
        "id": vehicle.id,
        "name": vehicle.name,
        "licensePlate": vehicle.license_plate,
    }


def _driver_to_dict(driver: domain.Driver) -> dict[str, Any]:
    return {
        "id": driver.id,
        "name": driver.name,
        "region": driver.region.value,
        "entityType": driver.entity_type.value,
        "irsRate": driver.irs_rate,
        "ssRate": driver.ss_rate,
        "vehicleIds": list(driver.vehicle_ids),
    }


def _transaction_to_dict(transaction: domain.Transaction) -> dict[str, Any]:
    return {
        "id": transaction.id,
        "parentId": transaction.parent_id,
        "derivedKind": transaction.derived_kind.value if transaction.derived_kind else None,
        "date": transaction.date.isoformat(),
        "type": transaction.type.value,
        "amount": transaction.amount,
        "description": transaction.description,
        "driverId": transaction.driver_id,
        "vehicleId": transaction.vehicle_id,
        "platformId": transaction.platform_id,
        "category": transaction.category.value if transaction.category else None,
        "vatAmount": transaction.vat_amount,
    }


def app_data_to_dict(data: domain.AppData) -> dict[str, list[dict[str, Any]]]:
    """Convert AppData into plain JSON-compatible collections."""
    return {
        "platforms": [_platform_to_dict(p) for p in data.platforms],
        "drivers": [_driver_to_dict(d) for d in data.drivers],
        "vehicles": [_vehicle_to_dict(v) for v in data.vehicles],
        "transactions": [_transaction_to_dict(t) for t in data.transactions],
    }


def app_data_from_dict(payload: dict[str, Any]) -> domain.AppData:
    """Build AppData from collections produced by app_data_to_dict.

    Missing collections are treated as empty.
    """
    platforms = tuple(
        domain.Platform(
            id=item["id"],
            name=item["name"],
            commission_rate=item.get("commissionRate", 0.0),
        )
        for item in payload.get("platforms", [])
    )
    vehicles = tuple(
        domain.Vehicle(
            id=item["id"],
            name=item["name"],
            license_plate=item.get("licensePlate", ""),
        )
        for item in payload.get("vehicles", [])
    )
    drivers = tuple(
        domain.Driver(
            id=item["id"],
            name=item["name"],
            region=domain.Region(item["region"]),
            entity_type=domain.EntityType(item["entityType"]),
            irs_rate=item.get("irsRate"),
            ss_rate=item.get("ssRate"),
            vehicle_ids=tuple(item.get("vehicleIds") or ()),
        )
        for item in payload.get("drivers", [])
    )
    transactions = tuple(
        domain.Transaction(
            id=item["id"],
            parent_id=item.get("parentId"),
            derived_kind=_optional_enum(domain.DerivedKind, item.get("derivedKind")),
            date=date.fromisoformat(item["date"]),
            type=domain.TransactionType(item["type"]),
            amount=item["amount"],
            description=item.get("description", ""),
            driver_id=item["driverId"],
            vehicle_id=item["vehicleId"],
            platform_id=item.get("platformId"),
            category=_optional_enum(domain.ExpenseCategory, item.get("category")),
            vat_amount=item.get("vatAmount"),
        )
        for item in payload.get("transactions", [])
    )
    return domain.AppData(
        platforms=platforms,
        drivers=drivers,
        vehicles=vehicles,
        transactions=transactions,
    )


def backup_to_domain(orm_backup: ORMBackup) -> domain.Backup:
    """Convert SQLAlchemy Backup model to domain Backup entity."""
    return domain.Backup(
        id=orm_backup.id,
        created_at=_aware(orm_backup.created_at),
        type=domain.BackupType(orm_backup.type),
        data=app_data_from_dict(json.loads(orm_backup.payload)),
    )


def backup_to_orm(backup: domain.Backup) -> ORMBackup:
    created_at: Optional[datetime] = backup.created_at
    if created_at is not None:
        created_at = created_at.astimezone(UTC).replace(tzinfo=None)
    return ORMBackup(
        id=backup.id,
        created_at=created_at,
        type=backup.type.value,
        payload=json.dumps(app_data_to_dict(backup.data), ensure_ascii=False),
    )
