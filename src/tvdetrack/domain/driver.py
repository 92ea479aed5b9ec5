"""Driver domain service."""

import logging
from dataclasses import replace
from typing import Iterable, Optional

from tvdetrack.database.base import Database
from tvdetrack.domain.entities import Driver, EntityType, Region
from tvdetrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_name,
    entity_not_found,
    percentage_out_of_range,
    reference_not_found,
)
from tvdetrack.utils.ids import new_id

logger = logging.getLogger(__name__)

# Rates suggested for new ENI drivers
DEFAULT_IRS_RATE = 20.0
DEFAULT_SS_RATE = 21.4


def _coerce(enum_cls, value, label: str):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = ", ".join(member.value for member in enum_cls)
        raise ValidationError(f"Invalid {label} '{value}' (expected one of: {allowed})")


class DriverService:
    """Service for managing drivers and their fiscal profile."""

    def __init__(self, db: Database, id_generator=new_id):
        """Initialize driver service.

        Args:
            db: Database instance
            id_generator: Callable returning new unique IDs
        """
        self.db = db
        self.id_generator = id_generator

    def _check_name(self, name: str, exclude_id: Optional[str] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Driver name is required")
        for driver in self.db.list_drivers():
            if driver.id != exclude_id and driver.name == name:
                raise ConflictError(duplicate_name("Driver", name))
        return name

    def _check_vehicles(self, vehicle_ids: Iterable[str]) -> tuple[str, ...]:
        vehicle_ids = tuple(dict.fromkeys(vehicle_ids))
        for vehicle_id in vehicle_ids:
            if self.db.get_vehicle(vehicle_id) is None:
                raise ValidationError(reference_not_found("Vehicle", vehicle_id))
        return vehicle_ids

    @staticmethod
    def _normalize(driver: Driver) -> Driver:
        """Validate rates and drop them for entity types that don't use them."""
        if driver.entity_type != EntityType.ENI:
            return replace(driver, irs_rate=None, ss_rate=None)
        for field_name, value in (("IRS rate", driver.irs_rate), ("SS rate", driver.ss_rate)):
            if value is not None and not 0 <= value <= 100:
                raise ValidationError(percentage_out_of_range(field_name, value))
        return driver

    def create_driver(
        self,
        name: str,
        region: Region,
        entity_type: EntityType,
        irs_rate: Optional[float] = None,
        ss_rate: Optional[float] = None,
        vehicle_ids: Iterable[str] = (),
    ) -> Driver:
        """Create a new driver.

        Args:
            name: Driver name
            region: Fiscal region, selects the VAT rates
            entity_type: ENI or empresa
            irs_rate: IRS withholding percentage (ENI only)
            ss_rate: Social security percentage (ENI only)
            vehicle_ids: IDs of associated vehicles

        Returns:
            Created driver

        Raises:
            ValidationError: If a field is invalid or a vehicle doesn't exist
            ConflictError: If driver name already exists
        """
        driver = Driver(
            id=self.id_generator(),
            name=self._check_name(name),
            region=_coerce(Region, region, "region"),
            entity_type=_coerce(EntityType, entity_type, "entity type"),
            irs_rate=irs_rate,
            ss_rate=ss_rate,
            vehicle_ids=self._check_vehicles(vehicle_ids),
        )
        driver = self._normalize(driver)
        self.db.create_driver(driver)
        logger.info(
            "Created driver %s (%s, %s, %s)",
            driver.name,
            driver.id,
            driver.region.value,
            driver.entity_type.value,
        )
        return driver

    def get_driver(self, driver_id: str) -> Optional[Driver]:
        """Get driver by ID."""
        return self.db.get_driver(driver_id)

    def list_drivers(self) -> list[Driver]:
        """List all drivers."""
        return self.db.list_drivers()

    def update_driver(
        self,
        driver_id: str,
        name: Optional[str] = None,
        region: Optional[Region] = None,
        entity_type: Optional[EntityType] = None,
        irs_rate: Optional[float] = None,
        ss_rate: Optional[float] = None,
        vehicle_ids: Optional[Iterable[str]] = None,
    ) -> Driver:
        """Update driver fields that are provided.

        Existing transactions are not re-derived; edit them to apply a new
        fiscal profile.

        Raises:
            NotFoundError: If driver doesn't exist
            ValidationError: If a new value is invalid
            ConflictError: If the new name is taken
        """
        driver = self.db.get_driver(driver_id)
        if driver is None:
            raise NotFoundError(entity_not_found("Driver", driver_id))

        changes = {}
        if name is not None:
            changes["name"] = self._check_name(name, exclude_id=driver_id)
        if region is not None:
            changes["region"] = _coerce(Region, region, "region")
        if entity_type is not None:
            changes["entity_type"] = _coerce(EntityType, entity_type, "entity type")
        if irs_rate is not None:
            changes["irs_rate"] = irs_rate
        if ss_rate is not None:
            changes["ss_rate"] = ss_rate
        if vehicle_ids is not None:
            changes["vehicle_ids"] = self._check_vehicles(vehicle_ids)

        driver = self._normalize(replace(driver, **changes))
        self.db.update_driver(driver)
        return driver

    def delete_driver(self, driver_id: str) -> None:
        """Delete a driver.

        Transactions keep the driver reference and show it as unknown.

        Raises:
            NotFoundError: If driver doesn't exist
        """
        if self.db.get_driver(driver_id) is None:
            raise NotFoundError(entity_not_found("Driver", driver_id))
        self.db.delete_driver(driver_id)
        logger.info("Deleted driver %s", driver_id)

    def count_transactions(self, driver_id: str) -> int:
        """Count transactions recorded for a driver."""
        return self.db.count_transactions(driver_id=driver_id)
