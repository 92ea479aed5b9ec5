"""Vehicle domain service."""

import logging
from dataclasses import replace
from typing import Optional

from tvdetrack.database.base import Database
from tvdetrack.domain.entities import Vehicle
from tvdetrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_name,
    entity_not_found,
)
from tvdetrack.utils.ids import new_id

logger = logging.getLogger(__name__)


class VehicleService:
    """Service for managing vehicles."""

    def __init__(self, db: Database, id_generator=new_id):
        self.db = db
        self.id_generator = id_generator

    def _check_name(self, name: str, exclude_id: Optional[str] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Vehicle name is required")
        for vehicle in self.db.list_vehicles():
            if vehicle.id != exclude_id and vehicle.name == name:
                raise ConflictError(duplicate_name("Vehicle", name))
        return name

    def create_vehicle(self, name: str, license_plate: str) -> Vehicle:
        """Create a new vehicle.

        Args:
            name: Vehicle name (e.g. "Toyota Corolla")
            license_plate: License plate, stored upper-cased

        Returns:
            Created vehicle

        Raises:
            ValidationError: If name or plate is empty
            ConflictError: If vehicle name already exists
        """
        name = self._check_name(name)
        license_plate = (license_plate or "").strip().upper()
        if not license_plate:
            raise ValidationError("License plate is required")

        vehicle = Vehicle(id=self.id_generator(), name=name, license_plate=license_plate)
        self.db.create_vehicle(vehicle)
        logger.info("Created vehicle %s [%s] (%s)", vehicle.name, vehicle.license_plate, vehicle.id)
        return vehicle

    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        return self.db.get_vehicle(vehicle_id)

    def list_vehicles(self) -> list[Vehicle]:
        return self.db.list_vehicles()

    def update_vehicle(
        self,
        vehicle_id: str,
        name: Optional[str] = None,
        license_plate: Optional[str] = None,
    ) -> Vehicle:
        """Update vehicle fields that are provided.

        Raises:
            NotFoundError: If vehicle doesn't exist
        """
        vehicle = self.db.get_vehicle(vehicle_id)
        if vehicle is None:
            raise NotFoundError(entity_not_found("Vehicle", vehicle_id))

        if name is not None:
            vehicle = replace(vehicle, name=self._check_name(name, exclude_id=vehicle_id))
        if license_plate is not None:
            license_plate = license_plate.strip().upper()
            if not license_plate:
                raise ValidationError("License plate is required")
            vehicle = replace(vehicle, license_plate=license_plate)

        self.db.update_vehicle(vehicle)
        return vehicle

    def delete_vehicle(self, vehicle_id: str) -> None:
        """Delete a vehicle.

        Transactions and driver associations keep the reference.

        Raises:
            NotFoundError: If vehicle doesn't exist
        """
        if self.db.get_vehicle(vehicle_id) is None:
            raise NotFoundError(entity_not_found("Vehicle", vehicle_id))
        self.db.delete_vehicle(vehicle_id)
        logger.info("Deleted vehicle %s", vehicle_id)

    def count_transactions(self, vehicle_id: str) -> int:
        return self.db.count_transactions(vehicle_id=vehicle_id)
