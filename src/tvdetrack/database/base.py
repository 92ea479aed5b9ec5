"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Sequence
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from tvdetrack.domain.entities import (
    AppData,
    Backup,
    BackupType,
    Driver,
    Platform,
    Transaction,
    Vehicle,
)


class Database(ABC):
    """Abstract database interface for tvdetrack.

    Every mutating method applies its whole change in one unit: callers never
    observe a collection partially updated.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Platform operations
    @abstractmethod
    def create_platform(self, platform: Platform) -> str:
        """Store a new platform. Returns platform ID."""
        pass

    @abstractmethod
    def get_platform(self, platform_id: str) -> Optional[Platform]:
        """Get platform by ID."""
        pass

    @abstractmethod
    def list_platforms(self) -> list[Platform]:
        """List all platforms."""
        pass

    @abstractmethod
    def update_platform(self, platform: Platform) -> None:
        """Replace the stored platform with the same ID."""
        pass

    @abstractmethod
    def delete_platform(self, platform_id: str) -> None:
        """Delete a platform."""
        pass

    # Vehicle operations
    @abstractmethod
    def create_vehicle(self, vehicle: Vehicle) -> str:
        """Store a new vehicle. Returns vehicle ID."""
        pass

    @abstractmethod
    def get_vehicle(self, vehicle_id: str) -> Optional[Vehicle]:
        """Get vehicle by ID."""
        pass

    @abstractmethod
    def list_vehicles(self) -> list[Vehicle]:
        """List all vehicles."""
        pass

    @abstractmethod
    def update_vehicle(self, vehicle: Vehicle) -> None:
        """Replace the stored vehicle with the same ID."""
        pass

    @abstractmethod
    def delete_vehicle(self, vehicle_id: str) -> None:
        """Delete a vehicle."""
        pass

    # Driver operations
    @abstractmethod
    def create_driver(self, driver: Driver) -> str:
        """Store a new driver with its vehicle associations. Returns driver ID."""
        pass

    @abstractmethod
    def get_driver(self, driver_id: str) -> Optional[Driver]:
        """Get driver by ID."""
        pass

    @abstractmethod
    def list_drivers(self) -> list[Driver]:
        """List all drivers."""
        pass

    @abstractmethod
    def update_driver(self, driver: Driver) -> None:
        """Replace the stored driver (and its vehicle associations)."""
        pass

    @abstractmethod
    def delete_driver(self, driver_id: str) -> None:
        """Delete a driver."""
        pass

    # Transaction operations
    @abstractmethod
    def get_transaction(self, transaction_id: str) -> Optional[Transaction]:
        """Get transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        driver_id: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        parent_id: Optional[str] = None,
    ) -> list[Transaction]:
        """List transactions with optional filters, newest first.

        Args:
            start_date: Optional inclusive start date
            end_date: Optional inclusive end date
            driver_id: Optional driver ID filter
            vehicle_id: Optional vehicle ID filter
            parent_id: Optional filter returning only children of this transaction
        """
        pass

    @abstractmethod
    def count_transactions(
        self,
        driver_id: Optional[str] = None,
        vehicle_id: Optional[str] = None,
        platform_id: Optional[str] = None,
    ) -> int:
        """Count transactions referencing a driver, vehicle or platform."""
        pass

    @abstractmethod
    def replace_transactions(
        self, remove_id: Optional[str], transactions: Sequence[Transaction]
    ) -> None:
        """Atomically remove a transaction with its children and insert new ones.

        Args:
            remove_id: ID whose transaction and children (parent_id == remove_id)
                are removed first, or None to only insert
            transactions: Transactions to insert
        """
        pass

    @abstractmethod
    def delete_transaction(self, transaction_id: str) -> int:
        """Delete a transaction and its children. Returns number of rows removed."""
        pass

    # Backup operations
    @abstractmethod
    def create_backup(self, backup: Backup, evict_ids: Sequence[str] = ()) -> str:
        """Store a backup, deleting evict_ids in the same unit. Returns backup ID."""
        pass

    @abstractmethod
    def get_backup(self, backup_id: str) -> Optional[Backup]:
        """Get backup by ID."""
        pass

    @abstractmethod
    def list_backups(self, backup_type: Optional[BackupType] = None) -> list[Backup]:
        """List backups, newest first, optionally filtered by type."""
        pass

    @abstractmethod
    def delete_backup(self, backup_id: str) -> bool:
        """Delete a backup. Returns True if a backup was removed."""
        pass

    # Whole-store operations
    @abstractmethod
    def load_app_data(self) -> AppData:
        """Return a value copy of the four entity collections."""
        pass

    @abstractmethod
    def replace_app_data(self, data: AppData) -> None:
        """Atomically replace the four entity collections with data."""
        pass
