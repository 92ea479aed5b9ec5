"""Platform domain service."""

import logging
from dataclasses import replace
from typing import Optional

from tvdetrack.database.base import Database
from tvdetrack.domain.entities import Platform
from tvdetrack.domain.errors import (
    ConflictError,
    NotFoundError,
    ValidationError,
    duplicate_name,
    entity_not_found,
    percentage_out_of_range,
)
from tvdetrack.utils.ids import new_id

logger = logging.getLogger(__name__)

# Platforms available on a fresh install
DEFAULT_PLATFORMS = (
    ("Uber", 25.0),
    ("Bolt", 20.0),
)


def _validate_commission_rate(commission_rate: float) -> None:
    if not 0 <= commission_rate <= 100:
        raise ValidationError(percentage_out_of_range("Commission rate", commission_rate))


class PlatformService:
    """Service for managing ride-hailing platforms."""

    def __init__(self, db: Database, id_generator=new_id):
        """Initialize platform service.

        Args:
            db: Database instance
            id_generator: Callable returning new unique IDs
        """
        self.db = db
        self.id_generator = id_generator

    def _check_name(self, name: str, exclude_id: Optional[str] = None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Platform name is required")
        for platform in self.db.list_platforms():
            if platform.id != exclude_id and platform.name == name:
                raise ConflictError(duplicate_name("Platform", name))
        return name

    def create_platform(self, name: str, commission_rate: float) -> Platform:
        """Create a new platform.

        Args:
            name: Platform name
            commission_rate: Commission as a percentage, display only

        Returns:
            Created platform

        Raises:
            ValidationError: If name is empty or rate is out of range
            ConflictError: If platform name already exists
        """
        name = self._check_name(name)
        _validate_commission_rate(commission_rate)

        platform = Platform(id=self.id_generator(), name=name, commission_rate=commission_rate)
        self.db.create_platform(platform)
        logger.info("Created platform %s (%s)", platform.name, platform.id)
        return platform

    def get_platform(self, platform_id: str) -> Optional[Platform]:
        """Get platform by ID."""
        return self.db.get_platform(platform_id)

    def list_platforms(self) -> list[Platform]:
        """List all platforms."""
        return self.db.list_platforms()

    def update_platform(
        self,
        platform_id: str,
        name: Optional[str] = None,
        commission_rate: Optional[float] = None,
    ) -> Platform:
        """Update platform fields that are provided.

        Raises:
            NotFoundError: If platform doesn't exist
            ValidationError: If a new value is invalid
            ConflictError: If the new name is taken
        """
        platform = self.db.get_platform(platform_id)
        if platform is None:
            raise NotFoundError(entity_not_found("Platform", platform_id))

        if name is not None:
            platform = replace(platform, name=self._check_name(name, exclude_id=platform_id))
        if commission_rate is not None:
            _validate_commission_rate(commission_rate)
            platform = replace(platform, commission_rate=commission_rate)

        self.db.update_platform(platform)
        return platform

    def delete_platform(self, platform_id: str) -> None:
        """Delete a platform.

        Transactions keep their platform reference and show it as unknown.

        Raises:
            NotFoundError: If platform doesn't exist
        """
        if self.db.get_platform(platform_id) is None:
            raise NotFoundError(entity_not_found("Platform", platform_id))
        self.db.delete_platform(platform_id)
        logger.info("Deleted platform %s", platform_id)

    def count_transactions(self, platform_id: str) -> int:
        """Count transactions recorded on a platform."""
        return self.db.count_transactions(platform_id=platform_id)

    def init_default_platforms(self) -> list[Platform]:
        """Create the default platforms whose names are not taken yet.

        Returns:
            Newly created platforms
        """
        existing = {platform.name for platform in self.db.list_platforms()}
        created = []
        for name, commission_rate in DEFAULT_PLATFORMS:
            if name in existing:
                continue
            created.append(self.create_platform(name, commission_rate))
        return created
