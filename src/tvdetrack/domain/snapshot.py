"""Snapshot (backup) domain service."""

import logging
from datetime import UTC, datetime, timedelta
from typing import Callable, Optional

from tvdetrack.database.base import Database
from tvdetrack.domain.entities import Backup, BackupType
from tvdetrack.domain.errors import NotFoundError, backup_not_found
from tvdetrack.utils.ids import new_id

logger = logging.getLogger(__name__)

AUTO_SNAPSHOT_INTERVAL = timedelta(days=7)
MAX_AUTO_SNAPSHOTS = 4


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(UTC)


def should_create_auto_snapshot(last_auto_at: Optional[datetime], now: datetime) -> bool:
    """Return True if an automatic snapshot is due.

    Args:
        last_auto_at: Time of the newest automatic snapshot, or None
        now: Current time

    Returns:
        True when there is no automatic snapshot yet or the newest one is
        strictly older than the snapshot interval
    """
    if last_auto_at is None:
        return True
    return now - last_auto_at > AUTO_SNAPSHOT_INTERVAL


class SnapshotService:
    """Service for creating, restoring and pruning snapshots of the store."""

    def __init__(
        self,
        db: Database,
        id_generator: Callable[[], str] = new_id,
        clock: Callable[[], datetime] = utc_now,
    ):
        """Initialize snapshot service.

        Args:
            db: Database instance
            id_generator: Callable returning new unique IDs
            clock: Callable returning the current aware datetime
        """
        self.db = db
        self.id_generator = id_generator
        self.clock = clock

    def _new_backup(self, backup_type: BackupType) -> Backup:
        return Backup(
            id=self.id_generator(),
            created_at=self.clock(),
            type=backup_type,
            data=self.db.load_app_data(),
        )

    def list_snapshots(self, backup_type: Optional[BackupType] = None) -> list[Backup]:
        """List snapshots, newest first."""
        return self.db.list_backups(backup_type)

    def get_snapshot(self, backup_id: str) -> Optional[Backup]:
        return self.db.get_backup(backup_id)

    def maybe_create_auto_snapshot(self) -> Optional[Backup]:
        """Create an automatic snapshot if one is due.

        Nothing is created for an empty store. Only the newest automatic
        snapshots are kept; older ones are evicted in the same write. Manual
        snapshots are never touched.

        Returns:
            The new snapshot, or None if none was due
        """
        autos = self.db.list_backups(BackupType.AUTO)
        last_auto_at = autos[0].created_at if autos else None
        now = self.clock()
        if not should_create_auto_snapshot(last_auto_at, now):
            logger.debug("Auto snapshot not due (last at %s)", last_auto_at)
            return None

        backup = self._new_backup(BackupType.AUTO)
        if backup.data.is_empty:
            logger.debug("Skipping auto snapshot of an empty store")
            return None

        evict_ids = [old.id for old in autos[MAX_AUTO_SNAPSHOTS - 1 :]]
        self.db.create_backup(backup, evict_ids=evict_ids)
        logger.info(
            "Created auto snapshot %s, evicted %d old auto snapshots",
            backup.id,
            len(evict_ids),
        )
        return backup

    def create_manual_snapshot(self) -> Backup:
        """Snapshot the store on request. Manual snapshots are never pruned."""
        backup = self._new_backup(BackupType.MANUAL)
        self.db.create_backup(backup)
        logger.info("Created manual snapshot %s", backup.id)
        return backup

    def restore(self, backup_id: str) -> Backup:
        """Replace platforms, drivers, vehicles and transactions with a snapshot.

        Args:
            backup_id: Snapshot to restore

        Returns:
            The restored snapshot

        Raises:
            NotFoundError: If the snapshot doesn't exist
        """
        backup = self.db.get_backup(backup_id)
        if backup is None:
            raise NotFoundError(backup_not_found(backup_id))
        self.db.replace_app_data(backup.data)
        logger.info("Restored snapshot %s from %s", backup.id, backup.created_at.isoformat())
        return backup

    def delete(self, backup_id: str) -> bool:
        """Delete a snapshot. Returns False if it was already gone."""
        removed = self.db.delete_backup(backup_id)
        if removed:
            logger.info("Deleted snapshot %s", backup_id)
        return removed
