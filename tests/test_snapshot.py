"""Tests for snapshot service and backup commands."""

import re
from datetime import UTC, date, datetime, timedelta
from itertools import count

import pytest

from tvdetrack.cli.main import cli
from tvdetrack.domain.entities import BackupType, TransactionInput, TransactionType
from tvdetrack.domain.errors import NotFoundError
from tvdetrack.domain.snapshot import (
    AUTO_SNAPSHOT_INTERVAL,
    MAX_AUTO_SNAPSHOTS,
    SnapshotService,
    should_create_auto_snapshot,
)

START = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, now=START):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, delta):
        self.now += delta


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def snapshots(temp_db, clock):
    counter = count(1)
    return SnapshotService(temp_db, id_generator=lambda: f"backup-{next(counter)}", clock=clock)


def test_should_create_without_previous_snapshot():
    assert should_create_auto_snapshot(None, START)


def test_should_create_only_after_interval():
    assert not should_create_auto_snapshot(START, START)
    assert not should_create_auto_snapshot(START, START + AUTO_SNAPSHOT_INTERVAL)
    assert should_create_auto_snapshot(
        START, START + AUTO_SNAPSHOT_INTERVAL + timedelta(milliseconds=1)
    )


def test_interval_is_seven_days():
    assert AUTO_SNAPSHOT_INTERVAL.total_seconds() * 1000 == 604_800_000


def test_empty_store_never_gets_auto_snapshot(snapshots, clock):
    assert snapshots.maybe_create_auto_snapshot() is None
    clock.advance(timedelta(days=30))
    assert snapshots.maybe_create_auto_snapshot() is None
    assert snapshots.list_snapshots() == []


def test_auto_snapshot_cadence(snapshots, clock, sample_platform):
    first = snapshots.maybe_create_auto_snapshot()
    assert first is not None
    assert first.type == BackupType.AUTO
    assert first.created_at == START
    assert first.data.platforms == (sample_platform,)

    assert snapshots.maybe_create_auto_snapshot() is None

    clock.advance(AUTO_SNAPSHOT_INTERVAL)
    assert snapshots.maybe_create_auto_snapshot() is None

    clock.advance(timedelta(seconds=1))
    second = snapshots.maybe_create_auto_snapshot()
    assert second is not None
    assert [b.id for b in snapshots.list_snapshots()] == [second.id, first.id]


def test_auto_snapshots_are_capped(snapshots, clock, sample_platform):
    created = []
    for _ in range(MAX_AUTO_SNAPSHOTS + 2):
        created.append(snapshots.maybe_create_auto_snapshot())
        clock.advance(timedelta(days=8))

    autos = snapshots.list_snapshots(BackupType.AUTO)
    assert len(autos) == MAX_AUTO_SNAPSHOTS
    assert [b.id for b in autos] == [b.id for b in reversed(created[-MAX_AUTO_SNAPSHOTS:])]


def test_manual_snapshots_are_not_evicted(snapshots, clock, sample_platform):
    manual = snapshots.create_manual_snapshot()
    for _ in range(MAX_AUTO_SNAPSHOTS + 1):
        clock.advance(timedelta(days=8))
        snapshots.maybe_create_auto_snapshot()

    assert [b.id for b in snapshots.list_snapshots(BackupType.MANUAL)] == [manual.id]
    assert len(snapshots.list_snapshots()) == MAX_AUTO_SNAPSHOTS + 1


def test_manual_snapshot_does_not_reset_auto_cadence(snapshots, sample_platform):
    snapshots.create_manual_snapshot()

    assert snapshots.maybe_create_auto_snapshot() is not None


def test_restore_replaces_all_collections(
    snapshots,
    temp_db,
    platform_service,
    driver_service,
    transaction_service,
    eni_driver,
    sample_vehicle,
    sample_platform,
):
    main = transaction_service.save_transaction(
        TransactionInput(
            date=date(2024, 1, 1),
            type=TransactionType.INCOME,
            amount=100.0,
            description="Uber",
            driver_id=eni_driver.id,
            vehicle_id=sample_vehicle.id,
            platform_id=sample_platform.id,
        )
    )
    backup = snapshots.create_manual_snapshot()
    assert len(backup.data.transactions) == 4

    transaction_service.delete_transaction(main.id)
    driver_service.update_driver(eni_driver.id, name="Ana Maria", irs_rate=25.0)
    platform_service.create_platform("Bolt", 20.0)

    restored = snapshots.restore(backup.id)

    assert restored.id == backup.id
    assert temp_db.load_app_data() == backup.data
    assert transaction_service.get_transaction(main.id) == main
    assert snapshots.get_snapshot(backup.id) is not None


def test_restore_missing_snapshot(snapshots, sample_platform):
    with pytest.raises(NotFoundError, match="Backup nope not found"):
        snapshots.restore("nope")


def test_delete_is_idempotent(snapshots, sample_platform):
    backup = snapshots.create_manual_snapshot()

    assert snapshots.delete(backup.id) is True
    assert snapshots.delete(backup.id) is False
    assert snapshots.list_snapshots() == []


def test_snapshot_timestamps_survive_storage(snapshots, sample_platform):
    backup = snapshots.create_manual_snapshot()

    stored = snapshots.get_snapshot(backup.id)
    assert stored.created_at == START
    assert stored.created_at.tzinfo is not None


def _backup_ids(output):
    return re.findall(r"^(\S+) \| ", output, flags=re.MULTILINE)


def test_backup_commands(cli_runner, temp_db, sample_platform):
    args = ["--db-path", temp_db.database_path]

    result = cli_runner.invoke(cli, args + ["backup", "create"])
    assert result.exit_code == 0, result.output
    backup_id = re.search(r"Created backup (\S+)", result.output).group(1)

    # The first command on a non-empty store also takes an automatic backup
    result = cli_runner.invoke(cli, args + ["backup", "list"])
    assert result.exit_code == 0, result.output
    assert backup_id in _backup_ids(result.output)
    assert "auto" in result.output
    assert "1 platforms" in result.output

    result = cli_runner.invoke(cli, args + ["backup", "list", "--type", "manual"])
    assert _backup_ids(result.output) == [backup_id]

    result = cli_runner.invoke(cli, args + ["platform", "create", "Bolt"])
    assert result.exit_code == 0, result.output

    result = cli_runner.invoke(cli, args + ["backup", "restore", backup_id], input="y\n")
    assert result.exit_code == 0, result.output
    assert f"Restored backup {backup_id}" in result.output

    result = cli_runner.invoke(cli, args + ["platform", "list"])
    assert "Uber" in result.output
    assert "Bolt" not in result.output

    result = cli_runner.invoke(cli, args + ["backup", "delete", backup_id, "--yes"])
    assert result.exit_code == 0, result.output
    assert f"Deleted backup {backup_id}" in result.output

    result = cli_runner.invoke(cli, args + ["backup", "delete", backup_id, "--yes"])
    assert result.exit_code == 0
    assert "nothing deleted" in result.output


def test_backup_restore_cancelled(cli_runner, temp_db, sample_platform):
    args = ["--db-path", temp_db.database_path]
    result = cli_runner.invoke(cli, args + ["backup", "create"])
    backup_id = re.search(r"Created backup (\S+)", result.output).group(1)
    cli_runner.invoke(cli, args + ["platform", "create", "Bolt"])

    result = cli_runner.invoke(cli, args + ["backup", "restore", backup_id], input="n\n")

    assert result.exit_code == 0
    assert "Restore cancelled." in result.output
    result = cli_runner.invoke(cli, args + ["platform", "list"])
    assert "Bolt" in result.output


def test_backup_restore_missing(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "backup", "restore", "nope", "--yes"]
    )

    assert result.exit_code == 1
    assert "Backup nope not found" in result.output


def test_commands_on_empty_store_take_no_backup(cli_runner, temp_db):
    args = ["--db-path", temp_db.database_path]

    result = cli_runner.invoke(cli, args + ["platform", "list"])
    assert result.exit_code == 0

    result = cli_runner.invoke(cli, args + ["backup", "list"])
    assert "No backups found." in result.output
