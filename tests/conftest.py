"""Shared pytest fixtures for tvdetrack tests."""

import tempfile
import os
import pytest

from tvdetrack.database.factories import create_sqlite_database
from tvdetrack.domain.driver import DriverService
from tvdetrack.domain.entities import EntityType, Region
from tvdetrack.domain.platform import PlatformService
from tvdetrack.domain.snapshot import SnapshotService
from tvdetrack.domain.summary import SummaryService
from tvdetrack.domain.transaction import TransactionService
from tvdetrack.domain.vehicle import VehicleService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def platform_service(temp_db):
    """Create a PlatformService with a temporary database."""
    return PlatformService(temp_db)


@pytest.fixture
def vehicle_service(temp_db):
    """Create a VehicleService with a temporary database."""
    return VehicleService(temp_db)


@pytest.fixture
def driver_service(temp_db):
    """Create a DriverService with a temporary database."""
    return DriverService(temp_db)


@pytest.fixture
def transaction_service(temp_db):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def snapshot_service(temp_db):
    """Create a SnapshotService with a temporary database."""
    return SnapshotService(temp_db)


@pytest.fixture
def sample_platform(platform_service):
    """Create a sample platform for testing."""
    return platform_service.create_platform(name="Uber", commission_rate=25.0)


@pytest.fixture
def sample_vehicle(vehicle_service):
    """Create a sample vehicle for testing."""
    return vehicle_service.create_vehicle(name="Toyota Corolla", license_plate="aa-00-bb")


@pytest.fixture
def eni_driver(driver_service, sample_vehicle):
    """Create a mainland ENI driver with IRS 20% and SS 21.4%."""
    return driver_service.create_driver(
        name="Ana",
        region=Region.CONTINENTAL,
        entity_type=EntityType.ENI,
        irs_rate=20.0,
        ss_rate=21.4,
        vehicle_ids=[sample_vehicle.id],
    )


@pytest.fixture
def empresa_driver(driver_service, sample_vehicle):
    """Create a mainland company driver."""
    return driver_service.create_driver(
        name="Frota Lda",
        region=Region.CONTINENTAL,
        entity_type=EntityType.EMPRESA,
        vehicle_ids=[sample_vehicle.id],
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
