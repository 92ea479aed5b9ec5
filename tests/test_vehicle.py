"""Tests for vehicle service and commands."""

import pytest

from tvdetrack.cli.main import cli
from tvdetrack.domain.errors import ConflictError, NotFoundError, ValidationError


def test_create_vehicle_uppercases_plate(vehicle_service):
    vehicle = vehicle_service.create_vehicle("Tesla Model 3", " 12-ab-34 ")

    assert vehicle.license_plate == "12-AB-34"
    assert vehicle_service.list_vehicles() == [vehicle]


def test_create_vehicle_requires_plate(vehicle_service):
    with pytest.raises(ValidationError, match="License plate"):
        vehicle_service.create_vehicle("Tesla", "")


def test_create_vehicle_duplicate_name(vehicle_service, sample_vehicle):
    with pytest.raises(ConflictError):
        vehicle_service.create_vehicle("Toyota Corolla", "ZZ-99-ZZ")


def test_update_vehicle(vehicle_service, sample_vehicle):
    updated = vehicle_service.update_vehicle(sample_vehicle.id, license_plate="bb-11-cc")

    assert updated.license_plate == "BB-11-CC"
    assert vehicle_service.get_vehicle(sample_vehicle.id).license_plate == "BB-11-CC"


def test_update_missing_vehicle(vehicle_service):
    with pytest.raises(NotFoundError):
        vehicle_service.update_vehicle("missing", name="X")


def test_delete_vehicle_keeps_driver_reference(vehicle_service, driver_service, eni_driver, sample_vehicle):
    vehicle_service.delete_vehicle(sample_vehicle.id)

    assert vehicle_service.get_vehicle(sample_vehicle.id) is None
    assert driver_service.get_driver(eni_driver.id).vehicle_ids == (sample_vehicle.id,)


def test_vehicle_commands(cli_runner, temp_db):
    args = ["--db-path", temp_db.database_path]

    result = cli_runner.invoke(cli, args + ["vehicle", "create", "Corolla", "--plate", "aa-00-bb"])
    assert result.exit_code == 0, result.output
    assert "[AA-00-BB]" in result.output

    result = cli_runner.invoke(cli, args + ["vehicle", "update", "Corolla", "--name", "Corolla 2020"])
    assert result.exit_code == 0, result.output

    result = cli_runner.invoke(cli, args + ["vehicle", "list"])
    assert "Corolla 2020" in result.output
    assert "AA-00-BB" in result.output

    result = cli_runner.invoke(cli, args + ["vehicle", "delete", "Corolla 2020", "--yes"])
    assert result.exit_code == 0, result.output
    assert "Deleted vehicle 'Corolla 2020'" in result.output


def test_vehicle_delete_cancelled(cli_runner, temp_db, sample_vehicle):
    args = ["--db-path", temp_db.database_path]

    result = cli_runner.invoke(cli, args + ["vehicle", "delete", "Toyota Corolla"], input="n\n")

    assert result.exit_code == 0
    assert "Deletion cancelled." in result.output
    result = cli_runner.invoke(cli, args + ["vehicle", "list"])
    assert "Toyota Corolla" in result.output
