"""Domain layer for tvdetrack application."""

_SERVICES = {
    "TransactionService": "tvdetrack.domain.transaction",
    "SummaryService": "tvdetrack.domain.summary",
    "SnapshotService": "tvdetrack.domain.snapshot",
    "PlatformService": "tvdetrack.domain.platform",
    "DriverService": "tvdetrack.domain.driver",
    "VehicleService": "tvdetrack.domain.vehicle",
}

__all__ = list(_SERVICES)


# Import services lazily: the database layer imports domain entities
def __getattr__(name):
    if name in _SERVICES:
        from importlib import import_module

        return getattr(import_module(_SERVICES[name]), name)
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
