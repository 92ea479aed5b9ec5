"""Database layer for tvdetrack application."""

from tvdetrack.database.base import Database
from tvdetrack.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
