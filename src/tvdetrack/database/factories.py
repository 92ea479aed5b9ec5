"""Database factory functions for creating database instances."""

import logging
import os
from pathlib import Path
from typing import Optional

from tvdetrack.database.sqlalchemy_db import SQLAlchemyDatabase

logger = logging.getLogger(__name__)

DB_PATH_ENV_VAR = "TVDETRACK_DB_PATH"


def default_database_path() -> Path:
    """Return ~/.tvdetrack/tvdetrack.db, creating the directory if needed."""
    db_dir = Path.home() / ".tvdetrack"
    db_dir.mkdir(exist_ok=True)
    return db_dir / "tvdetrack.db"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks TVDETRACK_DB_PATH
            environment variable, then defaults to ~/.tvdetrack/tvdetrack.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get(DB_PATH_ENV_VAR)

    if database_path is None:
        database_path = str(default_database_path())

    logger.debug("Using SQLite database at %s", database_path)
    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
