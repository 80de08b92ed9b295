"""Helpers that locate the workshop database and build a store for it."""

import os
from pathlib import Path
from typing import Optional

from workshopmgr.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENVVAR = "WORKSHOPMGR_DB_PATH"
DATA_DIR_NAME = ".workshopmgr"
DB_FILE_NAME = "workshopmgr.db"


def default_database_path() -> Path:
    """Location of the database when neither an option nor the environment names one.

    The data directory under the user's home is created on first use.
    """
    data_dir = Path.home() / DATA_DIR_NAME
    data_dir.mkdir(exist_ok=True)
    return data_dir / DB_FILE_NAME


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Open the SQLite store for the workshop data.

    Args:
        database_path: Database file; ":memory:" keeps everything in memory.
            Falls back to $WORKSHOPMGR_DB_PATH, then to default_database_path().
    """
    path = database_path or os.environ.get(DB_PATH_ENVVAR) or str(default_database_path())
    if path == ":memory:":
        return SQLAlchemyDatabase("sqlite://")
    return SQLAlchemyDatabase(f"sqlite:///{path}")
