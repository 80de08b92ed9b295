"""Database layer for workshopmgr application."""

from workshopmgr.database.base import Database
from workshopmgr.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
