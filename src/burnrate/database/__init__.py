"""Database layer for burnrate application."""

from burnrate.database.base import Database
from burnrate.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
