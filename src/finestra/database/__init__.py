"""Persistent store for finestra."""

from finestra.database.base import Database
from finestra.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
