"""Database layer for ledgerkit."""

from ledgerkit.database.base import Database
from ledgerkit.database.factories import create_sqlite_database
from ledgerkit.database.sqlalchemy_db import SQLAlchemyDatabase

__all__ = ["Database", "SQLAlchemyDatabase", "create_sqlite_database"]
