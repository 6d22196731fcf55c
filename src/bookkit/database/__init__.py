"""Persistence layer: abstract Database, SQLAlchemy implementation, factories."""

from bookkit.database.base import Database
from bookkit.database.sqlalchemy_db import SQLAlchemyDatabase
from bookkit.database.factories import create_sqlite_database

__all__ = ["Database", "SQLAlchemyDatabase", "create_sqlite_database"]
