"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from bookkit.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DB_DIR = Path.home() / ".bookkit"
IN_MEMORY = ":memory:"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to the SQLite file, or ":memory:" for a throwaway
            database. If None, BOOKKIT_DB_PATH is used, then
            ~/.bookkit/bookkit.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("BOOKKIT_DB_PATH")

    if database_path == IN_MEMORY:
        return SQLAlchemyDatabase("sqlite://")

    if database_path is None:
        DEFAULT_DB_DIR.mkdir(exist_ok=True)
        path = DEFAULT_DB_DIR / "bookkit.db"
    else:
        path = Path(database_path).expanduser()

    return SQLAlchemyDatabase(f"sqlite:///{path}")
