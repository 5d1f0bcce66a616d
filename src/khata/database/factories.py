"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from khata.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DB_DIR = Path.home() / ".khata"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite-backed store.

    The path is taken from the argument, then ``KHATA_DB_PATH``, then
    ``~/.khata/khata.db``. Missing parent directories are created.
    """
    database_path = database_path or os.environ.get("KHATA_DB_PATH")
    if database_path:
        path = Path(database_path).expanduser()
    else:
        path = DEFAULT_DB_DIR / "khata.db"
    path.parent.mkdir(parents=True, exist_ok=True)

    return SQLAlchemyDatabase(f"sqlite:///{path}")
