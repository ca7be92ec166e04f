"""Store factory functions for creating entity store instances."""

import os
from pathlib import Path
from typing import Optional

from kedai.database.sqlalchemy_store import SQLAlchemyEntityStore


def create_sqlite_store(database_path: Optional[str] = None) -> SQLAlchemyEntityStore:
    """Create a SQLite-backed entity store.

    Args:
        database_path: Path to SQLite database file. If None, checks KEDAI_DB_PATH
            environment variable, then defaults to ~/.kedai/kedai.db

    Returns:
        SQLAlchemyEntityStore instance configured for SQLite
    """
    if database_path is None:
        database_path = os.environ.get("KEDAI_DB_PATH")

    if database_path is None:
        db_dir = Path.home() / ".kedai"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "kedai.db")

    return SQLAlchemyEntityStore(f"sqlite:///{database_path}", database_path=database_path)
