"""Storage layer for kedai."""

from kedai.database.base import EntityStore
from kedai.database.factories import create_sqlite_store

__all__ = ["EntityStore", "create_sqlite_store"]
