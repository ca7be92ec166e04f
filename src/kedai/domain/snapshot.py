"""Snapshot export/restore and the local backup history."""

import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Optional

from kedai.database.base import BACKUPS, PRODUCTS, SALES, EntityStore
from kedai.domain.entities import Backup, Snapshot
from kedai.domain.errors import InvalidSnapshot, NotFoundError, backup_not_found
from kedai.domain.snapshot_format import (
    SNAPSHOT_SCHEMA_VERSION,
    dumps,
    loads,
    snapshot_from_document,
)
from kedai.utils.clock import date_key, ms_to_date, now_ms
from kedai.utils.ids import generate_id

logger = logging.getLogger(__name__)


def backup_name(prefix: str, created_at: int) -> str:
    """Return the file-style name of a backup, e.g. ``backup-2024-01-15-1705300000000.json``."""
    return f"{prefix}-{date_key(ms_to_date(created_at))}-{created_at}.json"


def write_snapshot_file(path: str | Path, snapshot: Snapshot) -> Path:
    """Write a snapshot document to ``path`` as UTF-8 JSON."""
    path = Path(path)
    path.write_text(dumps(snapshot), encoding="utf-8")
    return path


def read_snapshot_file(path: str | Path) -> Snapshot:
    """Read and validate a snapshot document.

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidSnapshot: If the file is not a valid snapshot
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Snapshot file not found: {path}")
    return loads(path.read_text(encoding="utf-8-sig"))


class SnapshotService:
    """Service for snapshots of the products and sales collections."""

    def __init__(self, store: EntityStore):
        """Initialize snapshot service.

        Args:
            store: Entity store instance
        """
        self.store = store

    def export(self) -> Snapshot:
        """Read the products and sales collections into a Snapshot.

        Pure read. Records are ordered by id so equal data exports equally.
        """
        products = sorted(self.store.get_all(PRODUCTS), key=lambda p: p.id)
        sales = sorted(self.store.get_all(SALES), key=lambda s: s.id)
        return Snapshot(
            created_at=now_ms(),
            schema_version=SNAPSHOT_SCHEMA_VERSION,
            products=tuple(products),
            sales=tuple(sales),
        )

    def restore(self, snapshot: Snapshot | Mapping[str, Any]) -> None:
        """Replace the products and sales collections with a snapshot.

        The input is fully validated before anything is written. Then the
        products and sales collections are cleared, and every product and
        every sale is written, in that order. Restore replaces, never merges.

        Not atomic across the two collections: a failure midway leaves a mix
        of old and new data. Restore is idempotent, so the fix is to restore
        the same snapshot again.

        Args:
            snapshot: A Snapshot, or a parsed snapshot document

        Raises:
            InvalidSnapshot: If the snapshot is malformed (nothing written)
            StoreUnavailable: If the store fails midway
        """
        if isinstance(snapshot, Mapping):
            snapshot = snapshot_from_document(snapshot)
        elif not isinstance(snapshot, Snapshot):
            raise InvalidSnapshot(f"Cannot restore from {type(snapshot).__name__}")

        logger.warning(
            "Restoring snapshot from %d: replacing all products and sales "
            "(%d product(s), %d sale(s))",
            snapshot.created_at,
            len(snapshot.products),
            len(snapshot.sales),
        )
        self.store.clear(PRODUCTS)
        self.store.clear(SALES)
        for product in snapshot.products:
            self.store.put(PRODUCTS, product)
        for sale in snapshot.sales:
            self.store.put(SALES, sale)
        logger.info("Restore complete")

    def create_backup(self, name: Optional[str] = None, prefix: str = "backup") -> Backup:
        """Export a snapshot and keep it in the local backup history."""
        snapshot = self.export()
        backup = Backup(
            id=generate_id("b"),
            name=name or backup_name(prefix, snapshot.created_at),
            created_at=snapshot.created_at,
            payload=snapshot,
        )
        self.store.put(BACKUPS, backup)
        logger.info(
            "Saved backup %s (%d product(s), %d sale(s))",
            backup.name,
            len(snapshot.products),
            len(snapshot.sales),
        )
        return backup

    def list_backups(self) -> list[Backup]:
        """List backups newest first."""
        return sorted(
            self.store.get_all(BACKUPS), key=lambda b: (b.created_at, b.id), reverse=True
        )

    def get_backup(self, backup_id: str) -> Optional[Backup]:
        """Get backup by ID, or None."""
        return self.store.get(BACKUPS, backup_id)

    def require_backup(self, backup_id: str) -> Backup:
        """Get backup by ID.

        Raises:
            NotFoundError: If the backup doesn't exist
        """
        backup = self.get_backup(backup_id)
        if backup is None:
            raise NotFoundError(backup_not_found(backup_id))
        return backup

    def delete_backup(self, backup_id: str) -> None:
        """Delete a backup from the history.

        Raises:
            NotFoundError: If the backup doesn't exist
        """
        self.require_backup(backup_id)
        self.store.delete(BACKUPS, backup_id)
        logger.info("Deleted backup %s", backup_id)

    def restore_backup(self, backup_id: str) -> Backup:
        """Restore the snapshot held by a stored backup."""
        backup = self.require_backup(backup_id)
        self.restore(backup.payload)
        return backup
