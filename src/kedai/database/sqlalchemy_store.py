"""SQLAlchemy implementation of the entity store."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Optional

from sqlalchemy import inspect, text
from sqlalchemy.engine import Connection
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from kedai.database.base import (
    BACKUPS,
    PRODUCTS,
    SALES,
    SCHEMA_VERSION,
    SETTINGS,
    USERS,
    EntityStore,
    require_collection,
)
from kedai.database.models import (
    Base,
    BackupRecord,
    ProductRecord,
    SaleRecord,
    SchemaInfo,
    SettingRecord,
    UserRecord,
    create_session_factory,
)
from kedai.database import mappers
from kedai.domain import entities as domain
from kedai.domain.errors import StoreUnavailable, WriteConflict

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class _Table:
    entity: type
    model: type
    to_domain: Callable[[Any], Any]
    to_record: Callable[[Any], Any]


_TABLES: dict[str, _Table] = {
    PRODUCTS: _Table(domain.Product, ProductRecord, mappers.product_to_domain, mappers.product_to_record),
    SALES: _Table(domain.Sale, SaleRecord, mappers.sale_to_domain, mappers.sale_to_record),
    BACKUPS: _Table(domain.Backup, BackupRecord, mappers.backup_to_domain, mappers.backup_to_record),
    SETTINGS: _Table(domain.Setting, SettingRecord, mappers.setting_to_domain, mappers.setting_to_record),
    USERS: _Table(domain.User, UserRecord, mappers.user_to_domain, mappers.user_to_record),
}


def _add_products_category_index(conn: Connection) -> None:
    # Databases created at version 1 have the products table without it
    conn.execute(text("CREATE INDEX IF NOT EXISTS ix_products_category ON products (category)"))


# Schema version -> upgrade step bringing the previous version up to it.
# Missing tables are created before the steps run.
UPGRADES: dict[int, Callable[[Connection], None]] = {
    2: _add_products_category_index,
}


class SQLAlchemyEntityStore(EntityStore):
    """SQLAlchemy-based implementation of EntityStore.

    Each operation runs in its own short-lived session and commits exactly
    once, so a failed write is rolled back in full and a background thread
    never shares a session with the caller.
    """

    def __init__(self, database_url: str, database_path: Optional[str] = None):
        """Initialize SQLAlchemy store.

        Args:
            database_url: SQLAlchemy database URL (e.g., 'sqlite:///path/to.db')
            database_path: Filesystem path of the database file, if it has one
        """
        self.database_url = database_url
        self.database_path = database_path
        self.session_factory = create_session_factory(database_url)
        self.engine = self.session_factory.kw["bind"]

    @contextmanager
    def _session(self) -> Iterator[Session]:
        """Yield a session that commits on success and rolls back on failure."""
        session = self.session_factory()
        try:
            yield session
            session.commit()
        except IntegrityError as e:
            session.rollback()
            raise WriteConflict(f"Write rejected by the database: {e.orig}") from e
        except SQLAlchemyError as e:
            session.rollback()
            raise StoreUnavailable(f"Database operation failed: {e}") from e
        finally:
            session.close()

    def _table(self, collection: str) -> _Table:
        require_collection(collection)
        return _TABLES[collection]

    def connect(self) -> None:
        """Verify the database can be opened."""
        try:
            with self.engine.connect():
                pass
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Cannot open database {self.database_url}: {e}") from e

    def disconnect(self) -> None:
        """Release pooled connections."""
        self.engine.dispose()

    def initialize_schema(self) -> None:
        """Create missing tables and apply pending upgrades. Never drops tables."""
        try:
            existing = set(inspect(self.engine).get_table_names())
            Base.metadata.create_all(self.engine)
            with self.engine.begin() as conn:
                row = conn.execute(text("SELECT version FROM schema_info WHERE id = 1")).first()
                if row is not None:
                    current = row[0]
                elif PRODUCTS in existing:
                    current = 1
                else:
                    current = SCHEMA_VERSION

                for version in sorted(UPGRADES):
                    if current < version <= SCHEMA_VERSION:
                        logger.info("Upgrading database schema to version %d", version)
                        UPGRADES[version](conn)

                if row is None:
                    conn.execute(
                        SchemaInfo.__table__.insert().values(id=1, version=SCHEMA_VERSION)
                    )
                elif current != SCHEMA_VERSION:
                    conn.execute(
                        SchemaInfo.__table__.update()
                        .where(SchemaInfo.__table__.c.id == 1)
                        .values(version=SCHEMA_VERSION)
                    )
        except SQLAlchemyError as e:
            raise StoreUnavailable(f"Cannot initialize database schema: {e}") from e

    def schema_version(self) -> int:
        """Return the schema version recorded in the database (0 if none)."""
        with self._session() as session:
            info = session.get(SchemaInfo, 1)
            return info.version if info is not None else 0

    def put(self, collection: str, record: Any) -> None:
        """Insert or replace a record."""
        table = self._table(collection)
        if not isinstance(record, table.entity):
            raise TypeError(
                f"Collection '{collection}' stores {table.entity.__name__} records, "
                f"got {type(record).__name__}"
            )
        with self._session() as session:
            session.merge(table.to_record(record))

    def get(self, collection: str, key: str) -> Optional[Any]:
        """Get a record by key."""
        table = self._table(collection)
        with self._session() as session:
            row = session.get(table.model, key)
            if row is None:
                return None
            return table.to_domain(row)

    def get_all(self, collection: str) -> list[Any]:
        """Get all records of a collection."""
        table = self._table(collection)
        with self._session() as session:
            return [table.to_domain(row) for row in session.query(table.model).all()]

    def delete(self, collection: str, key: str) -> None:
        """Delete a record by key."""
        table = self._table(collection)
        with self._session() as session:
            row = session.get(table.model, key)
            if row is not None:
                session.delete(row)

    def clear(self, collection: str) -> None:
        """Delete all records of a collection."""
        table = self._table(collection)
        with self._session() as session:
            deleted = session.query(table.model).delete()
        logger.debug("Cleared %d record(s) from %s", deleted, collection)
