"""Abstract entity store interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

# Collection names. The set is fixed; new collections are added by bumping
# SCHEMA_VERSION, existing ones are never dropped.
PRODUCTS = "products"
SALES = "sales"
BACKUPS = "backups"
SETTINGS = "settings"
USERS = "users"

# Collection name -> key field of its records
COLLECTIONS: dict[str, str] = {
    PRODUCTS: "id",
    SALES: "id",
    BACKUPS: "id",
    SETTINGS: "key",
    USERS: "id",
}

SCHEMA_VERSION = 2


def require_collection(collection: str) -> str:
    """Return the key field of a declared collection.

    Raises:
        ValueError: If the collection is not part of the schema
    """
    try:
        return COLLECTIONS[collection]
    except KeyError:
        raise ValueError(
            f"Unknown collection '{collection}'. Must be one of: {', '.join(sorted(COLLECTIONS))}"
        ) from None


class EntityStore(ABC):
    """Durable key/value tables over the fixed set of collections.

    Every operation is atomic against the medium: it either completes and is
    visible to the next call, or fails with no partial write. Nothing spans
    more than one collection; callers sequence multi-collection work.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Create missing collections and run pending schema upgrades."""
        pass

    @abstractmethod
    def schema_version(self) -> int:
        """Return the schema version recorded in the database."""
        pass

    @abstractmethod
    def put(self, collection: str, record: Any) -> None:
        """Insert or replace a record, keyed by its key field."""
        pass

    @abstractmethod
    def get(self, collection: str, key: str) -> Optional[Any]:
        """Get a record by key, or None."""
        pass

    @abstractmethod
    def get_all(self, collection: str) -> list[Any]:
        """Get every record of a collection, in unspecified order."""
        pass

    @abstractmethod
    def delete(self, collection: str, key: str) -> None:
        """Delete a record by key. Deleting a missing key is a no-op."""
        pass

    @abstractmethod
    def clear(self, collection: str) -> None:
        """Delete every record of a collection."""
        pass
