"""Catalog domain service."""

import dataclasses
import logging
from typing import Optional

from kedai.database.base import PRODUCTS, EntityStore
from kedai.domain.entities import Product
from kedai.domain.errors import (
    InsufficientStock,
    NotFoundError,
    ValidationError,
    product_not_found,
)
from kedai.utils.ids import generate_id

logger = logging.getLogger(__name__)

LOW_STOCK_THRESHOLD = 5


def _validate_int(value, field: str, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"Product {field} must be an integer, got {value!r}")
    if value < minimum:
        if minimum == 1:
            raise ValidationError(f"Product {field} must be greater than 0")
        raise ValidationError(f"Product {field} cannot be negative")
    return value


def _validate_name(name: Optional[str]) -> str:
    name = (name or "").strip()
    if not name:
        raise ValidationError("Product name cannot be empty")
    return name


class CatalogService:
    """Service for managing the product catalog."""

    def __init__(self, store: EntityStore):
        """Initialize catalog service.

        Args:
            store: Entity store instance
        """
        self.store = store

    def create_product(
        self,
        name: str,
        price: int,
        category: str = "",
        stock: int = 0,
        notes: Optional[str] = None,
    ) -> Product:
        """Create a new product.

        Args:
            name: Product name
            price: Price in the minor currency unit, must be greater than 0
            category: Category label
            stock: Initial stock, defaults to 0
            notes: Optional free-text notes

        Returns:
            The created product, with a freshly generated id

        Raises:
            ValidationError: If name is empty, price <= 0 or stock is negative
        """
        product = Product(
            id=generate_id("p"),
            category=(category or "").strip(),
            name=_validate_name(name),
            price=_validate_int(price, "price", 1),
            stock=_validate_int(stock, "stock", 0),
            notes=notes or None,
        )
        self.store.put(PRODUCTS, product)
        logger.info("Created product %s (%s)", product.id, product.name)
        return product

    def get_product(self, product_id: str) -> Optional[Product]:
        """Get product by ID, or None if not found."""
        return self.store.get(PRODUCTS, product_id)

    def require_product(self, product_id: str) -> Product:
        """Get product by ID.

        Raises:
            NotFoundError: If product doesn't exist
        """
        product = self.get_product(product_id)
        if product is None:
            raise NotFoundError(product_not_found(product_id))
        return product

    def update_product(
        self,
        product_id: str,
        *,
        category: Optional[str] = None,
        name: Optional[str] = None,
        price: Optional[int] = None,
        stock: Optional[int] = None,
        notes: Optional[str] = None,
        clear_notes: bool = False,
    ) -> Product:
        """Update product fields. The id never changes.

        Args:
            clear_notes: If True, remove notes even when ``notes`` is None

        Raises:
            NotFoundError: If product doesn't exist
            ValidationError: If a new value is invalid
        """
        product = self.require_product(product_id)

        changes = {}
        if category is not None:
            changes["category"] = category.strip()
        if name is not None:
            changes["name"] = _validate_name(name)
        if price is not None:
            changes["price"] = _validate_int(price, "price", 1)
        if stock is not None:
            changes["stock"] = _validate_int(stock, "stock", 0)
        if clear_notes:
            changes["notes"] = None
        elif notes is not None:
            changes["notes"] = notes or None

        updated = dataclasses.replace(product, **changes)
        self.store.put(PRODUCTS, updated)
        logger.info("Updated product %s: %s", product_id, ", ".join(sorted(changes)) or "no changes")
        return updated

    def delete_product(self, product_id: str) -> None:
        """Delete a product.

        Historical sales keep their own copy of the product fields, so there
        is no referential check.

        Raises:
            NotFoundError: If product doesn't exist
        """
        self.require_product(product_id)
        self.store.delete(PRODUCTS, product_id)
        logger.info("Deleted product %s", product_id)

    def adjust_stock(self, product_id: str, delta: int) -> Product:
        """Apply a stock change (positive to restock, negative to sell).

        Raises:
            NotFoundError: If product doesn't exist
            InsufficientStock: If the result would be negative; stock is unchanged
        """
        if isinstance(delta, bool) or not isinstance(delta, int):
            raise ValidationError(f"Stock delta must be an integer, got {delta!r}")
        product = self.require_product(product_id)
        new_stock = product.stock + delta
        if new_stock < 0:
            raise InsufficientStock(product_id, -delta, product.stock, name=product.name)

        updated = dataclasses.replace(product, stock=new_stock)
        self.store.put(PRODUCTS, updated)
        logger.debug("Stock of %s: %d -> %d", product_id, product.stock, new_stock)
        return updated

    def restock(self, product_id: str, quantity: int) -> Product:
        """Add received units to a product's stock.

        Raises:
            ValidationError: If quantity is not a positive integer
            NotFoundError: If product doesn't exist
        """
        _validate_int(quantity, "restock quantity", 1)
        product = self.adjust_stock(product_id, quantity)
        logger.info("Restocked %s by %d (now %d)", product_id, quantity, product.stock)
        return product

    def list_products(
        self, category: Optional[str] = None, search: Optional[str] = None
    ) -> list[Product]:
        """List products sorted by category then name.

        Args:
            category: Optional exact category filter
            search: Optional case-insensitive substring of the name
        """
        products = self.store.get_all(PRODUCTS)
        if category is not None:
            products = [p for p in products if p.category == category]
        if search:
            needle = search.strip().lower()
            products = [p for p in products if needle in p.name.lower()]
        return sorted(products, key=lambda p: (p.category.lower(), p.name.lower(), p.id))

    def categories(self) -> set[str]:
        """Derive the set of categories in use from the products themselves."""
        return {p.category for p in self.store.get_all(PRODUCTS) if p.category}

    def find_by_name(self, name: str) -> Optional[Product]:
        """Find a product by case-insensitive name."""
        wanted = name.strip().lower()
        for product in self.store.get_all(PRODUCTS):
            if product.name.lower() == wanted:
                return product
        return None

    def low_stock(self, threshold: int = LOW_STOCK_THRESHOLD) -> list[Product]:
        """List products whose stock is below ``threshold``, lowest first."""
        products = [p for p in self.store.get_all(PRODUCTS) if p.stock < threshold]
        return sorted(products, key=lambda p: (p.stock, p.name.lower()))
