"""In-memory cart for the order being rung up."""

import dataclasses
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from kedai.domain.catalog import CatalogService
from kedai.domain.entities import CartLine
from kedai.domain.errors import NotFoundError, OutOfStock, ValidationError

logger = logging.getLogger(__name__)


class CartState(Enum):
    EMPTY = "empty"
    ACTIVE = "active"
    COMMITTING = "committing"


@dataclass(frozen=True)
class StockClamped:
    """A quantity change asked for more than the stock on hand.

    Informational: the line was set to ``available`` (or removed when that is
    zero) and the cart is still valid.
    """

    product_id: str
    requested: int
    available: int

    def __str__(self) -> str:
        return (
            f"Only {self.available} in stock for {self.product_id} "
            f"(requested {self.requested}); quantity reduced"
        )


class Cart:
    """Pending order lines, at most one per product.

    The cart never writes to the store. Stock is checked against the live
    catalog on every mutation and again by checkout, since it can change
    while the cart is open.
    """

    def __init__(self, catalog: CatalogService):
        self.catalog = catalog
        self._lines: dict[str, CartLine] = {}
        self._committing = False

    @property
    def state(self) -> CartState:
        if self._committing:
            return CartState.COMMITTING
        return CartState.ACTIVE if self._lines else CartState.EMPTY

    @property
    def is_empty(self) -> bool:
        return not self._lines

    def _ensure_mutable(self) -> None:
        if self._committing:
            raise ValidationError("Cart is being checked out and cannot be changed")

    def lines(self) -> tuple[CartLine, ...]:
        """Return the lines in the order they were first added."""
        return tuple(self._lines.values())

    def get_line(self, product_id: str) -> Optional[CartLine]:
        return self._lines.get(product_id)

    def add_item(self, product_id: str) -> CartLine:
        """Add one unit of a product.

        Raises:
            NotFoundError: If the product doesn't exist
            OutOfStock: If the product has no stock, or the line already
                holds all of it
        """
        self._ensure_mutable()
        product = self.catalog.require_product(product_id)
        existing = self._lines.get(product_id)
        wanted = existing.quantity + 1 if existing else 1
        if product.stock <= 0 or wanted > product.stock:
            raise OutOfStock(product_id, wanted, product.stock, name=product.name)

        if existing:
            line = dataclasses.replace(existing, quantity=wanted)
        else:
            line = CartLine(
                product_id=product.id, name=product.name, price=product.price, quantity=1
            )
        self._lines[product_id] = line
        logger.debug("Cart: %s x%d", product_id, line.quantity)
        return line

    def change_quantity(self, product_id: str, delta: int) -> Optional[StockClamped]:
        """Change a line's quantity by ``delta``, clamped to [0, current stock].

        A result of 0 removes the line.

        Returns:
            A StockClamped notice if the request exceeded stock, else None

        Raises:
            NotFoundError: If the product is not in the cart or no longer exists
        """
        self._ensure_mutable()
        line = self._lines.get(product_id)
        if line is None:
            raise NotFoundError(f"Product {product_id} is not in the cart")
        product = self.catalog.require_product(product_id)

        requested = line.quantity + delta
        notice = None
        quantity = max(requested, 0)
        if quantity > product.stock:
            quantity = max(product.stock, 0)
            notice = StockClamped(product_id, requested, quantity)

        if quantity == 0:
            del self._lines[product_id]
        else:
            self._lines[product_id] = dataclasses.replace(line, quantity=quantity)
        return notice

    def remove_item(self, product_id: str) -> None:
        """Remove a product's line entirely."""
        self._ensure_mutable()
        if self._lines.pop(product_id, None) is None:
            raise NotFoundError(f"Product {product_id} is not in the cart")

    def clear(self) -> None:
        """Empty the cart unconditionally."""
        self._lines.clear()
        self._committing = False

    def total(self) -> int:
        """Sum of price * quantity over all lines."""
        return sum(line.subtotal for line in self._lines.values())

    def item_count(self) -> int:
        """Total units across all lines."""
        return sum(line.quantity for line in self._lines.values())

    def begin_commit(self) -> None:
        """Freeze the cart while checkout runs."""
        if not self._lines:
            raise ValidationError("Cart is empty")
        self._ensure_mutable()
        self._committing = True

    def abort_commit(self) -> None:
        """Return a frozen cart to active so the operator can retry."""
        self._committing = False
