"""Sales ledger domain service."""

from datetime import date
from typing import Optional

from kedai.database.base import SALES, EntityStore
from kedai.domain.cart import Cart
from kedai.domain.catalog import CatalogService
from kedai.domain.checkout import CheckoutService
from kedai.domain.entities import PaymentMethod, Sale
from kedai.domain.errors import InsufficientStock, NotFoundError, ValidationError
from kedai.utils.clock import ms_to_date


class SalesService:
    """Read access to the append-only sales ledger, plus single-item sales."""

    def __init__(self, store: EntityStore):
        """Initialize sales service.

        Args:
            store: Entity store instance
        """
        self.store = store
        self.catalog = CatalogService(store)
        self.checkout_service = CheckoutService(store, self.catalog)

    def get_sale(self, sale_id: str) -> Optional[Sale]:
        """Get sale by ID, or None."""
        return self.store.get(SALES, sale_id)

    def require_sale(self, sale_id: str) -> Sale:
        """Get sale by ID.

        Raises:
            NotFoundError: If the sale doesn't exist
        """
        sale = self.get_sale(sale_id)
        if sale is None:
            raise NotFoundError(f"Sale {sale_id} not found")
        return sale

    def list_sales(
        self, start_date: Optional[date] = None, end_date: Optional[date] = None
    ) -> list[Sale]:
        """List sales newest first.

        Args:
            start_date: Optional inclusive start day (local time)
            end_date: Optional inclusive end day (local time)
        """
        sales = self.store.get_all(SALES)
        if start_date is not None:
            sales = [s for s in sales if ms_to_date(s.created_at) >= start_date]
        if end_date is not None:
            sales = [s for s in sales if ms_to_date(s.created_at) <= end_date]
        return sorted(sales, key=lambda s: (s.created_at, s.id), reverse=True)

    def quick_sale(
        self,
        product_id: str,
        quantity: int,
        payment_method: PaymentMethod | str = PaymentMethod.CASH,
    ) -> Sale:
        """Sell ``quantity`` units of one product, paid exactly.

        Runs through a one-line cart and the normal checkout, so the same
        stock rules apply as at the till.

        Raises:
            ValidationError: If quantity is not positive
            NotFoundError: If the product doesn't exist
            InsufficientStock: If stock cannot cover the quantity
        """
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise ValidationError(f"Quantity must be a positive integer, got {quantity!r}")

        cart = Cart(self.catalog)
        cart.add_item(product_id)
        if quantity > 1:
            notice = cart.change_quantity(product_id, quantity - 1)
            if notice is not None:
                line = cart.get_line(product_id)
                raise InsufficientStock(
                    product_id, quantity, notice.available, name=line.name if line else None
                )
        return self.checkout_service.checkout(cart, payment_method=payment_method)
