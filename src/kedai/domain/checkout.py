"""Checkout: turning a cart into a recorded sale.

The store has no transaction spanning the products and sales collections,
so the commit runs as a fixed sequence:

1. validate every line against live stock (no writes yet)
2. resolve payment (total, amount paid, change)
3. decrement stock line by line, in cart order
4. write the sale
5. clear the cart

A failure in step 3 or 4 after at least one decrement cannot be undone
safely and is raised as ``PartialCommitFailure``. With a medium that offers
multi-table transactions, steps 3 and 4 belong in one transaction.
"""

import logging
from typing import Optional

from kedai.database.base import SALES, EntityStore
from kedai.domain.cart import Cart
from kedai.domain.catalog import CatalogService
from kedai.domain.entities import PaymentMethod, Sale, SaleItem
from kedai.domain.errors import (
    DomainError,
    InsufficientStock,
    PartialCommitFailure,
    StoreError,
    UnderPayment,
    ValidationError,
)
from kedai.utils.clock import now_ms
from kedai.utils.ids import generate_id

logger = logging.getLogger(__name__)


def resolve_payment_method(value: PaymentMethod | str) -> PaymentMethod:
    """Coerce a payment method name to the enum.

    Raises:
        ValidationError: If the name is not a known method
    """
    try:
        return PaymentMethod(value)
    except ValueError:
        valid = ", ".join(m.value for m in PaymentMethod)
        raise ValidationError(f"Unknown payment method '{value}'. Must be one of: {valid}") from None


class CheckoutService:
    """Service committing carts as sales."""

    def __init__(self, store: EntityStore, catalog: Optional[CatalogService] = None):
        """Initialize checkout service.

        Args:
            store: Entity store instance
            catalog: Catalog service sharing the same store (created if omitted)
        """
        self.store = store
        self.catalog = catalog if catalog is not None else CatalogService(store)

    def _validate_stock(self, cart: Cart) -> None:
        for line in cart.lines():
            product = self.catalog.get_product(line.product_id)
            available = product.stock if product is not None else 0
            if available < line.quantity:
                raise InsufficientStock(line.product_id, line.quantity, available, name=line.name)

    def _resolve_payment(
        self, total: int, method: PaymentMethod, amount_paid: Optional[int]
    ) -> tuple[int, int]:
        if method is not PaymentMethod.CASH:
            # Non-cash payments are always exact
            return total, 0
        paid = total if amount_paid is None else amount_paid
        if isinstance(paid, bool) or not isinstance(paid, int) or paid < 0:
            raise ValidationError(f"Amount paid must be a non-negative integer, got {paid!r}")
        if paid < total:
            raise UnderPayment(total, paid)
        return paid, paid - total

    def checkout(
        self,
        cart: Cart,
        payment_method: PaymentMethod | str = PaymentMethod.CASH,
        amount_paid: Optional[int] = None,
        payment_reference: Optional[str] = None,
    ) -> Sale:
        """Commit the cart as a sale.

        Args:
            cart: Cart to commit; emptied only after the sale is written
            payment_method: cash, digital-wallet or bank-transfer
            amount_paid: Cash tendered; None means exact payment. Ignored
                for non-cash methods.
            payment_reference: Optional free-text payment reference

        Returns:
            The recorded sale

        Raises:
            ValidationError: If the cart is empty or the payment input is invalid
            InsufficientStock: If a line exceeds live stock (nothing written)
            UnderPayment: If cash tendered is below the total (nothing written)
            StoreUnavailable: If the store fails before any stock was changed
            PartialCommitFailure: If the store fails after stock was changed
        """
        method = resolve_payment_method(payment_method)
        cart.begin_commit()
        try:
            self._validate_stock(cart)

            lines = cart.lines()
            total = cart.total()
            paid, change = self._resolve_payment(total, method, amount_paid)
            sale = Sale(
                id=generate_id("s"),
                created_at=now_ms(),
                items=tuple(
                    SaleItem(
                        product_id=line.product_id,
                        name=line.name,
                        price=line.price,
                        quantity=line.quantity,
                    )
                    for line in lines
                ),
                total=total,
                amount_paid=paid,
                change=change,
                payment_method=method,
                payment_reference=(payment_reference or "").strip() or None,
            )

            applied: list[tuple[str, int]] = []
            try:
                for line in lines:
                    self.catalog.adjust_stock(line.product_id, -line.quantity)
                    applied.append((line.product_id, line.quantity))
                self.store.put(SALES, sale)
            except (DomainError, StoreError) as e:
                if not applied:
                    raise
                logger.error(
                    "Sale %s not recorded after decrementing stock %s: %s", sale.id, applied, e
                )
                raise PartialCommitFailure(sale, applied) from e
        except Exception:
            cart.abort_commit()
            raise

        cart.clear()
        logger.info(
            "Recorded sale %s: %d item(s), total %d, paid %d via %s",
            sale.id,
            len(sale.items),
            sale.total,
            sale.amount_paid,
            sale.payment_method.value,
        )
        return sale
