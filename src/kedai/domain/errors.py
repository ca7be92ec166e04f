"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class AuthenticationError(DomainError):
    """Username/PIN pair did not match a known user."""


class InsufficientStock(DomainError):
    """A stock decrement or sale would take a product below zero."""

    def __init__(self, product_id: str, requested: int, available: int, name: str | None = None):
        self.product_id = product_id
        self.requested = requested
        self.available = available
        self.name = name
        super().__init__(insufficient_stock(product_id, requested, available, name))

    @property
    def shortfall(self) -> int:
        return self.requested - self.available


class OutOfStock(InsufficientStock):
    """Adding one more unit to the cart would exceed the available stock."""


class UnderPayment(DomainError):
    """Cash tendered is less than the sale total."""

    def __init__(self, total: int, amount_paid: int):
        self.total = total
        self.amount_paid = amount_paid
        super().__init__(
            f"Amount paid {amount_paid} is less than total {total} (short by {total - amount_paid})"
        )

    @property
    def shortfall(self) -> int:
        return self.total - self.amount_paid


class InvalidSnapshot(DomainError):
    """Snapshot document is malformed and cannot be restored."""


class StoreError(Exception):
    """Base class for durable-medium failures."""


class StoreUnavailable(StoreError):
    """The database could not be opened, read or written."""


class WriteConflict(StoreError):
    """A write violated a uniqueness or integrity constraint."""


class PartialCommitFailure(Exception):
    """Checkout decremented stock but did not record the sale.

    Retrying the checkout would decrement stock twice, so callers must alert
    an operator to reconcile ``applied`` by hand.
    """

    def __init__(self, sale, applied: list[tuple[str, int]]):
        self.sale = sale
        self.applied = list(applied)
        decrements = ", ".join(f"{pid} x{qty}" for pid, qty in self.applied)
        super().__init__(
            f"Checkout of sale {sale.id} failed after stock was decremented ({decrements}); "
            "no sale was recorded. Reconcile stock manually, do not retry."
        )


def product_not_found(product_id: str) -> str:
    """Return message for missing product."""
    return f"Product {product_id} not found"


def backup_not_found(backup_id: str) -> str:
    """Return message for missing backup."""
    return f"Backup {backup_id} not found"


def insufficient_stock(
    product_id: str, requested: int, available: int, name: str | None = None
) -> str:
    """Return message when a product cannot cover the requested quantity."""
    label = f"'{name}' ({product_id})" if name else product_id
    return (
        f"Insufficient stock for {label}: requested {requested}, "
        f"available {available}"
    )
