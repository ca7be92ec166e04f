"""Domain model entities for kedai.

These are pure data classes representing business concepts, independent of
database schema. Timestamps are epoch milliseconds so they survive the
snapshot file format unchanged.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Optional


class PaymentMethod(str, Enum):
    """How a sale was paid."""

    CASH = "cash"
    DIGITAL_WALLET = "digital-wallet"
    BANK_TRANSFER = "bank-transfer"


@dataclass(frozen=True)
class Product:
    """Catalog product with its current stock level."""

    id: str
    category: str
    name: str
    price: int
    stock: int
    notes: Optional[str] = None


@dataclass(frozen=True)
class CartLine:
    """Pending quantity of one product in an uncommitted order."""

    product_id: str
    name: str
    price: int
    quantity: int

    @property
    def subtotal(self) -> int:
        return self.price * self.quantity


@dataclass(frozen=True)
class SaleItem:
    """Product fields frozen at the moment of sale."""

    product_id: str
    name: str
    price: int
    quantity: int

    @property
    def subtotal(self) -> int:
        return self.price * self.quantity


@dataclass(frozen=True)
class Sale:
    """Committed sale in the append-only ledger."""

    id: str
    created_at: int
    items: tuple[SaleItem, ...]
    total: int
    amount_paid: int
    change: int
    payment_method: PaymentMethod
    payment_reference: Optional[str] = None


@dataclass(frozen=True)
class Snapshot:
    """Point-in-time copy of the products and sales collections."""

    created_at: int
    schema_version: int
    products: tuple[Product, ...] = field(default_factory=tuple)
    sales: tuple[Sale, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Backup:
    """Named snapshot retained in local history."""

    id: str
    name: str
    created_at: int
    payload: Snapshot


@dataclass(frozen=True)
class Setting:
    """Single key/value configuration entry."""

    key: str
    value: Any


@dataclass(frozen=True)
class User:
    """Operator allowed into admin functions."""

    id: str
    username: str
    pin_hash: str
