"""Snapshot document format.

A snapshot document is the JSON-compatible form of a ``Snapshot``::

    {
      "createdAt": 1718000000000,
      "schemaVersion": 2,
      "products": [{"id", "category", "name", "price", "stock", "notes"}],
      "sales": [{"id", "createdAt", "items": [{"productId", "name", "price",
                 "quantity"}], "total", "amountPaid", "change",
                 "paymentMethod", "paymentReference"}]
    }

Keys are always emitted in this order so that a document written by
``dumps`` and read back by ``loads`` serializes to the same bytes again.
"""

import json
from collections.abc import Mapping, Sequence
from typing import Any

from kedai.domain.entities import PaymentMethod, Product, Sale, SaleItem, Snapshot
from kedai.domain.errors import InvalidSnapshot

SNAPSHOT_SCHEMA_VERSION = 2

# Largest value a SQLite INTEGER column holds
MAX_INTEGER = 2**63 - 1


def product_to_document(product: Product) -> dict[str, Any]:
    return {
        "id": product.id,
        "category": product.category,
        "name": product.name,
        "price": product.price,
        "stock": product.stock,
        "notes": product.notes,
    }


def sale_item_to_document(item: SaleItem) -> dict[str, Any]:
    return {
        "productId": item.product_id,
        "name": item.name,
        "price": item.price,
        "quantity": item.quantity,
    }


def sale_to_document(sale: Sale) -> dict[str, Any]:
    return {
        "id": sale.id,
        "createdAt": sale.created_at,
        "items": [sale_item_to_document(item) for item in sale.items],
        "total": sale.total,
        "amountPaid": sale.amount_paid,
        "change": sale.change,
        "paymentMethod": sale.payment_method.value,
        "paymentReference": sale.payment_reference,
    }


def snapshot_to_document(snapshot: Snapshot) -> dict[str, Any]:
    """Convert a Snapshot to its document form."""
    return {
        "createdAt": snapshot.created_at,
        "schemaVersion": snapshot.schema_version,
        "products": [product_to_document(p) for p in snapshot.products],
        "sales": [sale_to_document(s) for s in snapshot.sales],
    }


def _is_sequence(value: Any) -> bool:
    return isinstance(value, Sequence) and not isinstance(value, (str, bytes))


def _require(doc: Mapping, field: str, kind: type | tuple[type, ...], where: str) -> Any:
    if field not in doc:
        raise InvalidSnapshot(f"{where}: missing field '{field}'")
    value = doc[field]
    # bool is an int subclass but never a valid count or price
    if isinstance(value, bool) and kind is int:
        raise InvalidSnapshot(f"{where}: field '{field}' must be an integer")
    if not isinstance(value, kind):
        raise InvalidSnapshot(f"{where}: field '{field}' has invalid type {type(value).__name__}")
    return value


def _require_int(doc: Mapping, field: str, where: str, minimum: int = 0) -> int:
    value = _require(doc, field, int, where)
    if value < minimum:
        raise InvalidSnapshot(f"{where}: field '{field}' must be at least {minimum}, got {value}")
    if value > MAX_INTEGER:
        raise InvalidSnapshot(f"{where}: field '{field}' is too large")
    return value


def _optional_str(doc: Mapping, field: str, where: str) -> str | None:
    value = doc.get(field)
    if value is not None and not isinstance(value, str):
        raise InvalidSnapshot(f"{where}: field '{field}' must be a string or null")
    return value


def product_from_document(doc: Any, where: str = "product") -> Product:
    if not isinstance(doc, Mapping):
        raise InvalidSnapshot(f"{where}: expected an object")
    return Product(
        id=_require(doc, "id", str, where),
        category=_optional_str(doc, "category", where) or "",
        name=_require(doc, "name", str, where),
        price=_require_int(doc, "price", where),
        stock=_require_int(doc, "stock", where),
        notes=_optional_str(doc, "notes", where),
    )


def sale_item_from_document(doc: Any, where: str) -> SaleItem:
    if not isinstance(doc, Mapping):
        raise InvalidSnapshot(f"{where}: expected an object")
    return SaleItem(
        product_id=_require(doc, "productId", str, where),
        name=_require(doc, "name", str, where),
        price=_require_int(doc, "price", where),
        quantity=_require_int(doc, "quantity", where, minimum=1),
    )


def sale_from_document(doc: Any, where: str = "sale") -> Sale:
    if not isinstance(doc, Mapping):
        raise InvalidSnapshot(f"{where}: expected an object")
    items = _require(doc, "items", (list, tuple), where)
    try:
        method = PaymentMethod(doc.get("paymentMethod", PaymentMethod.CASH.value))
    except ValueError:
        raise InvalidSnapshot(f"{where}: unknown payment method {doc.get('paymentMethod')!r}") from None
    return Sale(
        id=_require(doc, "id", str, where),
        created_at=_require_int(doc, "createdAt", where),
        items=tuple(
            sale_item_from_document(item, f"{where} item {i}") for i, item in enumerate(items)
        ),
        total=_require_int(doc, "total", where),
        amount_paid=_require_int(doc, "amountPaid", where),
        change=_require_int(doc, "change", where),
        payment_method=method,
        payment_reference=_optional_str(doc, "paymentReference", where),
    )


def snapshot_from_document(doc: Any) -> Snapshot:
    """Validate a snapshot document and convert it to a Snapshot.

    ``products`` is required and must be a list; ``sales`` defaults to empty.

    Raises:
        InvalidSnapshot: If any part of the document is malformed
    """
    if not isinstance(doc, Mapping):
        raise InvalidSnapshot("Snapshot must be an object")
    products = doc.get("products")
    if products is None or not _is_sequence(products):
        raise InvalidSnapshot("Snapshot 'products' is missing or is not a list")
    sales = doc.get("sales")
    if sales is None:
        sales = []
    elif not _is_sequence(sales):
        raise InvalidSnapshot("Snapshot 'sales' is not a list")

    created_at = doc.get("createdAt", 0)
    schema_version = doc.get("schemaVersion", SNAPSHOT_SCHEMA_VERSION)
    if not isinstance(created_at, int) or not isinstance(schema_version, int):
        raise InvalidSnapshot("Snapshot 'createdAt' and 'schemaVersion' must be integers")

    return Snapshot(
        created_at=created_at,
        schema_version=schema_version,
        products=tuple(product_from_document(p, f"product {i}") for i, p in enumerate(products)),
        sales=tuple(sale_from_document(s, f"sale {i}") for i, s in enumerate(sales)),
    )


def dumps(snapshot: Snapshot) -> str:
    """Serialize a Snapshot to JSON text."""
    return json.dumps(snapshot_to_document(snapshot), indent=2, ensure_ascii=False) + "\n"


def loads(text: str) -> Snapshot:
    """Parse JSON text into a validated Snapshot.

    Raises:
        InvalidSnapshot: If the text is not JSON or not a valid snapshot
    """
    try:
        doc = json.loads(text)
    except json.JSONDecodeError as e:
        raise InvalidSnapshot(f"Snapshot is not valid JSON: {e}") from None
    return snapshot_from_document(doc)
