"""Default data for a fresh till."""

from typing import Any

from kedai.database.base import PRODUCTS, EntityStore
from kedai.domain.catalog import CatalogService
from kedai.domain.users import UserService

_DRINKS = [
    "Taro Milk", "Strawberry Milk", "Red Velvet", "Regal Milk", "Oreo Milk",
    "Blueberry Milk", "Cappuccino Milk", "Avocado Milk", "Hazelnut Milk",
    "Choco Milk", "Matcha Milk", "Tiramisu Milk", "Coffee Milk", "Ovaltine Milk",
    "Orange Squash", "Melon Squash", "Manggo Squash", "Lychee Squash",
    "Lemon Tea", "Apple Tea", "Original Tea",
]

# (category, name, price, stock, notes)
SEED_PRODUCTS: list[tuple[str, str, int, int, str | None]] = [
    ("Mie SS", "Mie SS Manis", 12000, 30, "Level 0-15"),
    ("Mie SS", "Mie SS Gurih", 12000, 30, "Level 0-15"),
    ("Mie SS", "Pangsit Goreng", 11000, 25, None),
    ("Mie SS", "Siomay Goreng", 11000, 25, None),
    ("Mie SS", "Siomay Kukus", 11000, 25, None),
    ("Mie SS", "Udang Keju", 11000, 20, None),
    ("Mie SS", "Udang Rambutan", 11000, 20, None),
    ("Mie SS", "Dimsum", 11000, 20, None),
    *[("Minuman", name, 5000, 80, None) for name in _DRINKS],
    ("Camilan", "Tahu Walik", 6000, 40, None),
    ("Camilan", "Cheese Roll", 5000, 40, None),
    ("Camilan", "Corndog Mozarella Jumbo", 5000, 30, None),
    ("Camilan", "Corndog Sosis Jumbo", 5000, 30, None),
    ("Camilan", "Corndog Sosis Mozarella", 5000, 30, None),
    ("Camilan", "Corndog Mozarella Mini", 3000, 60, None),
    ("Camilan", "Corndog Sosis Mini", 3000, 60, None),
]


def seed_defaults(store: EntityStore, products: bool = True) -> dict[str, Any]:
    """Insert the default admin and products into empty collections.

    Returns:
        Dict with ``admin_created`` (bool) and ``products_created`` (int)
    """
    admin = UserService(store).ensure_default_admin()

    created = 0
    if products and not store.get_all(PRODUCTS):
        catalog = CatalogService(store)
        for category, name, price, stock, notes in SEED_PRODUCTS:
            catalog.create_product(name=name, price=price, category=category, stock=stock, notes=notes)
            created += 1

    return {"admin_created": admin is not None, "products_created": created}
