"""Shared pytest fixtures for kedai tests."""

import os
import tempfile

import pytest

from kedai.database.factories import create_sqlite_store
from kedai.domain.cart import Cart
from kedai.domain.catalog import CatalogService
from kedai.domain.checkout import CheckoutService
from kedai.domain.snapshot import SnapshotService


@pytest.fixture
def temp_store():
    """Create a temporary SQLite store for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    store = create_sqlite_store(database_path=db_path)
    store.connect()
    store.initialize_schema()

    yield store

    store.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def catalog(temp_store):
    """Create a CatalogService with a temporary store."""
    return CatalogService(temp_store)


@pytest.fixture
def cart(catalog):
    """Create an empty cart over the temporary catalog."""
    return Cart(catalog)


@pytest.fixture
def checkout_service(temp_store, catalog):
    """Create a CheckoutService sharing the catalog fixture."""
    return CheckoutService(temp_store, catalog)


@pytest.fixture
def snapshots(temp_store):
    """Create a SnapshotService with a temporary store."""
    return SnapshotService(temp_store)


@pytest.fixture
def mie(catalog):
    """A product priced 12000 with 10 in stock."""
    return catalog.create_product(name="Mie SS Manis", price=12000, category="Mie SS", stock=10)


@pytest.fixture
def teh(catalog):
    """A product priced 5000 with 3 in stock."""
    return catalog.create_product(name="Lemon Tea", price=5000, category="Minuman", stock=3)


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
