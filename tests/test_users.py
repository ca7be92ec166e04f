"""Tests for user service and seeding."""

import pytest

from kedai.database.base import PRODUCTS
from kedai.domain.errors import AuthenticationError, ConflictError, ValidationError
from kedai.domain.seed import SEED_PRODUCTS, seed_defaults
from kedai.domain.users import DEFAULT_ADMIN_ID, UserService, hash_pin


@pytest.fixture
def users(temp_store):
    return UserService(temp_store)


def test_pin_is_stored_hashed(users):
    user = users.create_user("kasir", "5678")

    assert user.pin_hash == hash_pin("5678")
    assert user.pin_hash != "5678"


def test_authenticate(users):
    users.create_user("kasir", "5678")

    assert users.authenticate("kasir", "5678").username == "kasir"
    with pytest.raises(AuthenticationError):
        users.authenticate("kasir", "0000")
    with pytest.raises(AuthenticationError):
        users.authenticate("nobody", "5678")


def test_duplicate_username(users):
    users.create_user("kasir", "5678")

    with pytest.raises(ConflictError):
        users.create_user("kasir", "9999")


def test_short_pin_rejected(users):
    with pytest.raises(ValidationError):
        users.create_user("kasir", "12")


def test_change_pin(users):
    user = users.create_user("kasir", "5678")

    users.change_pin(user.id, "8765")

    users.authenticate("kasir", "8765")
    with pytest.raises(AuthenticationError):
        users.authenticate("kasir", "5678")


def test_default_admin_created_once(users):
    admin = users.ensure_default_admin()

    assert admin.id == DEFAULT_ADMIN_ID
    assert users.authenticate("admin", "1234") == admin
    assert users.ensure_default_admin() is None


def test_seed_defaults(temp_store):
    result = seed_defaults(temp_store)

    assert result == {"admin_created": True, "products_created": len(SEED_PRODUCTS)}
    assert len(temp_store.get_all(PRODUCTS)) == len(SEED_PRODUCTS)

    again = seed_defaults(temp_store)
    assert again == {"admin_created": False, "products_created": 0}


def test_seed_skips_non_empty_catalog(temp_store, mie):
    result = seed_defaults(temp_store)

    assert result["products_created"] == 0
    assert len(temp_store.get_all(PRODUCTS)) == 1
