"""User domain service (operator PIN login)."""

import dataclasses
import hashlib
import hmac
import logging
from typing import Optional

from kedai.database.base import USERS, EntityStore
from kedai.domain.entities import User
from kedai.domain.errors import (
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)
from kedai.utils.ids import generate_id

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_ID = "admin-default"
DEFAULT_ADMIN_USERNAME = "admin"
DEFAULT_ADMIN_PIN = "1234"
MIN_PIN_LENGTH = 4


def hash_pin(pin: str) -> str:
    """Return the SHA-256 hex digest stored in place of a PIN."""
    return hashlib.sha256(pin.encode("utf-8")).hexdigest()


def _validate_pin(pin: str) -> str:
    pin = (pin or "").strip()
    if len(pin) < MIN_PIN_LENGTH:
        raise ValidationError(f"PIN must be at least {MIN_PIN_LENGTH} characters")
    return pin


class UserService:
    """Service for operators and their PINs."""

    def __init__(self, store: EntityStore):
        """Initialize user service.

        Args:
            store: Entity store instance
        """
        self.store = store

    def list_users(self) -> list[User]:
        """List users sorted by username."""
        return sorted(self.store.get_all(USERS), key=lambda u: u.username)

    def get_user_by_username(self, username: str) -> Optional[User]:
        """Find a user by exact username."""
        for user in self.store.get_all(USERS):
            if user.username == username:
                return user
        return None

    def create_user(self, username: str, pin: str, user_id: Optional[str] = None) -> User:
        """Create a user.

        Raises:
            ValidationError: If username is empty or the PIN is too short
            ConflictError: If the username is taken
        """
        username = (username or "").strip()
        if not username:
            raise ValidationError("Username cannot be empty")
        if self.get_user_by_username(username) is not None:
            raise ConflictError(f"User '{username}' already exists")
        user = User(id=user_id or generate_id("u"), username=username, pin_hash=hash_pin(_validate_pin(pin)))
        self.store.put(USERS, user)
        logger.info("Created user %s", username)
        return user

    def ensure_default_admin(self) -> Optional[User]:
        """Create the default admin when no users exist.

        Returns:
            The created admin, or None if users already existed
        """
        if self.store.get_all(USERS):
            return None
        return self.create_user(DEFAULT_ADMIN_USERNAME, DEFAULT_ADMIN_PIN, user_id=DEFAULT_ADMIN_ID)

    def authenticate(self, username: str, pin: str) -> User:
        """Check a username/PIN pair.

        Raises:
            AuthenticationError: If the pair doesn't match a user
        """
        user = self.get_user_by_username((username or "").strip())
        if user is None or not hmac.compare_digest(user.pin_hash, hash_pin((pin or "").strip())):
            logger.warning("Failed login for %r", username)
            raise AuthenticationError("Invalid username or PIN")
        return user

    def change_pin(self, user_id: str, new_pin: str) -> User:
        """Replace a user's PIN.

        Raises:
            NotFoundError: If the user doesn't exist
            ValidationError: If the PIN is too short
        """
        user = self.store.get(USERS, user_id)
        if user is None:
            raise NotFoundError(f"User {user_id} not found")
        updated = dataclasses.replace(user, pin_hash=hash_pin(_validate_pin(new_pin)))
        self.store.put(USERS, updated)
        logger.info("Changed PIN for %s", user.username)
        return updated
