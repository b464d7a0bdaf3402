"""Admin user accounts."""

from __future__ import annotations

import logging

from app.adapters.storage.base import AbstractDocumentStore, Document
from app.core.auth import ADMIN_ROLE, fingerprint, hash_password, verify_password
from app.services.content_service import utc_now_iso

logger = logging.getLogger(__name__)


class UserService:
    """Creates admin accounts and checks login credentials."""

    collection = "users"

    def __init__(self, store: AbstractDocumentStore) -> None:
        self.store = store

    def get_by_email(self, email: str) -> Document | None:
        return self.store.find_one(self.collection, "email", email.strip().lower())

    def create_admin(self, email: str, password: str) -> Document:
        """Create an admin, or reset the password of an existing one."""
        email = email.strip().lower()
        doc = self.store.update(
            self.collection,
            "email",
            email,
            {
                "password_hash": hash_password(password),
                "role": ADMIN_ROLE,
                "created_at": utc_now_iso(),
            },
            upsert=True,
        )
        logger.info("auth.admin_saved", extra={"user_hash": fingerprint(email)})
        return doc

    def ensure_admin(self, email: str, password: str) -> Document:
        """Create the bootstrap admin unless an account already exists."""
        existing = self.get_by_email(email)
        if existing is not None:
            return existing
        return self.create_admin(email, password)

    def authenticate(self, email: str, password: str) -> Document | None:
        """Return the user when the credentials match, else None."""
        user = self.get_by_email(email)
        if user is None or not verify_password(password, user.get("password_hash", "")):
            logger.warning("auth.login_failed", extra={"user_hash": fingerprint(email)})
            return None
        return user
