# src/tasktrack/users/auth_service.py

from __future__ import annotations

"""
Authentication service: registration and login.

- usernames are unique, exact and case-sensitive
- unknown user and wrong password fail with the same AuthenticationError
- store failures propagate unchanged (no retries)
"""

import logging

from ..core.errors import AuthenticationError, DuplicateIdentityError, ValidationError
from ..core.ports import CredentialHasher, IdentityStore
from .user_models import User

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, identities: IdentityStore, hasher: CredentialHasher) -> None:
        self._identities = identities
        self._hasher = hasher
        # Checked against for unknown names.
        self._dummy_hash = hasher.hash("tasktrack-dummy-secret")

    def register(self, name: str, credential: str) -> User:
        if not name or not name.strip():
            raise ValidationError("Username cannot be empty")
        if not credential or not credential.strip():
            raise ValidationError("Password cannot be empty")

        if self._identities.find_by_name(name) is not None:
            logger.debug("Registration rejected: name taken")
            raise DuplicateIdentityError()

        user = self._identities.create_user(name, self._hasher.hash(credential))
        logger.info("Registered user id=%s", user.id)
        return user

    def authenticate(self, name: str, credential: str) -> User:
        user = self._identities.find_by_name(name or "")
        if user is None:
            self._hasher.verify(credential or "", self._dummy_hash)
            logger.debug("Login rejected")
            raise AuthenticationError()

        if not self._hasher.verify(credential or "", user.credential_hash):
            logger.debug("Login rejected")
            raise AuthenticationError()

        logger.info("User id=%s logged in", user.id)
        return user

    def resolve(self, name: str) -> User:
        """Look up another user by exact name (used to pick a reassignment target)."""
        user = self._identities.find_by_name(name or "")
        if user is None:
            raise ValidationError(f"No such user: {name}")
        return user

