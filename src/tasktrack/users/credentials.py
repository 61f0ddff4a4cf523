# src/tasktrack/users/credentials.py

from __future__ import annotations

import base64
import hashlib

import bcrypt


class BcryptHasher:
    """
    Salted bcrypt hashing for login secrets.

    bcrypt only looks at the first 72 bytes of its input, so the secret is
    SHA-256 digested and base64 encoded first (44 bytes, no NUL bytes).
    """

    def __init__(self, rounds: int = 12) -> None:
        self._rounds = int(rounds)

    @staticmethod
    def _prepare(secret: str) -> bytes:
        return base64.b64encode(hashlib.sha256(secret.encode("utf-8")).digest())

    def hash(self, secret: str) -> str:
        salt = bcrypt.gensalt(rounds=self._rounds)
        return bcrypt.hashpw(self._prepare(secret), salt).decode("ascii")

    def verify(self, secret: str, hashed: str) -> bool:
        if not hashed:
            return False
        try:
            return bcrypt.checkpw(self._prepare(secret), hashed.encode("ascii"))
        except ValueError:
            # malformed stored hash
            return False
