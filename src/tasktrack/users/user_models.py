# src/tasktrack/users/user_models.py

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class User:
    id: int
    name: str
    # bcrypt hash, never the plaintext secret
    credential_hash: str = field(repr=False)
    created_at: float = 0.0
