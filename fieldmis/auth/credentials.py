from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Protocol

from werkzeug.security import check_password_hash, generate_password_hash

from ..models.config_models import UserEntry

"""Credential verification.

Call sites only depend on ``CredentialStore.verify``; the static store backed
by the config ``users`` table can be swapped for a real identity provider.
Passwords are kept as werkzeug hashes, never in clear text.
"""

__all__ = [
    "Role",
    "CredentialStore",
    "StaticCredentialStore",
    "hash_password",
]

logger = logging.getLogger(__name__)


class Role(Enum):
    FIELD = "field"
    PROJECT = "project"
    ADMIN = "admin"

    @property
    def is_admin(self) -> bool:
        return self is Role.ADMIN


class CredentialStore(Protocol):
    def verify(self, username: str, password: str) -> Role | None:
        """Return the user's role, or None when the credentials are wrong."""
        ...


def hash_password(password: str) -> str:
    return generate_password_hash(password)


class StaticCredentialStore:
    def __init__(self, users: Iterable[UserEntry]) -> None:
        self._users: dict[str, UserEntry] = {}
        for u in users:
            if u.username in self._users:
                logger.warning(f"duplicate user entry ignored: {u.username}")
                continue
            self._users[u.username] = u

    def __contains__(self, username: object) -> bool:
        return username in self._users

    def usernames(self) -> list[str]:
        return list(self._users)

    def verify(self, username: str, password: str) -> Role | None:
        entry = self._users.get(username)
        if entry is None or not check_password_hash(entry.password_hash, password):
            return None
        return Role(entry.role)
