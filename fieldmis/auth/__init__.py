"""Credential store abstraction."""

from .credentials import CredentialStore, Role, StaticCredentialStore, hash_password

__all__ = ["CredentialStore", "Role", "StaticCredentialStore", "hash_password"]
