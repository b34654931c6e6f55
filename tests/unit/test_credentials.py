from __future__ import annotations

from werkzeug.security import generate_password_hash

from fieldmis.auth.credentials import Role, StaticCredentialStore, hash_password
from fieldmis.models.config_models import UserEntry


def _store():
    return StaticCredentialStore([
        UserEntry("asha", generate_password_hash("secret"), "field"),
        UserEntry("admin", hash_password("root-pass"), "admin"),
        UserEntry("asha", generate_password_hash("other"), "admin"),
    ])


def test_verify_returns_role():
    store = _store()
    assert store.verify("asha", "secret") is Role.FIELD
    role = store.verify("admin", "root-pass")
    assert role is Role.ADMIN
    assert role.is_admin


def test_verify_rejects_wrong_password_and_unknown_user():
    store = _store()
    assert store.verify("asha", "wrong") is None
    assert store.verify("nobody", "secret") is None


def test_duplicate_username_keeps_first_entry():
    store = _store()
    assert store.usernames() == ["asha", "admin"]
    assert store.verify("asha", "other") is None
    assert "asha" in store


def test_hash_is_not_plaintext():
    assert hash_password("secret") != "secret"
