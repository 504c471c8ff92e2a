"""
Credential hashing boundary.

Accounts never compare raw passwords directly; they go through
``verify_password``.  Ledger lines written before hashing was introduced
hold plaintext, which still verifies but is reported as needing a rehash.
"""

from __future__ import annotations

import hmac

from passlib.context import CryptContext

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def is_hashed(stored: str) -> bool:
    return pwd_context.identify(stored) is not None


def verify_password(password: str, stored: str) -> tuple[bool, bool]:
    """Return ``(matches, needs_rehash)`` for *password* against *stored*."""
    if is_hashed(stored):
        ok = pwd_context.verify(password, stored)
        return ok, ok and pwd_context.needs_update(stored)
    # legacy plaintext
    ok = hmac.compare_digest(password.encode(), stored.encode())
    return ok, ok
