"""Credential material for pseudonymous devices."""
from __future__ import annotations

import hmac
import secrets
import string
import uuid

from blackmessages.utils.hash import blake3_digest

# Throwaway pseudonyms only; low entropy is acceptable here.
USERNAME_ALPHABET = string.ascii_lowercase + string.digits
TRANSACTION_KEY_BYTES = 32


def generate_username(length: int = 8) -> str:
    """Return a random pseudonym drawn from ``USERNAME_ALPHABET``."""
    return "".join(secrets.choice(USERNAME_ALPHABET) for _ in range(length))


def generate_device_id() -> str:
    """Return a new device identifier (UUID4, canonical string form)."""
    return str(uuid.uuid4())


def generate_transaction_key() -> str:
    """Return a fresh opaque bearer secret."""
    return secrets.token_urlsafe(TRANSACTION_KEY_BYTES)


def digest_transaction_key(transaction_key: str) -> bytes:
    """Return the stored form of a transaction key."""
    return blake3_digest(transaction_key.encode("utf-8"))


def secrets_match(expected: str | bytes, presented: str | bytes) -> bool:
    """Compare two secrets in constant time."""
    if isinstance(expected, str):
        expected = expected.encode("utf-8")
    if isinstance(presented, str):
        presented = presented.encode("utf-8")
    return hmac.compare_digest(expected, presented)
