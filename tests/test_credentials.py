# mypy: ignore-errors
# tests/test_credentials.py
"""Tests for registration, login and the authentication gate."""

from __future__ import annotations

import uuid

import pytest
from sqlalchemy.exc import OperationalError

from blackmessages.core.errors import InvalidInputError, StorageError, UnauthorizedError
from blackmessages.core.security import USERNAME_ALPHABET, digest_transaction_key
from blackmessages.models import Device, User
from blackmessages.services.credentials import (
    INVALID_KEY_DETAIL,
    INVALID_LOGIN_DETAIL,
    AuthenticationGate,
    CredentialStore,
)

PIN_HASH = "5994471abb01112afcc18159f6cc74b4f511b99806da59b3caf5a9c173cacfc5"


@pytest.fixture()
def store(db_session, clock) -> CredentialStore:
    return CredentialStore(db_session, clock=clock)


@pytest.fixture()
def gate(db_session) -> AuthenticationGate:
    return AuthenticationGate(db_session)


def test_register_persists_user_and_device(store, db_session) -> None:
    """Registration writes both rows and never stores the plaintext key."""
    registration = store.register(PIN_HASH)

    assert len(registration.username) == 8
    assert set(registration.username) <= set(USERNAME_ALPHABET)
    uuid.UUID(registration.device_id)
    assert registration.transaction_key

    user = db_session.get(User, registration.device_id)
    device = db_session.get(Device, registration.device_id)
    assert user is not None and device is not None
    assert user.username == registration.username
    assert user.pin_hash == PIN_HASH
    assert device.transaction_key_digest == digest_transaction_key(registration.transaction_key)
    assert device.transaction_key_digest != registration.transaction_key.encode()


def test_register_issues_distinct_devices(store) -> None:
    """Each registration yields a new device and key."""
    first = store.register(PIN_HASH)
    second = store.register(PIN_HASH)
    assert first.device_id != second.device_id
    assert first.transaction_key != second.transaction_key


@pytest.mark.parametrize("pin_hash", [None, "", "   "])
def test_register_requires_pin_hash(store, db_session, pin_hash) -> None:
    """A missing PIN hash is rejected before touching storage."""
    with pytest.raises(InvalidInputError):
        store.register(pin_hash)
    assert db_session.query(Device).count() == 0


def test_register_storage_failure_leaves_nothing(store, db_session, monkeypatch) -> None:
    """A failed write is reported and rolled back rather than half-persisted."""

    def _fail() -> None:
        raise OperationalError("INSERT", {}, Exception("connection lost"))

    monkeypatch.setattr(db_session, "commit", _fail)
    with pytest.raises(StorageError):
        store.register(PIN_HASH)
    monkeypatch.undo()

    assert db_session.query(Device).count() == 0
    assert db_session.query(User).count() == 0


def test_login_returns_username_and_new_key(store) -> None:
    """Login hands back the stored pseudonym and a freshly minted key."""
    registration = store.register(PIN_HASH)
    result = store.login(registration.device_id, PIN_HASH)
    assert result.username == registration.username
    assert result.transaction_key != registration.transaction_key


def test_login_rotation_invalidates_previous_keys(store, gate) -> None:
    """Only the most recently issued key authenticates."""
    registration = store.register(PIN_HASH)
    first = store.login(registration.device_id, PIN_HASH)
    second = store.login(registration.device_id, PIN_HASH)
    assert first.transaction_key != second.transaction_key

    device = gate.authenticate(registration.device_id, second.transaction_key)
    assert device.device_id == registration.device_id

    for stale in (registration.transaction_key, first.transaction_key):
        with pytest.raises(UnauthorizedError):
            gate.authenticate(registration.device_id, stale)


def test_login_failures_are_indistinguishable(store) -> None:
    """Unknown device and wrong PIN produce the same error."""
    registration = store.register(PIN_HASH)

    with pytest.raises(UnauthorizedError) as unknown:
        store.login(str(uuid.uuid4()), PIN_HASH)
    with pytest.raises(UnauthorizedError) as wrong_pin:
        store.login(registration.device_id, "not-the-pin")

    assert unknown.value.detail == wrong_pin.value.detail == INVALID_LOGIN_DETAIL


def test_failed_login_keeps_current_key(store, gate) -> None:
    """A wrong PIN does not rotate the key."""
    registration = store.register(PIN_HASH)
    with pytest.raises(UnauthorizedError):
        store.login(registration.device_id, "wrong")
    gate.authenticate(registration.device_id, registration.transaction_key)


@pytest.mark.parametrize(("device_id", "pin_hash"), [("", PIN_HASH), ("abc", ""), (None, None)])
def test_login_requires_fields(store, device_id, pin_hash) -> None:
    """Blank identifiers are invalid input, not authentication failures."""
    with pytest.raises(InvalidInputError):
        store.login(device_id, pin_hash)


def test_gate_rejects_unknown_device_like_wrong_key(store, gate) -> None:
    """Unknown devices and key mismatches share one generic error."""
    registration = store.register(PIN_HASH)

    with pytest.raises(UnauthorizedError) as unknown:
        gate.authenticate(str(uuid.uuid4()), registration.transaction_key)
    with pytest.raises(UnauthorizedError) as mismatch:
        gate.authenticate(registration.device_id, "forged-key")
    with pytest.raises(UnauthorizedError) as missing:
        gate.authenticate(registration.device_id, "")

    assert unknown.value.detail == mismatch.value.detail == missing.value.detail == INVALID_KEY_DETAIL


def test_key_has_no_expiry(store, gate, clock) -> None:
    """A key stays valid until the next login, however long that takes."""
    registration = store.register(PIN_HASH)
    clock.advance(365 * 24 * 3600)
    gate.authenticate(registration.device_id, registration.transaction_key)
