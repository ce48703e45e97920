"""Pseudonymous registration, login and transaction-key checks."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blackmessages.core import security
from blackmessages.core.errors import InvalidInputError, StorageError, UnauthorizedError
from blackmessages.db.time import Clock, utcnow
from blackmessages.models import Device, User

logger = logging.getLogger(__name__)

INVALID_LOGIN_DETAIL = "Invalid device ID or PIN"
INVALID_KEY_DETAIL = "Invalid device ID or transaction key"


@dataclass(frozen=True)
class Registration:
    """Credentials handed to a freshly registered device."""

    username: str
    device_id: str
    transaction_key: str


@dataclass(frozen=True)
class LoginResult:
    """Outcome of a successful login."""

    username: str
    transaction_key: str


def _require(value: str | None, field: str) -> str:
    if value is None or not value.strip():
        raise InvalidInputError(f"{field} is required")
    return value


class CredentialStore:
    """Manages users, devices and transaction-key rotation."""

    def __init__(
        self,
        session: Session,
        *,
        username_length: int = 8,
        clock: Clock = utcnow,
    ) -> None:
        self.session = session
        self.username_length = username_length
        self.clock = clock

    def register(self, pin_hash: str | None) -> Registration:
        """Create a user and its device in a single transaction.

        Raises:
            InvalidInputError: If ``pin_hash`` is missing or blank.
            StorageError: If either write fails; nothing is persisted then.
        """
        pin_hash = _require(pin_hash, "pinHash")

        username = security.generate_username(self.username_length)
        device_id = security.generate_device_id()
        transaction_key = security.generate_transaction_key()

        device = Device(
            device_id=device_id,
            transaction_key_digest=security.digest_transaction_key(transaction_key),
            key_issued_at=self.clock(),
        )
        device.user = User(
            device_id=device_id,
            username=username,
            pin_hash=pin_hash,
            created_at=self.clock(),
        )
        try:
            self.session.add(device)
            self.session.commit()
        except SQLAlchemyError as err:
            self.session.rollback()
            logger.exception("Registration failed for device %s", device_id)
            raise StorageError() from err

        logger.info("Registered device %s", device_id)
        return Registration(username=username, device_id=device_id, transaction_key=transaction_key)

    def login(self, device_id: str | None, pin_hash: str | None) -> LoginResult:
        """Verify the PIN hash and rotate the device's transaction key.

        Any key issued earlier for the device stops working, including keys
        held by other sessions.

        Raises:
            InvalidInputError: If a field is missing or blank.
            UnauthorizedError: If the device is unknown or the PIN hash differs.
            StorageError: If the lookup or the key write fails.
        """
        device_id = _require(device_id, "deviceId")
        pin_hash = _require(pin_hash, "pinHash")

        try:
            user = self.session.get(User, device_id)
        except SQLAlchemyError as err:
            logger.exception("User lookup failed for device %s", device_id)
            raise StorageError() from err

        if user is None or not security.secrets_match(user.pin_hash, pin_hash):
            raise UnauthorizedError(INVALID_LOGIN_DETAIL)

        transaction_key = security.generate_transaction_key()
        try:
            device = self.session.get(Device, device_id)
            if device is None:
                # User row without its device: treat like an unknown device.
                raise UnauthorizedError(INVALID_LOGIN_DETAIL)
            device.transaction_key_digest = security.digest_transaction_key(transaction_key)
            device.key_issued_at = self.clock()
            self.session.commit()
        except SQLAlchemyError as err:
            self.session.rollback()
            logger.exception("Key rotation failed for device %s", device_id)
            raise StorageError() from err

        logger.info("Rotated transaction key for device %s", device_id)
        return LoginResult(username=user.username, transaction_key=transaction_key)


class AuthenticationGate:
    """Checks a (device ID, transaction key) pair before privileged operations."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def authenticate(self, device_id: str | None, transaction_key: str | None) -> Device:
        """Return the device if the presented key is the current one.

        Unknown devices, missing keys and stale keys are indistinguishable.

        Raises:
            UnauthorizedError: On any mismatch.
            StorageError: If the lookup fails.
        """
        if not device_id or not transaction_key:
            raise UnauthorizedError(INVALID_KEY_DETAIL)

        try:
            device = self.session.get(Device, device_id)
        except SQLAlchemyError as err:
            logger.exception("Device lookup failed for %s", device_id)
            raise StorageError() from err

        presented = security.digest_transaction_key(transaction_key)
        if device is None or not security.secrets_match(device.transaction_key_digest, presented):
            raise UnauthorizedError(INVALID_KEY_DETAIL)
        return device
