"""Domain errors raised by the blackmessages stores.

Endpoints translate these into HTTP responses; the messages carried by
``UnauthorizedError`` and ``StorageError`` are safe to show to clients.
"""

from __future__ import annotations


class BlackMessagesError(Exception):
    """Base class for all domain errors."""


class InvalidInputError(BlackMessagesError, ValueError):
    """Caller-supplied data failed validation."""


class UnauthorizedError(BlackMessagesError):
    """Credentials did not match.

    Never distinguishes an unknown device from a wrong secret.
    """

    def __init__(self, detail: str = "Invalid credentials") -> None:
        super().__init__(detail)
        self.detail = detail


class NotFoundError(BlackMessagesError):
    """A dependent resource (for example a current location) does not exist yet."""


class StorageError(BlackMessagesError):
    """The storage collaborator failed."""

    def __init__(self, detail: str = "Storage unavailable") -> None:
        super().__init__(detail)
        self.detail = detail
