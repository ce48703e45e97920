# src/blackmessages/services/__init__.py
"""Business logic services for the blackmessages application."""

from .credentials import AuthenticationGate, CredentialStore
from .geo import BoundingBox, bounding_box
from .localization import LocalizationStore
from .messages import MessageStore

__all__ = [
    "AuthenticationGate",
    "BoundingBox",
    "CredentialStore",
    "LocalizationStore",
    "MessageStore",
    "bounding_box",
]
