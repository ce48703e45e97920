# src/blackmessages/models/__init__.py
"""SQLAlchemy models for the blackmessages service."""

from .device import Device, User
from .localization import CurrentLocalization
from .message import Message

__all__ = [
    "Device", "User",
    "CurrentLocalization",
    "Message",
]
