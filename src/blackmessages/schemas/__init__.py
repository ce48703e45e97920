# src/blackmessages/schemas/__init__.py
"""Pydantic schemas for request/response validation."""

from .device import (
    DeviceCredentials,
    LoginRequest,
    LoginResponse,
    RegisterRequest,
    RegisterResponse,
)
from .localization import LocalizationUpdate
from .message import MessageCreate, MessageResponse

__all__ = [
    "DeviceCredentials",
    "LocalizationUpdate",
    "LoginRequest",
    "LoginResponse",
    "MessageCreate",
    "MessageResponse",
    "RegisterRequest",
    "RegisterResponse",
]
