# src/blackmessages/models/device.py
"""SQLAlchemy models for pseudonymous users and their devices."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import ForeignKey, LargeBinary, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from blackmessages.db.session import Base
from blackmessages.db.time import UTCDateTime, utcnow


class Device(Base):
    """Unit of authentication owning a single rotating transaction key.

    Only the BLAKE3 digest of the key is stored; the plaintext is handed to
    the client once, at registration or login.
    """

    __tablename__ = "device"

    device_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    transaction_key_digest: Mapped[bytes] = mapped_column(LargeBinary(32), nullable=False)
    key_issued_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )

    user: Mapped[User] = relationship("User", back_populates="device", uselist=False)


class User(Base):
    """Pseudonymous identity bound 1:1 to a device."""

    __tablename__ = "app_user"

    device_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("device.device_id", ondelete="CASCADE"),
        primary_key=True,
    )
    username: Mapped[str] = mapped_column(String(64), nullable=False)
    # Opaque, pre-hashed by the client.
    pin_hash: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        UTCDateTime(), nullable=False, default=utcnow
    )

    device: Mapped[Device] = relationship("Device", back_populates="user")
