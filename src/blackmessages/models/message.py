# src/blackmessages/models/message.py
"""Ephemeral, location-tagged messages."""

import uuid
from datetime import datetime

from sqlalchemy import Float, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from blackmessages.db.session import Base
from blackmessages.db.time import UTCDateTime


def _new_message_id() -> str:
    return str(uuid.uuid4())


class Message(Base):
    """Message pinned to a coordinate and visible until ``expires_at``.

    The sender is a free-text label; messages carry no link to a device or
    user. Rows are never updated.
    """

    __tablename__ = "message"
    __table_args__ = (
        Index("ix_message_expires_at", "expires_at"),
        Index("ix_message_lat_lon", "latitude", "longitude"),
    )

    message_id: Mapped[str] = mapped_column(String(36), primary_key=True, default=_new_message_id)
    sender: Mapped[str] = mapped_column(Text, nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    expires_at: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
