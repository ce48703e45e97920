# src/blackmessages/models/localization.py
"""Current position reported by a device."""

from datetime import datetime

from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column

from blackmessages.db.session import Base
from blackmessages.db.time import UTCDateTime


class CurrentLocalization(Base):
    """Most recent position of a device. One row per device, no history."""

    __tablename__ = "current_localization"

    device_id: Mapped[str] = mapped_column(String(36), primary_key=True)
    latitude: Mapped[float] = mapped_column(Float, nullable=False)
    longitude: Mapped[float] = mapped_column(Float, nullable=False)
    timestamp: Mapped[datetime] = mapped_column(UTCDateTime(), nullable=False)
