"""Data access helpers for ephemeral messages.

Expiry is enforced here: every read carries the ``expires_at > now``
predicate, so an expired row is never visible to callers whether or not it
has been physically purged yet.
"""
from __future__ import annotations

from datetime import datetime, timedelta

from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from blackmessages.db.time import Clock, as_utc, utcnow
from blackmessages.models.message import Message

__all__ = ["MessageRepository"]


class MessageRepository:
    """Thin wrapper around database access for message entities."""

    def __init__(self, session: Session, *, ttl_seconds: int, clock: Clock = utcnow) -> None:
        """Initialize the repository with a SQLAlchemy session and a TTL policy."""
        self.session = session
        self.ttl = timedelta(seconds=ttl_seconds)
        self.clock = clock

    def _visible(self, now: datetime):
        return Message.expires_at > now

    def create(
        self,
        *,
        sender: str,
        content: str,
        latitude: float,
        longitude: float,
        timestamp: datetime | None = None,
    ) -> Message:
        """Insert a message expiring one TTL after server-side creation.

        Args:
            sender: Free-text sender label.
            content: Message body.
            latitude: Latitude in degrees.
            longitude: Longitude in degrees.
            timestamp: Caller-supplied capture time, stored in UTC; defaults to
                now. It does not influence expiry.
        """
        now = as_utc(self.clock())
        message = Message(
            sender=sender,
            content=content,
            latitude=latitude,
            longitude=longitude,
            timestamp=as_utc(timestamp) if timestamp is not None else now,
            expires_at=now + self.ttl,
        )
        self.session.add(message)
        self.session.flush()
        return message

    def list_in_box(
        self,
        *,
        min_lat: float,
        max_lat: float,
        min_lon: float,
        max_lon: float,
    ) -> list[Message]:
        """Return visible messages whose coordinates fall inside the rectangle."""
        stmt = (
            select(Message)
            .where(
                self._visible(self.clock()),
                Message.latitude >= min_lat,
                Message.latitude <= max_lat,
                Message.longitude >= min_lon,
                Message.longitude <= max_lon,
            )
            .order_by(Message.timestamp.desc())
        )
        return list(self.session.execute(stmt).scalars())

    def purge_expired(self) -> int:
        """Delete expired rows and return how many were removed."""
        stmt = (
            delete(Message)
            .where(Message.expires_at <= self.clock())
            .execution_options(synchronize_session=False)
        )
        result = self.session.execute(stmt)
        return result.rowcount or 0
