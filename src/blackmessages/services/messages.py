"""Ephemeral message posting and proximity lookup."""

from __future__ import annotations

import logging
from datetime import datetime

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blackmessages.core.errors import InvalidInputError, StorageError
from blackmessages.db.time import Clock, utcnow
from blackmessages.models import Message
from blackmessages.repositories.message_repo import MessageRepository
from blackmessages.services.geo import bounding_box
from blackmessages.services.localization import validate_coordinates

logger = logging.getLogger(__name__)


class MessageStore:
    """Stores messages that vanish ``ttl_seconds`` after they are posted."""

    def __init__(self, session: Session, *, ttl_seconds: int, clock: Clock = utcnow) -> None:
        self.session = session
        self.repository = MessageRepository(session, ttl_seconds=ttl_seconds, clock=clock)

    def create(
        self,
        sender: str | None,
        content: str | None,
        latitude: float | None,
        longitude: float | None,
        timestamp: datetime | None = None,
    ) -> Message:
        """Persist a message at the given coordinate.

        Raises:
            InvalidInputError: If sender or content is blank, or a coordinate is not finite.
            StorageError: If the write fails.
        """
        if not sender or not sender.strip():
            raise InvalidInputError("sender is required")
        if not content or not content.strip():
            raise InvalidInputError("content is required")
        lat, lon = validate_coordinates(latitude, longitude)

        try:
            message = self.repository.create(
                sender=sender,
                content=content,
                latitude=lat,
                longitude=lon,
                timestamp=timestamp,
            )
            self.session.commit()
        except SQLAlchemyError as err:
            self.session.rollback()
            logger.exception("Message insert failed")
            raise StorageError() from err

        logger.debug("Stored message %s expiring at %s", message.message_id, message.expires_at)
        return message

    def find_nearby(self, latitude: float, longitude: float, radius_km: float) -> list[Message]:
        """Return visible messages inside the bounding box of the search disc.

        The filter is the rectangle, not the disc; corner hits farther than
        ``radius_km`` are included. Ordering is not part of the contract.

        Raises:
            InvalidInputError: If the center or radius is invalid.
            StorageError: If the query fails.
        """
        box = bounding_box(latitude, longitude, radius_km)
        try:
            return self.repository.list_in_box(
                min_lat=box.min_lat,
                max_lat=box.max_lat,
                min_lon=box.min_lon,
                max_lon=box.max_lon,
            )
        except SQLAlchemyError as err:
            logger.exception("Nearby query failed around (%s, %s)", latitude, longitude)
            raise StorageError() from err

    def purge_expired(self) -> int:
        """Physically remove expired messages."""
        try:
            removed = self.repository.purge_expired()
            self.session.commit()
        except SQLAlchemyError as err:
            self.session.rollback()
            logger.exception("Purging expired messages failed")
            raise StorageError() from err
        return removed
