"""Current-position bookkeeping for devices."""

from __future__ import annotations

import logging
import math

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from blackmessages.core.errors import InvalidInputError, NotFoundError, StorageError
from blackmessages.db.time import Clock, utcnow
from blackmessages.models import CurrentLocalization

logger = logging.getLogger(__name__)

_NATIVE_UPSERT_DIALECTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def validate_coordinates(latitude: float | None, longitude: float | None) -> tuple[float, float]:
    """Return the coordinates as floats or raise ``InvalidInputError``."""
    try:
        lat = float(latitude)  # type: ignore[arg-type]
        lon = float(longitude)  # type: ignore[arg-type]
    except (TypeError, ValueError) as err:
        raise InvalidInputError("Latitude and longitude must be numbers") from err
    if not (math.isfinite(lat) and math.isfinite(lon)):
        raise InvalidInputError("Latitude and longitude must be finite numbers")
    return lat, lon


class LocalizationStore:
    """Keeps exactly one current position per device."""

    def __init__(self, session: Session, *, clock: Clock = utcnow) -> None:
        self.session = session
        self.clock = clock

    def upsert(
        self, device_id: str | None, latitude: float | None, longitude: float | None
    ) -> CurrentLocalization:
        """Record the device's position, replacing any previous one.

        The timestamp always comes from the server clock. On SQLite and
        PostgreSQL this is a single ``INSERT ... ON CONFLICT DO UPDATE`` so
        concurrent calls for one device cannot leave duplicate rows; the last
        write wins.

        Raises:
            InvalidInputError: If ``device_id`` is blank or a coordinate is not finite.
            StorageError: If the write fails.
        """
        if not device_id or not device_id.strip():
            raise InvalidInputError("deviceId is required")
        lat, lon = validate_coordinates(latitude, longitude)
        values = {
            "device_id": device_id,
            "latitude": lat,
            "longitude": lon,
            "timestamp": self.clock(),
        }

        try:
            dialect = self.session.get_bind().dialect.name
            insert = _NATIVE_UPSERT_DIALECTS.get(dialect)
            if insert is None:
                self.session.merge(CurrentLocalization(**values))
            else:
                stmt = insert(CurrentLocalization).values(**values)
                stmt = stmt.on_conflict_do_update(
                    index_elements=[CurrentLocalization.device_id],
                    set_={
                        "latitude": stmt.excluded.latitude,
                        "longitude": stmt.excluded.longitude,
                        "timestamp": stmt.excluded.timestamp,
                    },
                )
                self.session.execute(stmt)
            self.session.commit()
            localization = self.session.get(
                CurrentLocalization, device_id, populate_existing=True
            )
        except SQLAlchemyError as err:
            self.session.rollback()
            logger.exception("Localization upsert failed for device %s", device_id)
            raise StorageError() from err

        if localization is None:  # pragma: no cover - row was just written
            raise StorageError()
        return localization

    def get(self, device_id: str) -> CurrentLocalization:
        """Return the device's current position.

        Raises:
            NotFoundError: If the device has never reported a position.
            StorageError: If the lookup fails.
        """
        try:
            localization = self.session.get(CurrentLocalization, device_id)
        except SQLAlchemyError as err:
            logger.exception("Localization lookup failed for device %s", device_id)
            raise StorageError() from err
        if localization is None:
            raise NotFoundError(f"No known location for device {device_id}")
        return localization
