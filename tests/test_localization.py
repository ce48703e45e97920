# mypy: ignore-errors
# tests/test_localization.py
"""Tests for the current-localization store."""

from __future__ import annotations

import math

import pytest
from sqlalchemy.exc import OperationalError

from blackmessages.core.errors import InvalidInputError, NotFoundError, StorageError
from blackmessages.models import CurrentLocalization
from blackmessages.services.localization import LocalizationStore

DEVICE_ID = "7d1c1f0e-2a53-4b8e-9d64-2f0c1b7a9e11"


@pytest.fixture()
def store(db_session, clock) -> LocalizationStore:
    return LocalizationStore(db_session, clock=clock)


def test_upsert_inserts_first_position(store, clock) -> None:
    """The first report creates the row with a server timestamp."""
    localization = store.upsert(DEVICE_ID, 52.52, 13.40)
    assert localization.device_id == DEVICE_ID
    assert (localization.latitude, localization.longitude) == (52.52, 13.40)
    assert localization.timestamp.replace(tzinfo=None) == clock.now.replace(tzinfo=None)


def test_upsert_twice_keeps_single_row(store, db_session, clock) -> None:
    """A second report overwrites the first; no history is kept."""
    store.upsert(DEVICE_ID, 52.52, 13.40)
    clock.advance(10)
    store.upsert(DEVICE_ID, 48.85, 2.35)

    rows = db_session.query(CurrentLocalization).filter_by(device_id=DEVICE_ID).all()
    assert len(rows) == 1
    assert (rows[0].latitude, rows[0].longitude) == (48.85, 2.35)
    assert rows[0].timestamp.replace(tzinfo=None) == clock.now.replace(tzinfo=None)


def test_positions_are_per_device(store, db_session) -> None:
    """Different devices do not overwrite each other."""
    store.upsert(DEVICE_ID, 1.0, 2.0)
    store.upsert("other-device", 3.0, 4.0)
    assert db_session.query(CurrentLocalization).count() == 2
    assert store.get(DEVICE_ID).latitude == 1.0


def test_get_unknown_device_raises_not_found(store) -> None:
    """A device that never reported a position has no localization."""
    with pytest.raises(NotFoundError):
        store.get(DEVICE_ID)


@pytest.mark.parametrize(
    ("device_id", "latitude", "longitude"),
    [
        ("", 1.0, 1.0),
        (None, 1.0, 1.0),
        (DEVICE_ID, math.nan, 1.0),
        (DEVICE_ID, 1.0, math.inf),
        (DEVICE_ID, None, 1.0),
        (DEVICE_ID, "north", 1.0),
    ],
)
def test_upsert_rejects_invalid_input(store, db_session, device_id, latitude, longitude) -> None:
    """Validation happens before any write."""
    with pytest.raises(InvalidInputError):
        store.upsert(device_id, latitude, longitude)
    assert db_session.query(CurrentLocalization).count() == 0


def test_upsert_storage_failure(store, db_session, monkeypatch) -> None:
    """Storage failures surface as StorageError without retries."""
    calls = []

    def _fail(*args, **kwargs):
        calls.append(args)
        raise OperationalError("INSERT", {}, Exception("timeout"))

    monkeypatch.setattr(db_session, "execute", _fail)
    with pytest.raises(StorageError):
        store.upsert(DEVICE_ID, 1.0, 1.0)
    assert len(calls) == 1
