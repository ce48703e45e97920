"""Background eviction of expired messages.

Reads already hide expired rows; this worker keeps the table from growing by
deleting them periodically.
"""

from __future__ import annotations

import asyncio
import logging

from blackmessages.core.errors import StorageError
from blackmessages.db.session import Database
from blackmessages.db.time import Clock, utcnow
from blackmessages.services.messages import MessageStore

logger = logging.getLogger(__name__)


class ExpiredMessageReaper:
    """Periodically deletes messages whose TTL has elapsed."""

    def __init__(
        self,
        database: Database,
        *,
        interval_seconds: float,
        ttl_seconds: int,
        clock: Clock = utcnow,
    ) -> None:
        """Initialize the reaper.

        Args:
            database: Shared storage handle; each pass opens its own session.
            interval_seconds: Delay between passes. ``0`` disables the worker.
            ttl_seconds: Message TTL, passed through to the store.
            clock: Source of "now" for the expiry cut-off.
        """
        self.database = database
        self.interval_seconds = interval_seconds
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._task: asyncio.Task[None] | None = None
        self._stopping = asyncio.Event()

    @property
    def enabled(self) -> bool:
        return self.interval_seconds > 0

    async def start(self) -> None:
        """Start the background purge loop."""

        if not self.enabled:
            return

        if self._task is None or self._task.done():
            self._stopping.clear()
            self._task = asyncio.create_task(self._run())

    async def stop(self) -> None:
        """Stop the background purge loop."""

        if self._task is None:
            return

        self._stopping.set()
        await self._task
        self._task = None

    async def _run(self) -> None:
        while not self._stopping.is_set():
            try:
                removed = await asyncio.to_thread(self.purge_once)
            except StorageError as e:
                logger.warning("ExpiredMessageReaper could not purge: %s", e)
            except Exception:
                logger.exception("ExpiredMessageReaper encountered unexpected error")
            else:
                if removed:
                    logger.debug("Purged %d expired messages", removed)

            try:
                await asyncio.wait_for(self._stopping.wait(), timeout=self.interval_seconds)
            except TimeoutError:
                continue

    def purge_once(self) -> int:
        """Run a single purge pass and return the number of deleted rows."""
        session = self.database.session()
        try:
            return MessageStore(
                session, ttl_seconds=self.ttl_seconds, clock=self.clock
            ).purge_expired()
        finally:
            session.close()
