"""Background task that evicts expired sessions on a fixed interval."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from rights_identity.sessions.store import SessionStore

logger = logging.getLogger(__name__)


class SessionSweeper:
    """Periodically calls ``SessionStore.cleanup_expired_sessions``.

    Runs independently of request traffic so abandoned sessions that are
    never looked up again still get evicted.
    """

    DEFAULT_INTERVAL_SECONDS = 3600.0

    def __init__(
        self,
        store: SessionStore,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
    ):
        if interval_seconds <= 0:
            msg = "Sweep interval must be positive"
            raise ValueError(msg)

        self._store = store
        self._interval = interval_seconds
        self._task: asyncio.Task[None] | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start sweeping in the running event loop (no-op if already running)."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run(), name="session-sweeper")
        logger.debug("Session sweeper started (interval %.0fs)", self._interval)

    async def stop(self) -> None:
        if self._task is None:
            return

        task, self._task = self._task, None
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.debug("Session sweeper stopped")

    async def run_once(self) -> int:
        return await self._store.cleanup_expired_sessions()

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                await self.run_once()
            except Exception:
                logger.exception("Session sweep failed")
