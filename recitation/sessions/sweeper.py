"""Periodic eviction of idle sessions."""

from __future__ import annotations

import asyncio
import logging
import contextlib

from recitation.config.sessions import DEFAULT_SESSION_MAX_AGE_MINUTES, DEFAULT_SESSION_SWEEP_INTERVAL_S

from .store import SessionStore

logger = logging.getLogger(__name__)


class SessionSweeper:
    """Runs `evict_older_than` on a fixed interval, independent of request traffic.

    Eviction is a liveness property: a session may outlive the window by up to
    one interval.
    """

    def __init__(
        self,
        store: SessionStore,
        *,
        max_age_minutes: float | None = None,
        interval_s: float | None = None,
    ) -> None:
        self._store = store
        self._max_age_minutes = float(DEFAULT_SESSION_MAX_AGE_MINUTES if max_age_minutes is None else max_age_minutes)
        self._interval_s = float(DEFAULT_SESSION_SWEEP_INTERVAL_S if interval_s is None else interval_s)
        self._stop_event = asyncio.Event()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep_once(self) -> list[str]:
        evicted = self._store.evict_older_than(self._max_age_minutes)
        if evicted:
            logger.info("session sweep evicted %s session(s); %s remain", len(evicted), self._store.count())
        return evicted

    def start(self) -> asyncio.Task:
        if self._task is None:
            self._stop_event.clear()
            self._task = asyncio.create_task(self._sweep_loop())
        return self._task

    async def stop(self) -> None:
        self._stop_event.set()
        if self._task is None:
            return
        self._task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._task
        self._task = None

    async def _sweep_loop(self) -> None:
        try:
            while not self._stop_event.is_set():
                await asyncio.sleep(self._interval_s)
                if self._stop_event.is_set():
                    break
                try:
                    self.sweep_once()
                except Exception:
                    logger.exception("session sweep failed")
        except asyncio.CancelledError:
            return


__all__ = ["SessionSweeper"]
