"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    from recitation.state.settings import AppSettings
    from recitation.sessions.store import SessionStore
    from recitation.sessions.sweeper import SessionSweeper
    from recitation.turns.orchestrator import ResponseOrchestrator
    from recitation.handlers.connections import ConnectionManager


@dataclass(slots=True)
class RuntimeDeps:
    connections: ConnectionManager
    sessions: SessionStore
    orchestrator: ResponseOrchestrator
    sweeper: SessionSweeper
    settings: AppSettings
    _http_client: Any

    async def shutdown(self) -> None:
        try:
            await self.sweeper.stop()
        except Exception:
            logger.exception("session sweeper shutdown failed")
        try:
            await self._http_client.aclose()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
