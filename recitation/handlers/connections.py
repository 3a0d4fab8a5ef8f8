"""WebSocket admission control and connection-to-session bookkeeping."""

from __future__ import annotations

import asyncio
from typing import Any


class ConnectionManager:
    """Caps concurrent sockets and remembers which session each socket joined.

    A socket that drops leaves its session alive in the store; the client may
    reconnect and `join-session` again from a fresh socket.
    """

    def __init__(self, *, max_connections: int) -> None:
        self._max = max(1, int(max_connections))
        self._lock = asyncio.Lock()
        self._active: dict[int, str | None] = {}

    async def connect(self, ws: Any) -> bool:
        """Attempt to admit a websocket connection (without accepting it)."""
        key = id(ws)
        async with self._lock:
            if key in self._active:
                return True
            if len(self._active) >= self._max:
                return False
            self._active[key] = None
            return True

    async def bind(self, ws: Any, session_id: str) -> None:
        async with self._lock:
            if id(ws) in self._active:
                self._active[id(ws)] = session_id

    async def disconnect(self, ws: Any) -> str | None:
        """Release the slot; returns the session the socket had joined, if any."""
        async with self._lock:
            return self._active.pop(id(ws), None)

    def get_connection_count(self) -> int:
        return len(self._active)


__all__ = ["ConnectionManager"]
