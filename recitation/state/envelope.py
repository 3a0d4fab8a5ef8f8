"""Per-connection state for the WebSocket JSON envelope."""

from __future__ import annotations

from dataclasses import dataclass
from collections.abc import Callable


@dataclass(slots=True)
class EnvelopeState:
    session_id: str = "unknown"
    request_id: str = "unknown"
    # Session bound through join-session; turns for other ids are still served.
    joined_session_id: str | None = None
    inflight_turns: int = 0
    touch: Callable[[], None] | None = None


__all__ = ["EnvelopeState"]
