"""Per-session conversation state (dataclasses only)."""

from __future__ import annotations

import weakref
from typing import Any
from dataclasses import field, dataclass


@dataclass(slots=True)
class Session:
    id: str
    language: str
    created_at: float
    last_activity: float
    topic: str | None = None
    history: list[str] = field(default_factory=list)
    last_transcript: str = ""
    # Non-owning handle to the live connection; stale after a reconnect.
    transport_ref: weakref.ReferenceType[Any] | None = None

    @property
    def transport(self) -> Any | None:
        if self.transport_ref is None:
            return None
        return self.transport_ref()

    def recent_history(self, window: int) -> list[str]:
        if window <= 0:
            return []
        return list(self.history[-window:])


__all__ = ["Session"]
