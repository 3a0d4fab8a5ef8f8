"""In-memory session registry.

The store is a dumb registry: it does not validate languages or topics, that
policy lives in the orchestrator. Each session gets its own `asyncio.Lock` so a
history append never races a concurrent read of the same session, while
independent sessions never contend.
"""

from __future__ import annotations

import time
import uuid
import asyncio
import logging
from typing import Any, Protocol
from collections.abc import Callable

from recitation.state import Session

logger = logging.getLogger(__name__)

TimeFn = Callable[[], float]

_IMMUTABLE_FIELDS = frozenset({"id", "language", "created_at", "history"})
# A session may start without a topic; once set it is fixed.
_SET_ONCE_FIELDS = frozenset({"topic"})
_MUTABLE_FIELDS = frozenset({"last_transcript", "transport_ref", "last_activity"})


class SessionStore(Protocol):
    def create(self, topic: str | None, language: str) -> str: ...

    def get(self, session_id: str) -> Session | None: ...

    def update(self, session_id: str, **fields: Any) -> bool: ...

    async def append_turn(self, session_id: str, transcript: str) -> Session | None: ...

    def remove(self, session_id: str) -> bool: ...

    def evict_older_than(self, max_age_minutes: float) -> list[str]: ...

    def detach_transport(self, transport: Any) -> int: ...

    def count(self) -> int: ...


class InMemorySessionStore:
    def __init__(self, *, now_fn: TimeFn | None = None) -> None:
        self._now = now_fn or time.time
        self._sessions: dict[str, Session] = {}
        self._locks: dict[str, asyncio.Lock] = {}

    def _touch(self, session: Session) -> None:
        # Clock skew must never move activity backwards.
        session.last_activity = max(session.last_activity, self._now())

    def create(self, topic: str | None, language: str) -> str:
        session_id = uuid.uuid4().hex
        while session_id in self._sessions:
            session_id = uuid.uuid4().hex
        now = self._now()
        self._sessions[session_id] = Session(
            id=session_id,
            topic=topic,
            language=language,
            created_at=now,
            last_activity=now,
        )
        self._locks[session_id] = asyncio.Lock()
        logger.info("created session %s topic=%s language=%s", session_id, topic or "general", language)
        return session_id

    def get(self, session_id: str) -> Session | None:
        session = self._sessions.get(session_id)
        if session is None:
            return None
        self._touch(session)
        return session

    def update(self, session_id: str, **fields: Any) -> bool:
        session = self._sessions.get(session_id)
        if session is None:
            return False

        frozen = set(_IMMUTABLE_FIELDS.intersection(fields))
        frozen.update(name for name in _SET_ONCE_FIELDS.intersection(fields) if getattr(session, name) is not None)
        if frozen:
            raise ValueError(f"session fields are immutable: {', '.join(sorted(frozen))}")
        unknown = set(fields) - _MUTABLE_FIELDS - _SET_ONCE_FIELDS
        if unknown:
            raise ValueError(f"unknown session fields: {', '.join(sorted(unknown))}")

        for name, value in fields.items():
            if name == "last_activity":
                continue
            setattr(session, name, value)
        self._touch(session)
        return True

    async def append_turn(self, session_id: str, transcript: str) -> Session | None:
        """Record a transcript on the session history; `None` when the session is gone."""
        lock = self._locks.get(session_id)
        if lock is None:
            return None
        async with lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None
            session.history.append(transcript)
            session.last_transcript = transcript
            self._touch(session)
            return session

    def remove(self, session_id: str) -> bool:
        self._locks.pop(session_id, None)
        return self._sessions.pop(session_id, None) is not None

    def evict_older_than(self, max_age_minutes: float) -> list[str]:
        cutoff = self._now() - float(max_age_minutes) * 60.0
        expired = [sid for sid, session in self._sessions.items() if session.last_activity < cutoff]
        for sid in expired:
            self.remove(sid)
            logger.info("evicted session %s (inactive for %s minutes)", sid, max_age_minutes)
        return expired

    def detach_transport(self, transport: Any) -> int:
        """Forget a closed connection without dropping its sessions; they may rejoin."""
        detached = 0
        for session in self._sessions.values():
            if session.transport_ref is not None and session.transport is transport:
                session.transport_ref = None
                detached += 1
        return detached

    def count(self) -> int:
        return len(self._sessions)


__all__ = ["InMemorySessionStore", "SessionStore", "TimeFn"]
