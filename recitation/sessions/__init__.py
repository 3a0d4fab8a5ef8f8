from .sweeper import SessionSweeper
from .store import TimeFn, SessionStore, InMemorySessionStore

__all__ = ["InMemorySessionStore", "SessionStore", "SessionSweeper", "TimeFn"]
