"""Shared error types for the recitation companion server."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class RateLimitError(Exception):
    """Raised when a sliding-window rate limiter is saturated."""

    retry_in: float
    limit: int
    window_seconds: float


@dataclass(frozen=True, slots=True)
class SessionNotFound(Exception):
    """The session id is unknown or was evicted; the caller should start a new session."""

    session_id: str

    def __str__(self) -> str:
        return f"session {self.session_id!r} not found"


@dataclass(frozen=True, slots=True)
class UnsupportedLanguage(Exception):
    language: str
    supported: tuple[str, ...]

    def __str__(self) -> str:
        return f"unsupported language {self.language!r}; expected one of {', '.join(self.supported)}"


@dataclass(frozen=True, slots=True)
class GenerationFailed(Exception):
    """The text generator could not produce a reply for this turn."""

    reason: str

    def __str__(self) -> str:
        return f"generation failed: {self.reason}"


@dataclass(frozen=True, slots=True)
class SynthesisUnavailable(Exception):
    """Speech synthesis produced no audio. Never surfaced past the orchestrator."""

    reason: str

    def __str__(self) -> str:
        return f"synthesis unavailable: {self.reason}"


@dataclass(frozen=True, slots=True)
class InvalidFormat(Exception):
    """Audio container parameters or header bytes violate the codec contract."""

    reason: str

    def __str__(self) -> str:
        return f"invalid audio format: {self.reason}"


__all__ = [
    "GenerationFailed",
    "InvalidFormat",
    "RateLimitError",
    "SessionNotFound",
    "SynthesisUnavailable",
    "UnsupportedLanguage",
]
