"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthSettings:
    api_key: str


@dataclass(frozen=True, slots=True)
class LimitsSettings:
    max_concurrent_connections: int
    ws_message_window_seconds: float
    ws_max_messages_per_window: int


@dataclass(frozen=True, slots=True)
class WebSocketSettings:
    idle_timeout_s: float
    watchdog_tick_s: float
    max_connection_duration_s: float


@dataclass(frozen=True, slots=True)
class SessionSettings:
    max_age_minutes: float
    sweep_interval_s: float


@dataclass(frozen=True, slots=True)
class GenerationSettings:
    api_key: str
    api_base_url: str
    text_model: str
    timeout_s: float


@dataclass(frozen=True, slots=True)
class SpeechSettings:
    tts_model: str
    timeout_s: float


@dataclass(frozen=True, slots=True)
class AppSettings:
    auth: AuthSettings
    limits: LimitsSettings
    websocket: WebSocketSettings
    sessions: SessionSettings
    generation: GenerationSettings
    speech: SpeechSettings
    client_url: str


__all__ = [
    "AppSettings",
    "AuthSettings",
    "GenerationSettings",
    "LimitsSettings",
    "SessionSettings",
    "SpeechSettings",
    "WebSocketSettings",
]
