"""Environment parsing for runtime settings."""

from __future__ import annotations

import os

from recitation.config.secrets import ENV_GEMINI_API_KEY, ENV_RECITATION_API_KEY
from recitation.state.settings import (
    AppSettings,
    AuthSettings,
    SpeechSettings,
    LimitsSettings,
    SessionSettings,
    WebSocketSettings,
    GenerationSettings,
)
from recitation.config.sessions import (
    ENV_SESSION_MAX_AGE_MINUTES,
    ENV_SESSION_SWEEP_INTERVAL_S,
    DEFAULT_SESSION_MAX_AGE_MINUTES,
    DEFAULT_SESSION_SWEEP_INTERVAL_S,
)
from recitation.config.websocket import (
    ENV_WS_IDLE_TIMEOUT_S,
    ENV_WS_WATCHDOG_TICK_S,
    DEFAULT_WS_IDLE_TIMEOUT_S,
    DEFAULT_WS_WATCHDOG_TICK_S,
    ENV_WS_MAX_CONNECTION_DURATION_S,
    DEFAULT_WS_MAX_CONNECTION_DURATION_S,
)
from recitation.config.limits import (
    ENV_WS_MESSAGE_WINDOW_SECONDS,
    ENV_MAX_CONCURRENT_CONNECTIONS,
    ENV_WS_MAX_MESSAGES_PER_WINDOW,
    DEFAULT_WS_MESSAGE_WINDOW_SECONDS,
    DEFAULT_MAX_CONCURRENT_CONNECTIONS,
    DEFAULT_WS_MAX_MESSAGES_PER_WINDOW,
)
from recitation.config.generation import (
    ENV_GEMINI_TTS_MODEL,
    ENV_GEMINI_TEXT_MODEL,
    ENV_SYNTHESIS_TIMEOUT_S,
    ENV_GEMINI_API_BASE_URL,
    ENV_GENERATION_TIMEOUT_S,
    DEFAULT_GEMINI_TTS_MODEL,
    DEFAULT_GEMINI_TEXT_MODEL,
    DEFAULT_SYNTHESIS_TIMEOUT_S,
    DEFAULT_GEMINI_API_BASE_URL,
    DEFAULT_GENERATION_TIMEOUT_S,
)

ENV_CLIENT_URL = "CLIENT_URL"
DEFAULT_CLIENT_URL = "http://localhost:3000"


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _positive_float_env(name: str, default: float) -> float:
    value = _float_env(name, default)
    return value if value > 0 else default


def _load_auth_settings() -> AuthSettings:
    return AuthSettings(api_key=(os.getenv(ENV_RECITATION_API_KEY) or "").strip())


def _load_limits_settings() -> LimitsSettings:
    return LimitsSettings(
        max_concurrent_connections=max(1, _int_env(ENV_MAX_CONCURRENT_CONNECTIONS, DEFAULT_MAX_CONCURRENT_CONNECTIONS)),
        ws_message_window_seconds=_positive_float_env(ENV_WS_MESSAGE_WINDOW_SECONDS, DEFAULT_WS_MESSAGE_WINDOW_SECONDS),
        ws_max_messages_per_window=_int_env(ENV_WS_MAX_MESSAGES_PER_WINDOW, DEFAULT_WS_MAX_MESSAGES_PER_WINDOW),
    )


def _load_websocket_settings() -> WebSocketSettings:
    return WebSocketSettings(
        idle_timeout_s=_float_env(ENV_WS_IDLE_TIMEOUT_S, DEFAULT_WS_IDLE_TIMEOUT_S),
        watchdog_tick_s=_positive_float_env(ENV_WS_WATCHDOG_TICK_S, DEFAULT_WS_WATCHDOG_TICK_S),
        max_connection_duration_s=_float_env(ENV_WS_MAX_CONNECTION_DURATION_S, DEFAULT_WS_MAX_CONNECTION_DURATION_S),
    )


def _load_session_settings() -> SessionSettings:
    return SessionSettings(
        max_age_minutes=_positive_float_env(ENV_SESSION_MAX_AGE_MINUTES, DEFAULT_SESSION_MAX_AGE_MINUTES),
        sweep_interval_s=_positive_float_env(ENV_SESSION_SWEEP_INTERVAL_S, DEFAULT_SESSION_SWEEP_INTERVAL_S),
    )


def _load_generation_settings() -> GenerationSettings:
    return GenerationSettings(
        api_key=(os.getenv(ENV_GEMINI_API_KEY) or "").strip(),
        api_base_url=_str_env(ENV_GEMINI_API_BASE_URL, DEFAULT_GEMINI_API_BASE_URL),
        text_model=_str_env(ENV_GEMINI_TEXT_MODEL, DEFAULT_GEMINI_TEXT_MODEL),
        timeout_s=_positive_float_env(ENV_GENERATION_TIMEOUT_S, DEFAULT_GENERATION_TIMEOUT_S),
    )


def _load_speech_settings() -> SpeechSettings:
    return SpeechSettings(
        tts_model=_str_env(ENV_GEMINI_TTS_MODEL, DEFAULT_GEMINI_TTS_MODEL),
        timeout_s=_positive_float_env(ENV_SYNTHESIS_TIMEOUT_S, DEFAULT_SYNTHESIS_TIMEOUT_S),
    )


def load_settings() -> AppSettings:
    return AppSettings(
        auth=_load_auth_settings(),
        limits=_load_limits_settings(),
        websocket=_load_websocket_settings(),
        sessions=_load_session_settings(),
        generation=_load_generation_settings(),
        speech=_load_speech_settings(),
        client_url=_str_env(ENV_CLIENT_URL, DEFAULT_CLIENT_URL),
    )


__all__ = ["load_settings"]
