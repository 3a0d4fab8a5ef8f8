"""WebSocket protocol configuration and constants."""

from __future__ import annotations

WS_ENDPOINT_PATH = "/ws"

# Envelope keys
WS_KEY_TYPE = "type"
WS_KEY_SESSION_ID = "session_id"
WS_KEY_REQUEST_ID = "request_id"
WS_KEY_PAYLOAD = "payload"

WS_UNKNOWN_SESSION_ID = "unknown"
WS_UNKNOWN_REQUEST_ID = "unknown"

# Close codes
WS_CLOSE_CLIENT_REQUEST_CODE = 1000
WS_CLOSE_IDLE_CODE = 4000
WS_CLOSE_UNAUTHORIZED_CODE = 4001
WS_CLOSE_BUSY_CODE = 4002
WS_CLOSE_MAX_DURATION_CODE = 4003

WS_CLOSE_IDLE_REASON = "idle timeout"
WS_CLOSE_MAX_DURATION_REASON = "max connection duration reached"

# Idle watchdog
ENV_WS_IDLE_TIMEOUT_S = "WS_IDLE_TIMEOUT_S"
ENV_WS_WATCHDOG_TICK_S = "WS_WATCHDOG_TICK_S"
ENV_WS_MAX_CONNECTION_DURATION_S = "WS_MAX_CONNECTION_DURATION_S"

# Recitation pauses are long; keep the socket around well past a typical breath.
DEFAULT_WS_IDLE_TIMEOUT_S = 600.0
DEFAULT_WS_WATCHDOG_TICK_S = 5.0
DEFAULT_WS_MAX_CONNECTION_DURATION_S = 2 * 60 * 60.0

# Client message types
WS_MSG_JOIN_SESSION = "join-session"
WS_MSG_TEXT_INPUT = "text-input"
WS_MSG_UTTERANCE = "utterance"
WS_MSG_REQUEST_FEEDBACK = "request-feedback"
WS_MSG_PING = "ping"
WS_MSG_PONG = "pong"
WS_MSG_END = "end"

# Server message types
WS_MSG_SESSION_JOINED = "session-joined"
WS_MSG_AI_RESPONSE = "ai-response"
WS_MSG_FEEDBACK_RESPONSE = "feedback-response"
WS_MSG_SESSION_END = "session_end"
WS_MSG_ERROR = "error"

# Errors (payload.code values)
WS_ERROR_AUTH_FAILED = "authentication_failed"
WS_ERROR_SERVER_AT_CAPACITY = "server_at_capacity"
WS_ERROR_INVALID_MESSAGE = "invalid_message"
WS_ERROR_INVALID_PAYLOAD = "invalid_payload"
WS_ERROR_RATE_LIMITED = "rate_limited"
WS_ERROR_SESSION_NOT_FOUND = "session_not_found"
WS_ERROR_GENERATION_FAILED = "generation_failed"
WS_ERROR_INTERNAL = "internal_error"

__all__ = [
    "DEFAULT_WS_IDLE_TIMEOUT_S",
    "DEFAULT_WS_MAX_CONNECTION_DURATION_S",
    "DEFAULT_WS_WATCHDOG_TICK_S",
    "ENV_WS_IDLE_TIMEOUT_S",
    "ENV_WS_MAX_CONNECTION_DURATION_S",
    "ENV_WS_WATCHDOG_TICK_S",
    "WS_CLOSE_BUSY_CODE",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    "WS_CLOSE_IDLE_CODE",
    "WS_CLOSE_IDLE_REASON",
    "WS_CLOSE_MAX_DURATION_CODE",
    "WS_CLOSE_MAX_DURATION_REASON",
    "WS_CLOSE_UNAUTHORIZED_CODE",
    "WS_ENDPOINT_PATH",
    "WS_ERROR_AUTH_FAILED",
    "WS_ERROR_GENERATION_FAILED",
    "WS_ERROR_INTERNAL",
    "WS_ERROR_INVALID_MESSAGE",
    "WS_ERROR_INVALID_PAYLOAD",
    "WS_ERROR_RATE_LIMITED",
    "WS_ERROR_SERVER_AT_CAPACITY",
    "WS_ERROR_SESSION_NOT_FOUND",
    "WS_KEY_PAYLOAD",
    "WS_KEY_REQUEST_ID",
    "WS_KEY_SESSION_ID",
    "WS_KEY_TYPE",
    "WS_MSG_AI_RESPONSE",
    "WS_MSG_END",
    "WS_MSG_ERROR",
    "WS_MSG_FEEDBACK_RESPONSE",
    "WS_MSG_JOIN_SESSION",
    "WS_MSG_PING",
    "WS_MSG_PONG",
    "WS_MSG_REQUEST_FEEDBACK",
    "WS_MSG_SESSION_END",
    "WS_MSG_SESSION_JOINED",
    "WS_MSG_TEXT_INPUT",
    "WS_MSG_UTTERANCE",
    "WS_UNKNOWN_REQUEST_ID",
    "WS_UNKNOWN_SESSION_ID",
]
