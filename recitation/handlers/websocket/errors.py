"""Outbound envelopes for the /ws protocol, including structured errors."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from recitation.errors import SessionNotFound, GenerationFailed
from recitation.config.websocket import (
    WS_KEY_TYPE,
    WS_MSG_ERROR,
    WS_KEY_PAYLOAD,
    WS_ERROR_INTERNAL,
    WS_KEY_REQUEST_ID,
    WS_KEY_SESSION_ID,
    WS_UNKNOWN_REQUEST_ID,
    WS_UNKNOWN_SESSION_ID,
    WS_ERROR_GENERATION_FAILED,
    WS_ERROR_SESSION_NOT_FOUND,
)

logger = logging.getLogger(__name__)

# exception type -> (error code, client message, reason code)
_TURN_ERRORS: dict[type[Exception], tuple[str, str, str]] = {
    SessionNotFound: (WS_ERROR_SESSION_NOT_FOUND, "Session not found", "session_expired"),
    GenerationFailed: (WS_ERROR_GENERATION_FAILED, "Failed to generate a reply for this turn", "generation_failed"),
}


def build_error_payload(
    code: str,
    message: str,
    *,
    details: dict[str, Any] | None = None,
    reason_code: str | None = None,
) -> dict[str, Any]:
    merged = dict(details or {})
    if reason_code:
        merged.setdefault("reason_code", reason_code)
    return {"code": code, "message": message, "details": merged}


def build_envelope(
    msg_type: str,
    session_id: str | None,
    request_id: str | None,
    payload: dict[str, Any] | None = None,
) -> dict[str, Any]:
    return {
        WS_KEY_TYPE: msg_type,
        WS_KEY_SESSION_ID: session_id or WS_UNKNOWN_SESSION_ID,
        WS_KEY_REQUEST_ID: request_id or WS_UNKNOWN_REQUEST_ID,
        WS_KEY_PAYLOAD: payload or {},
    }


async def safe_send_envelope(
    ws: WebSocket,
    *,
    msg_type: str,
    session_id: str | None,
    request_id: str | None,
    payload: dict[str, Any] | None = None,
) -> bool:
    """Send one envelope; a closed or broken socket yields False instead of raising."""
    frame = orjson.dumps(build_envelope(msg_type, session_id, request_id, payload)).decode("utf-8")
    try:
        await ws.send_text(frame)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("dropping %s envelope for session %s: send failed", msg_type, session_id, exc_info=True)
        return False
    return True


async def send_error(
    ws: WebSocket,
    *,
    session_id: str | None,
    request_id: str | None,
    error_code: str,
    message: str,
    reason_code: str | None = None,
    details: dict[str, Any] | None = None,
) -> bool:
    return await safe_send_envelope(
        ws,
        msg_type=WS_MSG_ERROR,
        session_id=session_id,
        request_id=request_id,
        payload=build_error_payload(error_code, message, details=details, reason_code=reason_code),
    )


async def send_turn_error(ws: WebSocket, exc: Exception, *, session_id: str, request_id: str) -> bool:
    """Report a failed turn to the client; the connection and session stay usable."""
    code, message, reason = _TURN_ERRORS.get(type(exc), (WS_ERROR_INTERNAL, "internal error", None))
    return await send_error(
        ws,
        session_id=session_id,
        request_id=request_id,
        error_code=code,
        message=message,
        reason_code=reason,
    )


async def reject_connection(ws: WebSocket, *, error_code: str, message: str, close_code: int) -> None:
    # The handshake has to complete before a structured error can be delivered.
    try:
        await ws.accept()
    except Exception:
        return
    await send_error(
        ws,
        session_id=None,
        request_id=None,
        error_code=error_code,
        message=message,
        reason_code=error_code,
    )
    try:
        await ws.close(code=close_code, reason=message)
    except Exception:
        logger.debug("close after rejection failed", exc_info=True)


__all__ = [
    "build_envelope",
    "build_error_payload",
    "reject_connection",
    "safe_send_envelope",
    "send_error",
    "send_turn_error",
]
