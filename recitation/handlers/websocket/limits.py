"""Rate limiting for WebSocket turns."""

from __future__ import annotations

import math

from fastapi import WebSocket

from recitation.errors import RateLimitError
from recitation.handlers.limits import SlidingWindowRateLimiter
from recitation.config.websocket import (
    WS_MSG_END,
    WS_MSG_PING,
    WS_MSG_PONG,
    WS_MSG_JOIN_SESSION,
    WS_ERROR_RATE_LIMITED,
)

from .errors import send_error

# Frames that never reach the generator are exempt.
_UNLIMITED_TYPES = frozenset({WS_MSG_PING, WS_MSG_PONG, WS_MSG_END, WS_MSG_JOIN_SESSION})


def is_rate_limited_type(msg_type: str) -> bool:
    return msg_type not in _UNLIMITED_TYPES


async def consume_limiter(
    ws: WebSocket,
    limiter: SlidingWindowRateLimiter,
    *,
    session_id: str,
    request_id: str,
) -> bool:
    """Charge one turn against the connection's window; on refusal tell the client when to retry."""
    try:
        limiter.consume()
    except RateLimitError as exc:
        retry_in_s = max(1, math.ceil(exc.retry_in))
        window_s = int(exc.window_seconds)
        await send_error(
            ws,
            session_id=session_id,
            request_id=request_id,
            error_code=WS_ERROR_RATE_LIMITED,
            message=f"at most {exc.limit} turns per {window_s} seconds; retry in {retry_in_s} seconds",
            reason_code="turn_rate_limited",
            details={"retry_in": retry_in_s, "limit": exc.limit, "window_seconds": window_s},
        )
        return False
    return True


__all__ = ["consume_limiter", "is_rate_limited_type"]
