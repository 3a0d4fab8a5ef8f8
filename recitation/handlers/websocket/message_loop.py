"""WebSocket receive loop for recitation sessions (/ws)."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any, Literal

from fastapi import WebSocket, WebSocketDisconnect

from recitation.state import EnvelopeState
from recitation.state.runtime import RuntimeDeps
from recitation.handlers.limits import SlidingWindowRateLimiter
from recitation.config.websocket import (
    WS_MSG_END,
    WS_MSG_PING,
    WS_MSG_PONG,
    WS_MSG_SESSION_END,
    WS_UNKNOWN_SESSION_ID,
    WS_ERROR_INVALID_MESSAGE,
    WS_CLOSE_CLIENT_REQUEST_CODE,
)

from .parser import parse_client_message
from .lifecycle import WebSocketLifecycle
from .errors import send_error, safe_send_envelope
from .limits import consume_limiter, is_rate_limited_type
from .dispatch import TURN_HANDLERS, INLINE_HANDLERS, resolve_session_id

logger = logging.getLogger(__name__)


async def _recv_text_with_watchdog(ws: WebSocket, lifecycle: WebSocketLifecycle) -> tuple[str | None, bool]:
    try:
        message = await asyncio.wait_for(
            ws.receive_text(),
            timeout=lifecycle.watchdog_tick_s * 2,
        )
        return message, False
    except TimeoutError:
        return None, lifecycle.should_close()


async def _handle_control_message(
    ws: WebSocket,
    msg_type: str,
    *,
    session_id: str,
    request_id: str,
) -> Literal["none", "continue", "close"]:
    if msg_type == WS_MSG_PING:
        await safe_send_envelope(ws, msg_type=WS_MSG_PONG, session_id=session_id, request_id=request_id, payload={})
        return "continue"
    if msg_type == WS_MSG_PONG:
        return "continue"
    if msg_type == WS_MSG_END:
        await safe_send_envelope(ws, msg_type=WS_MSG_SESSION_END, session_id=session_id, request_id=request_id, payload={})
        with contextlib.suppress(Exception):
            await ws.close(code=WS_CLOSE_CLIENT_REQUEST_CODE)
        return "close"
    return "none"


async def _parse_or_send_error(ws: WebSocket, raw: str, state: EnvelopeState) -> dict[str, Any] | None:
    try:
        return parse_client_message(raw)
    except ValueError as exc:
        await send_error(
            ws,
            session_id=state.session_id,
            request_id=state.request_id,
            error_code=WS_ERROR_INVALID_MESSAGE,
            message=str(exc),
            reason_code="invalid_message",
        )
        return None


def _spawn_turn(turns: set[asyncio.Task], coro: Any) -> None:
    task = asyncio.create_task(coro)
    turns.add(task)
    task.add_done_callback(turns.discard)


async def run_message_loop(
    ws: WebSocket,
    lifecycle: WebSocketLifecycle,
    limiter: SlidingWindowRateLimiter,
    runtime_deps: RuntimeDeps,
    state: EnvelopeState | None = None,
) -> str | None:
    """Serve frames until the client leaves; returns the last session id seen.

    Turns in flight when the socket closes are not cancelled. They finish
    server-side and their replies are dropped.
    """
    state = state or EnvelopeState()
    state.touch = lifecycle.touch
    turns: set[asyncio.Task] = set()

    try:
        while True:
            raw, should_exit = await _recv_text_with_watchdog(ws, lifecycle)
            if should_exit:
                break
            if raw is None:
                continue

            lifecycle.touch()

            msg = await _parse_or_send_error(ws, raw, state)
            if msg is None:
                continue

            msg_type = msg["type"]
            session_id = resolve_session_id(msg["session_id"], state)
            request_id = msg["request_id"]
            payload = msg["payload"]

            state.session_id = session_id
            state.request_id = request_id

            if is_rate_limited_type(msg_type):
                ok = await consume_limiter(ws, limiter, session_id=session_id, request_id=request_id)
                if not ok:
                    continue

            control = await _handle_control_message(ws, msg_type, session_id=session_id, request_id=request_id)
            if control == "close":
                break
            if control == "continue":
                continue

            inline = INLINE_HANDLERS.get(msg_type)
            if inline is not None:
                await inline(ws, runtime_deps, state, session_id, request_id, payload)
                continue

            turn = TURN_HANDLERS.get(msg_type)
            if turn is not None:
                _spawn_turn(turns, turn(ws, runtime_deps, state, session_id, request_id, payload))
                continue

            await send_error(
                ws,
                session_id=session_id,
                request_id=request_id,
                error_code=WS_ERROR_INVALID_MESSAGE,
                message=f"message type '{msg_type}' is not supported",
                reason_code="unknown_message_type",
            )
    except WebSocketDisconnect:
        pass

    if turns:
        logger.debug("connection closed with %s turn(s) still running", len(turns))
    return state.session_id if state.session_id != WS_UNKNOWN_SESSION_ID else None


__all__ = ["run_message_loop"]
