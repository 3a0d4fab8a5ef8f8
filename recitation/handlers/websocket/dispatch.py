"""Dispatch handlers for WebSocket JSON envelope messages."""

from __future__ import annotations

import logging
from typing import Any
from collections.abc import Callable, Awaitable

from fastapi import WebSocket

from recitation.state import EnvelopeState, ReplyEnvelope
from recitation.turns import TurnSource
from recitation.state.runtime import RuntimeDeps
from recitation.errors import SessionNotFound, GenerationFailed
from recitation.config.websocket import (
    WS_MSG_UTTERANCE,
    WS_MSG_TEXT_INPUT,
    WS_MSG_AI_RESPONSE,
    WS_MSG_JOIN_SESSION,
    WS_UNKNOWN_SESSION_ID,
    WS_MSG_SESSION_JOINED,
    WS_ERROR_INVALID_PAYLOAD,
    WS_MSG_REQUEST_FEEDBACK,
    WS_MSG_FEEDBACK_RESPONSE,
)

from .errors import send_error, send_turn_error, safe_send_envelope

logger = logging.getLogger(__name__)

HandlerFn = Callable[
    [WebSocket, RuntimeDeps, EnvelopeState, str, str, dict[str, Any]],
    Awaitable[None],
]


def resolve_session_id(session_id: str, state: EnvelopeState) -> str:
    """Fall back to the session this socket joined when a frame omits its id."""
    if session_id == WS_UNKNOWN_SESSION_ID and state.joined_session_id:
        return state.joined_session_id
    return session_id


async def _deliver(
    ws: WebSocket,
    state: EnvelopeState,
    turn: Awaitable[ReplyEnvelope],
    *,
    msg_type: str,
    session_id: str,
    request_id: str,
) -> None:
    state.inflight_turns += 1
    try:
        envelope = await turn
    except (SessionNotFound, GenerationFailed) as exc:
        await send_turn_error(ws, exc, session_id=session_id, request_id=request_id)
        return
    except Exception as exc:
        logger.exception("turn failed session_id=%s request_id=%s", session_id, request_id)
        await send_turn_error(ws, exc, session_id=session_id, request_id=request_id)
        return
    finally:
        state.inflight_turns -= 1
        if state.touch is not None:
            state.touch()

    # A client that went away mid-turn simply never sees the reply.
    await safe_send_envelope(
        ws,
        msg_type=msg_type,
        session_id=session_id,
        request_id=request_id,
        payload=envelope.to_payload(),
    )


async def _handle_join_session(
    ws: WebSocket,
    runtime_deps: RuntimeDeps,
    state: EnvelopeState,
    session_id: str,
    request_id: str,
    _payload: dict[str, Any],
) -> None:
    try:
        confirmation = runtime_deps.orchestrator.rejoin(session_id, ws)
    except SessionNotFound as exc:
        logger.warning("join-session for unknown session %s", session_id)
        await send_turn_error(ws, exc, session_id=session_id, request_id=request_id)
        return

    state.joined_session_id = session_id
    await runtime_deps.connections.bind(ws, session_id)
    await safe_send_envelope(
        ws,
        msg_type=WS_MSG_SESSION_JOINED,
        session_id=session_id,
        request_id=request_id,
        payload={"session_id": confirmation.session_id, "message": confirmation.message},
    )


async def _submit(
    ws: WebSocket,
    runtime_deps: RuntimeDeps,
    state: EnvelopeState,
    session_id: str,
    request_id: str,
    payload: dict[str, Any],
    *,
    key: str,
    source: TurnSource,
) -> None:
    text = payload.get(key)
    if not isinstance(text, str):
        await send_error(
            ws,
            session_id=session_id,
            request_id=request_id,
            error_code=WS_ERROR_INVALID_PAYLOAD,
            message=f"payload.{key} (string) is required",
            reason_code=f"missing_{key}",
        )
        return

    await _deliver(
        ws,
        state,
        runtime_deps.orchestrator.submit_transcript(session_id, text, source=source),
        msg_type=WS_MSG_AI_RESPONSE,
        session_id=session_id,
        request_id=request_id,
    )


async def _handle_text_input(
    ws: WebSocket,
    runtime_deps: RuntimeDeps,
    state: EnvelopeState,
    session_id: str,
    request_id: str,
    payload: dict[str, Any],
) -> None:
    await _submit(ws, runtime_deps, state, session_id, request_id, payload, key="text", source=TurnSource.TEXT)


async def _handle_utterance(
    ws: WebSocket,
    runtime_deps: RuntimeDeps,
    state: EnvelopeState,
    session_id: str,
    request_id: str,
    payload: dict[str, Any],
) -> None:
    await _submit(
        ws, runtime_deps, state, session_id, request_id, payload, key="transcript", source=TurnSource.UTTERANCE
    )


async def _handle_request_feedback(
    ws: WebSocket,
    runtime_deps: RuntimeDeps,
    state: EnvelopeState,
    session_id: str,
    request_id: str,
    _payload: dict[str, Any],
) -> None:
    await _deliver(
        ws,
        state,
        runtime_deps.orchestrator.request_feedback(session_id),
        msg_type=WS_MSG_FEEDBACK_RESPONSE,
        session_id=session_id,
        request_id=request_id,
    )


# Turns wait on generation and synthesis; they run off the receive loop.
TURN_HANDLERS: dict[str, HandlerFn] = {
    WS_MSG_TEXT_INPUT: _handle_text_input,
    WS_MSG_UTTERANCE: _handle_utterance,
    WS_MSG_REQUEST_FEEDBACK: _handle_request_feedback,
}

INLINE_HANDLERS: dict[str, HandlerFn] = {
    WS_MSG_JOIN_SESSION: _handle_join_session,
}

__all__ = ["INLINE_HANDLERS", "TURN_HANDLERS", "HandlerFn", "resolve_session_id"]
