"""FastAPI server for the recitation companion (REST + WebSocket)."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from pydantic import BaseModel
from fastapi.responses import ORJSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi import FastAPI, Request, WebSocket, HTTPException

from recitation.state import RuntimeDeps
from recitation.errors import UnsupportedLanguage
from recitation.config.languages import DEFAULT_LANGUAGE
from recitation.config.websocket import WS_ENDPOINT_PATH
from recitation.runtime.logging import configure_logging
from recitation.runtime.settings_loader import load_settings
from recitation.runtime.dependencies import build_runtime_deps
from recitation.handlers.websocket.manager import handle_websocket_connection

logger = logging.getLogger(__name__)

configure_logging()


class StartSessionRequest(BaseModel):
    topic: str | None = None
    language: str = DEFAULT_LANGUAGE


class SynthesisTestRequest(BaseModel):
    text: str | None = None
    language: str = DEFAULT_LANGUAGE


@asynccontextmanager
async def _lifespan(app: FastAPI):
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        runtime_deps = await build_runtime_deps()
        app.state.runtime_deps = runtime_deps
    runtime_deps.sweeper.start()
    logger.info("runtime: ready")
    try:
        yield
    finally:
        deps = getattr(app.state, "runtime_deps", None)
        if deps is not None:
            await deps.shutdown()


def _runtime_deps(request: Request) -> RuntimeDeps:
    runtime_deps = getattr(request.app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise HTTPException(status_code=503, detail="Runtime dependencies are not initialized")
    return runtime_deps


app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[load_settings().client_url],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.post("/api/session/start")
async def start_session(body: StartSessionRequest, request: Request) -> dict:
    runtime_deps = _runtime_deps(request)
    try:
        started = await runtime_deps.orchestrator.start_session(body.topic, body.language)
    except UnsupportedLanguage as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {
        "success": True,
        "session_id": started.session_id,
        "greeting": started.greeting.to_payload(),
    }


@app.post("/api/tts/test")
async def synthesis_test(body: SynthesisTestRequest, request: Request) -> dict:
    text = (body.text or "").strip()
    if not text:
        raise HTTPException(status_code=400, detail="Text is required")
    runtime_deps = _runtime_deps(request)
    audio = await runtime_deps.orchestrator.synthesize(text, body.language)
    if audio is None:
        raise HTTPException(status_code=503, detail="Speech synthesis unavailable")
    return {"success": True, "audio": audio.as_data_url()}


@app.get("/api/health")
async def api_health(request: Request) -> dict:
    runtime_deps = getattr(request.app.state, "runtime_deps", None)
    if runtime_deps is None:
        return {"status": "starting"}
    return {
        "status": "ok",
        "sessions": runtime_deps.sessions.count(),
        "connections": runtime_deps.connections.get_connection_count(),
    }


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.websocket(WS_ENDPOINT_PATH)
async def websocket_endpoint(websocket: WebSocket) -> None:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    await handle_websocket_connection(websocket, runtime_deps)


__all__ = ["app"]
