from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from recitation.server import app
from recitation.errors import GenerationFailed
from recitation.state import RuntimeDeps
from recitation.turns import ResponseOrchestrator
from recitation.handlers.connections import ConnectionManager
from recitation.sessions import SessionSweeper, InMemorySessionStore
from recitation.state.settings import (
    AppSettings,
    AuthSettings,
    SpeechSettings,
    LimitsSettings,
    SessionSettings,
    WebSocketSettings,
    GenerationSettings,
)

API_KEY = "test-key"


class _NullHttpClient:
    async def aclose(self) -> None:
        return None


def _settings(*, max_messages: int = 60) -> AppSettings:
    return AppSettings(
        auth=AuthSettings(api_key=API_KEY),
        limits=LimitsSettings(
            max_concurrent_connections=4,
            ws_message_window_seconds=60.0,
            ws_max_messages_per_window=max_messages,
        ),
        websocket=WebSocketSettings(idle_timeout_s=600.0, watchdog_tick_s=0.5, max_connection_duration_s=600.0),
        sessions=SessionSettings(max_age_minutes=60.0, sweep_interval_s=900.0),
        generation=GenerationSettings(api_key="", api_base_url="http://gemini.invalid", text_model="m", timeout_s=5.0),
        speech=SpeechSettings(tts_model="tts", timeout_s=5.0),
        client_url="http://localhost:3000",
    )


def _runtime_deps(generator, synthesizer, settings: AppSettings) -> RuntimeDeps:
    store = InMemorySessionStore()
    return RuntimeDeps(
        connections=ConnectionManager(max_connections=settings.limits.max_concurrent_connections),
        sessions=store,
        orchestrator=ResponseOrchestrator(store=store, generator=generator, synthesizer=synthesizer),
        sweeper=SessionSweeper(store, max_age_minutes=60.0, interval_s=900.0),
        settings=settings,
        _http_client=_NullHttpClient(),
    )


@pytest.fixture
def settings() -> AppSettings:
    return _settings()


@pytest.fixture
def client(generator, pcm_synthesizer, settings):
    app.state.runtime_deps = _runtime_deps(generator, pcm_synthesizer, settings)
    try:
        with TestClient(app) as test_client:
            yield test_client
    finally:
        del app.state.runtime_deps


def _start(client: TestClient, language: str = "en") -> str:
    response = client.post("/api/session/start", json={"topic": "Al-Fatiha", "language": language})
    assert response.status_code == 200
    return response.json()["session_id"]


def _ws_url() -> str:
    return f"/ws?api_key={API_KEY}"


def test_health_endpoints(client: TestClient) -> None:
    for path in ("/health", "/healthz"):
        assert client.get(path).json() == {"status": "ok"}
    _start(client)
    body = client.get("/api/health").json()
    assert body["status"] == "ok"
    assert body["sessions"] == 1


def test_start_session_returns_spoken_greeting(client: TestClient) -> None:
    response = client.post("/api/session/start", json={"language": "ar"})
    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["session_id"]
    assert body["greeting"]["type"] == "greeting"
    assert body["greeting"]["text"].startswith("السلام عليكم")
    assert body["greeting"]["audio"].startswith("data:audio/wav;base64,")


def test_start_session_rejects_unsupported_language(client: TestClient) -> None:
    response = client.post("/api/session/start", json={"language": "fr"})
    assert response.status_code == 400


def test_tts_test_endpoint(client: TestClient, pcm_synthesizer) -> None:
    assert client.post("/api/tts/test", json={"language": "en"}).status_code == 400

    response = client.post("/api/tts/test", json={"text": "salam", "language": "en"})
    assert response.status_code == 200
    assert response.json()["audio"].startswith("data:audio/wav;base64,")

    pcm_synthesizer.result = None
    assert client.post("/api/tts/test", json={"text": "salam"}).status_code == 503


def test_websocket_requires_api_key(client: TestClient) -> None:
    with client.websocket_connect("/ws") as ws:
        msg = ws.receive_json()
    assert msg["type"] == "error"
    assert msg["payload"]["code"] == "authentication_failed"


def test_websocket_turns_end_to_end(client: TestClient, generator) -> None:
    session_id = _start(client)

    with client.websocket_connect(_ws_url()) as ws:
        ws.send_json({"type": "join-session", "session_id": session_id, "request_id": "r0"})
        joined = ws.receive_json()
        assert joined["type"] == "session-joined"
        assert joined["payload"] == {"session_id": session_id, "message": "Successfully rejoined session"}

        # Frames after join may omit the session id.
        ws.send_json({"type": "utterance", "request_id": "r1", "payload": {"transcript": "bismillah ir-rahman"}})
        reply = ws.receive_json()
        assert reply["type"] == "ai-response"
        assert reply["session_id"] == session_id
        assert reply["request_id"] == "r1"
        assert reply["payload"]["type"] == "acknowledgment"
        assert reply["payload"]["text"] == generator.reply
        assert reply["payload"]["transcription"] == "bismillah ir-rahman"
        assert reply["payload"]["audio"].startswith("data:audio/wav;base64,")

        ws.send_json({"type": "text-input", "request_id": "r2", "payload": {"text": "what comes after this?"}})
        assert ws.receive_json()["payload"]["type"] == "response"

        ws.send_json({"type": "request-feedback", "session_id": session_id, "request_id": "r3"})
        feedback = ws.receive_json()
        assert feedback["type"] == "feedback-response"
        assert feedback["payload"]["type"] == "feedback"

        ws.send_json({"type": "ping", "request_id": "r4"})
        assert ws.receive_json()["type"] == "pong"

        ws.send_json({"type": "end", "request_id": "r5"})
        assert ws.receive_json()["type"] == "session_end"

    session = app.state.runtime_deps.sessions.get(session_id)
    assert session is not None
    assert session.history == ["bismillah ir-rahman", "what comes after this?"]


def test_websocket_reports_unknown_session(client: TestClient) -> None:
    with client.websocket_connect(_ws_url()) as ws:
        ws.send_json({"type": "join-session", "session_id": "gone", "request_id": "r0"})
        msg = ws.receive_json()
        assert msg["type"] == "error"
        assert msg["payload"]["code"] == "session_not_found"

        ws.send_json({"type": "utterance", "session_id": "gone", "request_id": "r1", "payload": {"transcript": "x"}})
        msg = ws.receive_json()
        assert msg["payload"]["code"] == "session_not_found"


def test_websocket_generation_failure_keeps_connection(client: TestClient, generator) -> None:
    session_id = _start(client)
    generator.fail_with = GenerationFailed("quota")

    with client.websocket_connect(_ws_url()) as ws:
        ws.send_json({"type": "utterance", "session_id": session_id, "payload": {"transcript": "bismillah ir-rahman"}})
        msg = ws.receive_json()
        assert msg["type"] == "error"
        assert msg["payload"]["code"] == "generation_failed"

        generator.fail_with = None
        ws.send_json({"type": "utterance", "session_id": session_id, "payload": {"transcript": "bismillah ir-rahman"}})
        assert ws.receive_json()["type"] == "ai-response"


def test_websocket_rejects_malformed_frames(client: TestClient) -> None:
    session_id = _start(client)

    with client.websocket_connect(_ws_url()) as ws:
        ws.send_text("not json")
        assert ws.receive_json()["payload"]["code"] == "invalid_message"

        ws.send_json({"type": "utterance", "session_id": session_id, "payload": {"text": "wrong key"}})
        assert ws.receive_json()["payload"]["code"] == "invalid_payload"

        ws.send_json({"type": "dance", "session_id": session_id})
        assert ws.receive_json()["payload"]["details"]["reason_code"] == "unknown_message_type"


@pytest.mark.parametrize("settings", [_settings(max_messages=1)])
def test_websocket_rate_limits_turns(client: TestClient) -> None:
    session_id = _start(client)

    with client.websocket_connect(_ws_url()) as ws:
        ws.send_json({"type": "utterance", "session_id": session_id, "payload": {"transcript": "bismillah ir-rahman"}})
        assert ws.receive_json()["type"] == "ai-response"

        ws.send_json({"type": "utterance", "session_id": session_id, "payload": {"transcript": "bismillah ir-rahman"}})
        msg = ws.receive_json()
        assert msg["payload"]["code"] == "rate_limited"

        # Control frames are exempt.
        ws.send_json({"type": "ping"})
        assert ws.receive_json()["type"] == "pong"
