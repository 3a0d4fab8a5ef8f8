"""Runtime dependency construction (session store, Gemini clients, orchestrator)."""

from __future__ import annotations

import logging

import httpx

from recitation.state import RuntimeDeps
from recitation.state.settings import AppSettings
from recitation.turns import ResponseOrchestrator
from recitation.handlers.connections import ConnectionManager
from recitation.sessions import SessionStore, SessionSweeper, InMemorySessionStore
from recitation.clients import TextGenerator, SpeechSynthesizer, GeminiTextGenerator, GeminiSpeechSynthesizer

from .settings_loader import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps(
    settings: AppSettings | None = None,
    *,
    store: SessionStore | None = None,
    generator: TextGenerator | None = None,
    synthesizer: SpeechSynthesizer | None = None,
) -> RuntimeDeps:
    settings = settings or load_settings()
    if not settings.generation.api_key and (generator is None or synthesizer is None):
        logger.warning("GEMINI_API_KEY is not set; generation and speech requests will be rejected upstream")

    http_client = httpx.AsyncClient(base_url=settings.generation.api_base_url)
    if generator is None:
        generator = GeminiTextGenerator(
            client=http_client,
            api_key=settings.generation.api_key,
            model=settings.generation.text_model,
            timeout_s=settings.generation.timeout_s,
        )
    if synthesizer is None:
        synthesizer = GeminiSpeechSynthesizer(
            client=http_client,
            api_key=settings.generation.api_key,
            model=settings.speech.tts_model,
            timeout_s=settings.speech.timeout_s,
        )

    store = store or InMemorySessionStore()
    orchestrator = ResponseOrchestrator(
        store=store,
        generator=generator,
        synthesizer=synthesizer,
        synthesis_timeout_s=settings.speech.timeout_s,
    )
    sweeper = SessionSweeper(
        store,
        max_age_minutes=settings.sessions.max_age_minutes,
        interval_s=settings.sessions.sweep_interval_s,
    )

    return RuntimeDeps(
        connections=ConnectionManager(max_connections=settings.limits.max_concurrent_connections),
        sessions=store,
        orchestrator=orchestrator,
        sweeper=sweeper,
        settings=settings,
        _http_client=http_client,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
