"""Turn orchestration: classify, generate, synthesize, deliver.

Each turn runs `Received -> Classified -> Generating -> Synthesizing ->
Delivered` to completion; nothing survives between turns except what the
session store records in `Received`. Generation failures abort the turn before
synthesis; synthesis failures never do, the reply just goes out text-only.
"""

from __future__ import annotations

import enum
import asyncio
import logging
import weakref
from typing import Any
from dataclasses import dataclass

from recitation.audio import encode_container, pcm_duration_seconds
from recitation.config.audio import MIME_WAV
from recitation.sessions import SessionStore
from recitation.config.generation import DEFAULT_SYNTHESIS_TIMEOUT_S
from recitation.clients import TextGenerator, SpeechSynthesizer
from recitation.errors import InvalidFormat, SessionNotFound, GenerationFailed, UnsupportedLanguage
from recitation.state import Session, AudioFormat, ReplyIntent, ReplyEnvelope, AudioAttachment, SynthesizedAudio
from recitation.config.languages import (
    DEFAULT_LANGUAGE,
    SUPPORTED_LANGUAGES,
    greeting_for,
    clarification_for,
    is_supported_language,
)

from .classifier import TurnIntent, classify
from .prompts import build_normal_prompt, build_feedback_prompt, build_continuation_prompt

logger = logging.getLogger(__name__)


class TurnStage(str, enum.Enum):
    RECEIVED = "received"
    CLASSIFIED = "classified"
    GENERATING = "generating"
    SYNTHESIZING = "synthesizing"
    DELIVERED = "delivered"


class TurnSource(str, enum.Enum):
    UTTERANCE = "utterance"
    TEXT = "text"


@dataclass(frozen=True, slots=True)
class SessionStart:
    session_id: str
    greeting: ReplyEnvelope


@dataclass(frozen=True, slots=True)
class RejoinConfirmation:
    session_id: str
    message: str = "Successfully rejoined session"


def _log_stage(session_id: str, stage: TurnStage, **extra: Any) -> None:
    if extra:
        details = " ".join(f"{k}={v}" for k, v in extra.items())
        logger.debug("turn session=%s stage=%s %s", session_id, stage.value, details)
    else:
        logger.debug("turn session=%s stage=%s", session_id, stage.value)


class ResponseOrchestrator:
    def __init__(
        self,
        *,
        store: SessionStore,
        generator: TextGenerator,
        synthesizer: SpeechSynthesizer,
        synthesis_timeout_s: float = DEFAULT_SYNTHESIS_TIMEOUT_S,
    ) -> None:
        self._store = store
        self._generator = generator
        self._synthesizer = synthesizer
        self._synthesis_timeout_s = float(synthesis_timeout_s)

    # Transport boundary

    async def start_session(self, topic: str | None = None, language: str = DEFAULT_LANGUAGE) -> SessionStart:
        if not is_supported_language(language):
            raise UnsupportedLanguage(language=language, supported=SUPPORTED_LANGUAGES)
        topic = (topic or "").strip() or None
        session_id = self._store.create(topic, language)

        text = greeting_for(language)
        audio = await self.synthesize(text, language)
        greeting = ReplyEnvelope(intent=ReplyIntent.GREETING, text=text, audio=audio)
        return SessionStart(session_id=session_id, greeting=greeting)

    async def submit_transcript(
        self,
        session_id: str,
        text: str,
        *,
        source: TurnSource = TurnSource.UTTERANCE,
    ) -> ReplyEnvelope:
        session = self._require_session(session_id)
        transcript = (text or "").strip()
        if not transcript:
            # Speech recognition produced nothing usable; nothing to record.
            return await self._clarification(session)

        session = await self._store.append_turn(session_id, transcript)
        if session is None:
            raise SessionNotFound(session_id)
        _log_stage(session_id, TurnStage.RECEIVED, history=len(session.history))

        intent = classify(transcript, session)
        _log_stage(session_id, TurnStage.CLASSIFIED, intent=intent.value)

        if intent is TurnIntent.FEEDBACK_REQUEST:
            return await self._feedback(session)
        if intent is TurnIntent.ASSISTANCE_NEEDED:
            return await self._reply(session, ReplyIntent.CONTINUATION, build_continuation_prompt(session))

        reply_intent = ReplyIntent.RESPONSE if source is TurnSource.TEXT else ReplyIntent.ACKNOWLEDGMENT
        return await self._reply(
            session,
            reply_intent,
            build_normal_prompt(transcript, session),
            source_transcript=transcript,
        )

    async def request_feedback(self, session_id: str) -> ReplyEnvelope:
        session = self._require_session(session_id)
        return await self._feedback(session)

    def rejoin(self, session_id: str, transport: Any | None = None) -> RejoinConfirmation:
        transport_ref = weakref.ref(transport) if transport is not None else None
        if not self._store.update(session_id, transport_ref=transport_ref):
            raise SessionNotFound(session_id)
        logger.info("session %s rejoined", session_id)
        return RejoinConfirmation(session_id=session_id)

    # Paths

    def _require_session(self, session_id: str) -> Session:
        session = self._store.get(session_id)
        if session is None:
            raise SessionNotFound(session_id)
        return session

    async def _feedback(self, session: Session) -> ReplyEnvelope:
        return await self._reply(session, ReplyIntent.FEEDBACK, build_feedback_prompt(session))

    async def _clarification(self, session: Session) -> ReplyEnvelope:
        text = clarification_for(session.language)
        audio = await self.synthesize(text, session.language)
        return ReplyEnvelope(intent=ReplyIntent.CLARIFICATION, text=text, audio=audio)

    async def _reply(
        self,
        session: Session,
        intent: ReplyIntent,
        prompt: str,
        *,
        source_transcript: str | None = None,
    ) -> ReplyEnvelope:
        _log_stage(session.id, TurnStage.GENERATING, intent=intent.value)
        try:
            text = await self._generator.generate(prompt)
        except GenerationFailed:
            logger.warning("turn session=%s: generation failed", session.id, exc_info=True)
            raise
        except Exception as exc:
            logger.exception("turn session=%s: generator raised unexpectedly", session.id)
            raise GenerationFailed(repr(exc)) from exc

        _log_stage(session.id, TurnStage.SYNTHESIZING, chars=len(text))
        audio = await self.synthesize(text, session.language)

        _log_stage(session.id, TurnStage.DELIVERED, audio=audio is not None)
        return ReplyEnvelope(intent=intent, text=text, audio=audio, source_transcript=source_transcript)

    # Speech

    async def synthesize(self, text: str, language: str) -> AudioAttachment | None:
        """Synthesize `text`, degrading to `None` on any failure, timeout, or empty result."""
        try:
            result = await asyncio.wait_for(
                self._synthesizer.synthesize(text, language),
                timeout=self._synthesis_timeout_s,
            )
        except TimeoutError:
            logger.warning("tts timed out after %.1fs; replying text-only", self._synthesis_timeout_s)
            return None
        except Exception:
            logger.warning("tts failed; replying text-only", exc_info=True)
            return None

        if result is None:
            logger.warning("tts returned no audio; replying text-only")
            return None
        try:
            return to_attachment(result)
        except InvalidFormat:
            logger.exception("tts returned audio that cannot be containerized")
            return None


def to_attachment(audio: SynthesizedAudio) -> AudioAttachment | None:
    """Make synthesizer output browser-playable; raw PCM is wrapped, everything else passes through."""
    if audio.format is AudioFormat.REMOTE:
        if not audio.url:
            return None
        return AudioAttachment(mime_type=audio.mime_type or MIME_WAV, url=audio.url)
    if not audio.data:
        return None
    if audio.format is AudioFormat.PCM:
        container = encode_container(
            audio.data,
            sample_rate_hz=audio.sample_rate_hz,
            channel_count=audio.channel_count,
            bits_per_sample=audio.bits_per_sample,
        )
        logger.debug(
            "tts pcm wrapped: %.2fs at %sHz",
            pcm_duration_seconds(len(audio.data), audio.sample_rate_hz, audio.channel_count, audio.bits_per_sample),
            audio.sample_rate_hz,
        )
        return AudioAttachment(mime_type=MIME_WAV, data=container)
    return AudioAttachment(mime_type=audio.mime_type or MIME_WAV, data=audio.data)


__all__ = [
    "RejoinConfirmation",
    "ResponseOrchestrator",
    "SessionStart",
    "TurnSource",
    "TurnStage",
    "to_attachment",
]
