from __future__ import annotations

import asyncio
import base64

import pytest

from recitation.sessions import InMemorySessionStore
from recitation.audio import parse_container_header
from recitation.state import AudioFormat, ReplyIntent, SynthesizedAudio
from recitation.turns import TurnSource, ResponseOrchestrator
from recitation.turns.orchestrator import to_attachment
from recitation.errors import SessionNotFound, GenerationFailed, UnsupportedLanguage


def _orchestrator(generator, synthesizer, **kwargs) -> tuple[ResponseOrchestrator, InMemorySessionStore]:
    store = InMemorySessionStore()
    orchestrator = ResponseOrchestrator(store=store, generator=generator, synthesizer=synthesizer, **kwargs)
    return orchestrator, store


@pytest.mark.asyncio
async def test_start_session_greets_in_session_language(generator, pcm_synthesizer) -> None:
    orchestrator, store = _orchestrator(generator, pcm_synthesizer)

    started = await orchestrator.start_session("Al-Fatiha", "it")

    assert store.get(started.session_id) is not None
    assert started.greeting.intent is ReplyIntent.GREETING
    assert "Corano" in started.greeting.text
    assert started.greeting.audio is not None
    assert pcm_synthesizer.calls == [(started.greeting.text, "it")]
    assert generator.prompts == []


@pytest.mark.asyncio
async def test_start_session_rejects_unsupported_language(generator, pcm_synthesizer) -> None:
    orchestrator, store = _orchestrator(generator, pcm_synthesizer)
    with pytest.raises(UnsupportedLanguage):
        await orchestrator.start_session(None, "fr")
    assert store.count() == 0


@pytest.mark.asyncio
async def test_utterance_gets_acknowledgment_with_wav_audio(generator, pcm_synthesizer, pcm_tone) -> None:
    orchestrator, store = _orchestrator(generator, pcm_synthesizer)
    session_id = store.create(None, "en")

    envelope = await orchestrator.submit_transcript(session_id, "bismillah ir-rahman ir-rahim")

    assert envelope.intent is ReplyIntent.ACKNOWLEDGMENT
    assert envelope.text == generator.reply
    assert envelope.source_transcript == "bismillah ir-rahman ir-rahim"
    assert envelope.audio is not None
    assert envelope.audio.mime_type == "audio/wav"
    header = parse_container_header(envelope.audio.data)
    assert header.sample_rate_hz == 24000
    assert envelope.audio.data[44:] == pcm_tone

    payload = envelope.to_payload()
    assert payload["type"] == "acknowledgment"
    assert payload["audio"].startswith("data:audio/wav;base64,")
    assert base64.b64decode(payload["audio"].split(",", 1)[1]) == envelope.audio.data


@pytest.mark.asyncio
async def test_text_input_gets_response_intent(generator, pcm_synthesizer) -> None:
    orchestrator, store = _orchestrator(generator, pcm_synthesizer)
    session_id = store.create(None, "en")

    envelope = await orchestrator.submit_transcript(
        session_id, "what does al-rahman mean?", source=TurnSource.TEXT
    )
    assert envelope.intent is ReplyIntent.RESPONSE


@pytest.mark.asyncio
async def test_transcript_recorded_before_generation(generator, pcm_synthesizer) -> None:
    orchestrator, store = _orchestrator(generator, pcm_synthesizer)
    session_id = store.create(None, "en")

    await orchestrator.submit_transcript(session_id, "first long recitation")
    await orchestrator.submit_transcript(session_id, "second long recitation")

    session = store.get(session_id)
    assert session is not None
    assert session.history == ["first long recitation", "second long recitation"]
    assert "Previous recitations: first long recitation, second long recitation" in generator.prompts[-1]


@pytest.mark.asyncio
async def test_stalled_utterance_gets_continuation(generator, pcm_synthesizer) -> None:
    orchestrator, store = _orchestrator(generator, pcm_synthesizer)
    session_id = store.create("Al-Fatiha", "en")

    envelope = await orchestrator.submit_transcript(session_id, "alhamdu...")

    assert envelope.intent is ReplyIntent.CONTINUATION
    assert envelope.source_transcript is None
    assert "continuation" in generator.prompts[-1]


@pytest.mark.asyncio
async def test_arabic_feedback_request_end_to_end(generator, pcm_synthesizer) -> None:
    orchestrator, store = _orchestrator(generator, pcm_synthesizer)
    session_id = store.create("Al-Fatiha", "ar")

    envelope = await orchestrator.submit_transcript(session_id, "هل كان هناك خطأ؟")

    assert envelope.intent is ReplyIntent.FEEDBACK
    assert "Respond in Arabic" in generator.prompts[-1]
    assert pcm_synthesizer.calls[-1] == (generator.reply, "ar")
    session = store.get(session_id)
    assert session is not None
    assert session.last_transcript == "هل كان هناك خطأ؟"


@pytest.mark.asyncio
async def test_request_feedback_without_new_transcript(generator, pcm_synthesizer) -> None:
    orchestrator, store = _orchestrator(generator, pcm_synthesizer)
    session_id = store.create(None, "en")
    await orchestrator.submit_transcript(session_id, "maliki yawm id-din")

    envelope = await orchestrator.request_feedback(session_id)

    assert envelope.intent is ReplyIntent.FEEDBACK
    session = store.get(session_id)
    assert session is not None
    assert session.history == ["maliki yawm id-din"]


@pytest.mark.asyncio
async def test_blank_transcript_gets_clarification(generator, pcm_synthesizer) -> None:
    orchestrator, store = _orchestrator(generator, pcm_synthesizer)
    session_id = store.create(None, "en")

    envelope = await orchestrator.submit_transcript(session_id, "   ")

    assert envelope.intent is ReplyIntent.CLARIFICATION
    assert "repeat" in envelope.text
    assert generator.prompts == []
    session = store.get(session_id)
    assert session is not None
    assert session.history == []


@pytest.mark.asyncio
async def test_missing_audio_degrades_to_text_only(generator, silent_synthesizer) -> None:
    orchestrator, store = _orchestrator(generator, silent_synthesizer)
    session_id = store.create(None, "en")

    envelope = await orchestrator.submit_transcript(session_id, "bismillah ir-rahman ir-rahim")

    assert envelope.text == generator.reply
    assert envelope.audio is None
    assert "audio" not in envelope.to_payload()


@pytest.mark.asyncio
async def test_synthesizer_errors_degrade_to_text_only(generator, pcm_synthesizer) -> None:
    pcm_synthesizer.fail_with = RuntimeError("tts down")
    orchestrator, store = _orchestrator(generator, pcm_synthesizer)
    session_id = store.create(None, "en")

    envelope = await orchestrator.submit_transcript(session_id, "bismillah ir-rahman ir-rahim")
    assert envelope.audio is None


@pytest.mark.asyncio
async def test_slow_synthesizer_times_out_to_text_only(generator) -> None:
    class _Slow:
        async def synthesize(self, text: str, language: str) -> SynthesizedAudio | None:
            await asyncio.sleep(5)
            return SynthesizedAudio(format=AudioFormat.PCM, data=b"\x00\x00")

    orchestrator, store = _orchestrator(generator, _Slow(), synthesis_timeout_s=0.01)
    session_id = store.create(None, "en")

    envelope = await orchestrator.submit_transcript(session_id, "bismillah ir-rahman ir-rahim")
    assert envelope.audio is None


@pytest.mark.asyncio
async def test_generation_failure_aborts_turn_before_synthesis(failing_generator, pcm_synthesizer) -> None:
    orchestrator, store = _orchestrator(failing_generator, pcm_synthesizer)
    session_id = store.create(None, "en")

    with pytest.raises(GenerationFailed):
        await orchestrator.submit_transcript(session_id, "bismillah ir-rahman ir-rahim")

    assert pcm_synthesizer.calls == []
    session = store.get(session_id)
    assert session is not None
    assert session.history == ["bismillah ir-rahman ir-rahim"]


@pytest.mark.asyncio
async def test_unexpected_generator_errors_become_generation_failed(generator, pcm_synthesizer) -> None:
    generator.fail_with = KeyError("candidates")
    orchestrator, store = _orchestrator(generator, pcm_synthesizer)
    session_id = store.create(None, "en")

    with pytest.raises(GenerationFailed):
        await orchestrator.submit_transcript(session_id, "bismillah ir-rahman ir-rahim")


@pytest.mark.asyncio
async def test_unknown_session_is_reported(generator, pcm_synthesizer) -> None:
    orchestrator, _ = _orchestrator(generator, pcm_synthesizer)

    with pytest.raises(SessionNotFound):
        await orchestrator.submit_transcript("missing", "bismillah ir-rahman ir-rahim")
    with pytest.raises(SessionNotFound):
        await orchestrator.request_feedback("missing")
    with pytest.raises(SessionNotFound):
        orchestrator.rejoin("missing")
    assert generator.prompts == []


def test_rejoin_replaces_transport(generator, pcm_synthesizer) -> None:
    class _Transport:
        pass

    orchestrator, store = _orchestrator(generator, pcm_synthesizer)
    session_id = store.create(None, "en")
    first, second = _Transport(), _Transport()

    orchestrator.rejoin(session_id, first)
    confirmation = orchestrator.rejoin(session_id, second)

    assert confirmation.session_id == session_id
    assert confirmation.message == "Successfully rejoined session"
    session = store.get(session_id)
    assert session is not None
    assert session.transport is second


def test_to_attachment_passes_through_container_and_remote() -> None:
    container = to_attachment(SynthesizedAudio(format=AudioFormat.CONTAINER, data=b"ID3", mime_type="audio/mpeg"))
    assert container is not None
    assert container.data == b"ID3"
    assert container.mime_type == "audio/mpeg"

    remote = to_attachment(SynthesizedAudio(format=AudioFormat.REMOTE, url="https://cdn.example/a.mp3"))
    assert remote is not None
    assert remote.as_data_url() == "https://cdn.example/a.mp3"

    assert to_attachment(SynthesizedAudio(format=AudioFormat.PCM, data=b"")) is None


def test_to_attachment_logs_wrapped_pcm_duration(pcm_tone: bytes, caplog: pytest.LogCaptureFixture) -> None:
    caplog.set_level("DEBUG", logger="recitation.turns.orchestrator")

    attachment = to_attachment(SynthesizedAudio(format=AudioFormat.PCM, data=pcm_tone))

    assert attachment is not None
    assert attachment.mime_type == "audio/wav"
    assert "tts pcm wrapped: 0.10s at 24000Hz" in caplog.text
