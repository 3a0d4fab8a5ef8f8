"""Gemini REST clients for text generation and speech synthesis."""

from __future__ import annotations

import base64
import logging
import binascii
from typing import Any

import httpx
import orjson

from recitation.state import AudioFormat, SynthesizedAudio
from recitation.config.audio import MIME_PCM_PREFIXES, DEFAULT_SAMPLE_RATE_HZ
from recitation.errors import GenerationFailed, SynthesisUnavailable
from recitation.config.generation import (
    DEFAULT_GEMINI_VOICE,
    GEMINI_API_KEY_HEADER,
    GEMINI_VOICE_BY_LANGUAGE,
)

logger = logging.getLogger(__name__)


def voice_for(language: str) -> str:
    return GEMINI_VOICE_BY_LANGUAGE.get(language, DEFAULT_GEMINI_VOICE)


def _first_parts(body: Any) -> list[dict[str, Any]]:
    if not isinstance(body, dict):
        return []
    candidates = body.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return []
    content = candidates[0].get("content") if isinstance(candidates[0], dict) else None
    parts = content.get("parts") if isinstance(content, dict) else None
    if not isinstance(parts, list):
        return []
    return [p for p in parts if isinstance(p, dict)]


def _parse_pcm_rate(mime_type: str) -> int:
    # e.g. "audio/L16;codec=pcm;rate=24000"
    for param in mime_type.split(";")[1:]:
        key, _, value = param.strip().partition("=")
        if key.strip().lower() == "rate":
            try:
                return int(value.strip())
            except ValueError:
                break
    return DEFAULT_SAMPLE_RATE_HZ


def audio_from_inline_data(inline: dict[str, Any]) -> SynthesizedAudio:
    """Map Gemini `inlineData` onto a format-tagged audio payload."""
    raw_b64 = inline.get("data")
    if not isinstance(raw_b64, str) or not raw_b64:
        raise SynthesisUnavailable("inline audio data is empty")
    try:
        data = base64.b64decode(raw_b64, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise SynthesisUnavailable(f"inline audio is not valid base64: {exc}") from exc

    mime_type = str(inline.get("mimeType") or "").strip()
    if not mime_type or mime_type.lower().startswith(MIME_PCM_PREFIXES):
        return SynthesizedAudio(
            format=AudioFormat.PCM,
            data=data,
            mime_type=mime_type or None,
            sample_rate_hz=_parse_pcm_rate(mime_type),
        )
    return SynthesizedAudio(format=AudioFormat.CONTAINER, data=data, mime_type=mime_type.split(";")[0])


class _GeminiClient:
    def __init__(self, *, client: httpx.AsyncClient, api_key: str, model: str, timeout_s: float) -> None:
        self._client = client
        self._api_key = api_key
        self._model = model
        self._timeout_s = float(timeout_s)

    async def _generate_content(self, body: dict[str, Any]) -> Any:
        response = await self._client.post(
            f"models/{self._model}:generateContent",
            content=orjson.dumps(body),
            headers={GEMINI_API_KEY_HEADER: self._api_key, "content-type": "application/json"},
            timeout=self._timeout_s,
        )
        response.raise_for_status()
        return orjson.loads(response.content)


class GeminiTextGenerator(_GeminiClient):
    async def generate(self, prompt: str) -> str:
        body = {"contents": [{"parts": [{"text": prompt}]}]}
        try:
            result = await self._generate_content(body)
        except httpx.HTTPStatusError as exc:
            raise GenerationFailed(f"{self._model} returned HTTP {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise GenerationFailed(f"{self._model} request failed: {exc!r}") from exc
        except orjson.JSONDecodeError as exc:
            raise GenerationFailed(f"{self._model} returned malformed JSON") from exc

        text = "".join(p["text"] for p in _first_parts(result) if isinstance(p.get("text"), str)).strip()
        if not text:
            raise GenerationFailed(f"{self._model} returned no text")
        return text


class GeminiSpeechSynthesizer(_GeminiClient):
    async def synthesize(self, text: str, language: str) -> SynthesizedAudio | None:
        voice = voice_for(language)
        body = {
            "contents": [{"parts": [{"text": text}]}],
            "generationConfig": {
                "responseModalities": ["AUDIO"],
                "speechConfig": {"voiceConfig": {"prebuiltVoiceConfig": {"voiceName": voice}}},
            },
        }
        try:
            result = await self._generate_content(body)
            for part in _first_parts(result):
                inline = part.get("inlineData")
                if isinstance(inline, dict):
                    return audio_from_inline_data(inline)
            raise SynthesisUnavailable(f"{self._model} returned no audio")
        except SynthesisUnavailable as exc:
            logger.warning("tts: %s (language=%s voice=%s)", exc, language, voice)
            return None
        except (httpx.HTTPError, orjson.JSONDecodeError):
            logger.warning("tts: request failed (language=%s voice=%s)", language, voice, exc_info=True)
            return None


__all__ = ["GeminiSpeechSynthesizer", "GeminiTextGenerator", "audio_from_inline_data", "voice_for"]
