"""Outbound reply envelope (dataclasses only)."""

from __future__ import annotations

import base64
from enum import Enum
from typing import Any
from dataclasses import dataclass

from recitation.config.audio import MIME_WAV


class ReplyIntent(str, Enum):
    ACKNOWLEDGMENT = "acknowledgment"
    RESPONSE = "response"
    CONTINUATION = "continuation"
    FEEDBACK = "feedback"
    CLARIFICATION = "clarification"
    GREETING = "greeting"


@dataclass(frozen=True, slots=True)
class AudioAttachment:
    """Playable audio: either inline container bytes or a remote URL."""

    mime_type: str = MIME_WAV
    data: bytes = b""
    url: str | None = None

    def as_data_url(self) -> str:
        if self.url:
            return self.url
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.mime_type};base64,{encoded}"


@dataclass(frozen=True, slots=True)
class ReplyEnvelope:
    intent: ReplyIntent
    text: str
    audio: AudioAttachment | None = None
    source_transcript: str | None = None

    def to_payload(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"type": self.intent.value, "text": self.text}
        if self.audio is not None:
            payload["audio"] = self.audio.as_data_url()
        if self.source_transcript is not None:
            payload["transcription"] = self.source_transcript
        return payload


__all__ = ["AudioAttachment", "ReplyEnvelope", "ReplyIntent"]
