"""Synthesized speech payloads (dataclasses only)."""

from __future__ import annotations

from enum import Enum
from dataclasses import dataclass

from recitation.config.audio import DEFAULT_CHANNEL_COUNT, DEFAULT_SAMPLE_RATE_HZ, DEFAULT_BITS_PER_SAMPLE


class AudioFormat(str, Enum):
    PCM = "pcm"
    CONTAINER = "container"
    REMOTE = "remote"


@dataclass(frozen=True, slots=True)
class SynthesizedAudio:
    """Bytes (or a URL) returned by a speech synthesizer, tagged with how to interpret them."""

    format: AudioFormat
    data: bytes = b""
    url: str | None = None
    mime_type: str | None = None
    sample_rate_hz: int = DEFAULT_SAMPLE_RATE_HZ
    channel_count: int = DEFAULT_CHANNEL_COUNT
    bits_per_sample: int = DEFAULT_BITS_PER_SAMPLE


__all__ = ["AudioFormat", "SynthesizedAudio"]
