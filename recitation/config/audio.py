"""Audio container constants."""

from __future__ import annotations

# Gemini TTS emits 24kHz mono PCM16.
DEFAULT_SAMPLE_RATE_HZ = 24000
DEFAULT_CHANNEL_COUNT = 1
DEFAULT_BITS_PER_SAMPLE = 16

WAV_HEADER_SIZE = 44
WAV_FORMAT_PCM = 1

MIME_WAV = "audio/wav"
MIME_PCM_PREFIXES = ("audio/l16", "audio/pcm")

__all__ = [
    "DEFAULT_BITS_PER_SAMPLE",
    "DEFAULT_CHANNEL_COUNT",
    "DEFAULT_SAMPLE_RATE_HZ",
    "MIME_PCM_PREFIXES",
    "MIME_WAV",
    "WAV_FORMAT_PCM",
    "WAV_HEADER_SIZE",
]
