"""Gemini text and speech configuration."""

from __future__ import annotations

ENV_GEMINI_API_BASE_URL = "GEMINI_API_BASE_URL"
ENV_GEMINI_TEXT_MODEL = "GEMINI_TEXT_MODEL"
ENV_GEMINI_TTS_MODEL = "GEMINI_TTS_MODEL"
ENV_GENERATION_TIMEOUT_S = "GENERATION_TIMEOUT_S"
ENV_SYNTHESIS_TIMEOUT_S = "SYNTHESIS_TIMEOUT_S"

DEFAULT_GEMINI_API_BASE_URL = "https://generativelanguage.googleapis.com/v1beta"
DEFAULT_GEMINI_TEXT_MODEL = "gemini-2.5-flash"
DEFAULT_GEMINI_TTS_MODEL = "gemini-2.5-flash-preview-tts"
DEFAULT_GENERATION_TIMEOUT_S = 60.0
DEFAULT_SYNTHESIS_TIMEOUT_S = 30.0

GEMINI_API_KEY_HEADER = "x-goog-api-key"

# Prebuilt Gemini voices per interface language.
GEMINI_VOICE_BY_LANGUAGE: dict[str, str] = {
    "en": "Kore",
    "ar": "Aoede",
    "it": "Kore",
}
DEFAULT_GEMINI_VOICE = "Kore"

__all__ = [
    "DEFAULT_GEMINI_API_BASE_URL",
    "DEFAULT_GEMINI_TEXT_MODEL",
    "DEFAULT_GEMINI_TTS_MODEL",
    "DEFAULT_GEMINI_VOICE",
    "DEFAULT_GENERATION_TIMEOUT_S",
    "DEFAULT_SYNTHESIS_TIMEOUT_S",
    "ENV_GEMINI_API_BASE_URL",
    "ENV_GEMINI_TEXT_MODEL",
    "ENV_GEMINI_TTS_MODEL",
    "ENV_GENERATION_TIMEOUT_S",
    "ENV_SYNTHESIS_TIMEOUT_S",
    "GEMINI_API_KEY_HEADER",
    "GEMINI_VOICE_BY_LANGUAGE",
]
