"""Contracts for the external collaborators a turn depends on."""

from __future__ import annotations

from typing import Protocol

from recitation.state import SynthesizedAudio


class TextGenerator(Protocol):
    async def generate(self, prompt: str) -> str:
        """Return generated text; raise `GenerationFailed` on any failure."""
        ...


class SpeechSynthesizer(Protocol):
    async def synthesize(self, text: str, language: str) -> SynthesizedAudio | None:
        """Return audio, or `None` when nothing could be synthesized."""
        ...


__all__ = ["SpeechSynthesizer", "TextGenerator"]
