from __future__ import annotations

import sys
from pathlib import Path

import numpy as np
import pytest


def pytest_configure() -> None:
    # Keep `import recitation...` working when running `pytest` from the repo root.
    repo_root = Path(__file__).resolve().parents[1]
    repo_root_str = str(repo_root)
    if repo_root_str not in sys.path:
        sys.path.insert(0, repo_root_str)


from recitation.errors import GenerationFailed  # noqa: E402
from recitation.state import AudioFormat, SynthesizedAudio  # noqa: E402


class FakeGenerator:
    def __init__(self, reply: str = "Well recited, continue.") -> None:
        self.reply = reply
        self.prompts: list[str] = []
        self.fail_with: Exception | None = None

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.fail_with is not None:
            raise self.fail_with
        return self.reply


class FakeSynthesizer:
    def __init__(self, result: SynthesizedAudio | None = None) -> None:
        self.result = result
        self.calls: list[tuple[str, str]] = []
        self.fail_with: Exception | None = None

    async def synthesize(self, text: str, language: str) -> SynthesizedAudio | None:
        self.calls.append((text, language))
        if self.fail_with is not None:
            raise self.fail_with
        return self.result


def sine_pcm16(duration_s: float = 0.1, sample_rate_hz: int = 24000, freq_hz: float = 440.0) -> bytes:
    t = np.arange(int(duration_s * sample_rate_hz), dtype=np.float32) / float(sample_rate_hz)
    samples = (0.3 * np.sin(2.0 * np.pi * freq_hz * t) * 32767.0).astype("<i2")
    return samples.tobytes()


@pytest.fixture
def pcm_tone() -> bytes:
    return sine_pcm16()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()


@pytest.fixture
def failing_generator() -> FakeGenerator:
    gen = FakeGenerator()
    gen.fail_with = GenerationFailed("upstream unavailable")
    return gen


@pytest.fixture
def pcm_synthesizer(pcm_tone: bytes) -> FakeSynthesizer:
    return FakeSynthesizer(SynthesizedAudio(format=AudioFormat.PCM, data=pcm_tone))


@pytest.fixture
def silent_synthesizer() -> FakeSynthesizer:
    return FakeSynthesizer(None)
