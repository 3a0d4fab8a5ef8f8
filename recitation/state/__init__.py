from .session import Session
from .runtime import RuntimeDeps
from .settings import AppSettings
from .envelope import EnvelopeState
from .speech import AudioFormat, SynthesizedAudio
from .reply import ReplyIntent, ReplyEnvelope, AudioAttachment

__all__ = [
    "AppSettings",
    "AudioAttachment",
    "AudioFormat",
    "EnvelopeState",
    "ReplyEnvelope",
    "ReplyIntent",
    "RuntimeDeps",
    "Session",
    "SynthesizedAudio",
]
