"""Turn-intent classification."""

from __future__ import annotations

from enum import Enum

from recitation.state import Session
from recitation.config.languages import ASSISTANCE_MARKERS, ASSISTANCE_MIN_LENGTH, feedback_keywords_for


class TurnIntent(str, Enum):
    FEEDBACK_REQUEST = "feedback_request"
    ASSISTANCE_NEEDED = "assistance_needed"
    NORMAL = "normal"


def is_feedback_request(transcript: str, language: str) -> bool:
    lowered = transcript.lower()
    return any(keyword.lower() in lowered for keyword in feedback_keywords_for(language))


def needs_assistance(transcript: str) -> bool:
    # Crude proxy for "trailed off": very short, or an explicit ellipsis.
    if len(transcript) < ASSISTANCE_MIN_LENGTH:
        return True
    return any(marker in transcript for marker in ASSISTANCE_MARKERS)


def classify(transcript: str, session: Session) -> TurnIntent:
    """Pick the response path for a turn.

    An explicit feedback request always wins, even when the utterance is also
    short enough to look like the speaker stalled. The session is read, never
    mutated; the orchestrator records the transcript before calling this.
    """
    if is_feedback_request(transcript, session.language):
        return TurnIntent.FEEDBACK_REQUEST
    if needs_assistance(transcript):
        return TurnIntent.ASSISTANCE_NEEDED
    return TurnIntent.NORMAL


__all__ = ["TurnIntent", "classify", "is_feedback_request", "needs_assistance"]
