"""Generation prompts for each response path."""

from __future__ import annotations

from recitation.state import Session
from recitation.config.sessions import RECENT_HISTORY_WINDOW
from recitation.config.languages import DEFAULT_TOPIC_LABEL, SOURCE_LANGUAGE_NAME, language_name


def _topic(session: Session) -> str:
    return session.topic or DEFAULT_TOPIC_LABEL


def build_normal_prompt(transcript: str, session: Session, *, history_window: int = RECENT_HISTORY_WINDOW) -> str:
    reply_language = language_name(session.language)
    previous = ", ".join(session.recent_history(history_window))
    return (
        "You are an expert Quranic teacher and companion. "
        f"The user is practicing recitation of {_topic(session)}.\n"
        "\n"
        f'Current recitation: "{transcript}"\n'
        f"Language: {session.language}\n"
        f"Previous recitations: {previous}\n"
        "\n"
        "Guidelines:\n"
        f"1. If the user pauses or seems stuck, continue supportively with the next part in clear {SOURCE_LANGUAGE_NAME}\n"
        "2. Be patient and encouraging\n"
        "3. Never correct the user unless they explicitly ask for it\n"
        "4. If they ask a factual question, answer it helpfully\n"
        f"5. Respond strictly in {reply_language}\n"
        "\n"
        "Provide a supportive response:"
    )


def build_feedback_prompt(session: Session) -> str:
    reply_language = language_name(session.language)
    history = ", ".join(session.history)
    return (
        "You are an expert Quranic teacher providing feedback on recitation.\n"
        "\n"
        f'Last recitation: "{session.last_transcript}"\n'
        f"Recitation history: {history}\n"
        f"Surah: {_topic(session)}\n"
        f"Language: {session.language}\n"
        "\n"
        "Please provide:\n"
        "1. Honest and constructive critique\n"
        "2. Specific corrections if there were mistakes\n"
        "3. Correct pronunciation guidance\n"
        "4. Encouragement\n"
        "\n"
        f"Respond in {reply_language}:"
    )


def build_continuation_prompt(session: Session) -> str:
    reply_language = language_name(session.language)
    return (
        f"Provide the next part of the passage for {_topic(session)}.\n"
        "The user seems to need help continuing their recitation.\n"
        f'Last recited: "{session.last_transcript}"\n'
        "\n"
        f"Provide the continuation in clear, {SOURCE_LANGUAGE_NAME}, "
        f"followed by a short encouraging remark in {reply_language}."
    )


__all__ = ["build_continuation_prompt", "build_feedback_prompt", "build_normal_prompt"]
