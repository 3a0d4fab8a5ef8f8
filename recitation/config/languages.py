"""Supported interface languages and their canned strings."""

from __future__ import annotations

DEFAULT_LANGUAGE = "en"
SUPPORTED_LANGUAGES: tuple[str, ...] = ("en", "ar", "it")

LANGUAGE_NAMES: dict[str, str] = {
    "en": "English",
    "ar": "Arabic",
    "it": "Italian",
}

# Passages are always recited in Classical Arabic regardless of interface language.
SOURCE_LANGUAGE_NAME = "classical Arabic"

DEFAULT_TOPIC_LABEL = "the Quran"

GREETINGS: dict[str, str] = {
    "en": (
        "Assalamu alaikum! I'm your AI Quran teacher. Which Surah or section would you like to practice today?"
    ),
    "ar": "السلام عليكم! أنا معلم القرآن الذكي. أي سورة أو قسم تريد أن تمارسه اليوم؟",
    "it": (
        "Assalamu alaikum! Sono il tuo insegnante AI del Corano. "
        "Quale Sura o sezione vorresti praticare oggi?"
    ),
}

CLARIFICATIONS: dict[str, str] = {
    "en": "I didn't understand clearly. Could you please repeat the last part?",
    "ar": "لم أفهم بوضوح. هل يمكنك إعادة الجزء الأخير؟",
    "it": "Non ho capito chiaramente. Potresti ripetere l'ultima parte?",
}

FEEDBACK_KEYWORDS: dict[str, tuple[str, ...]] = {
    "en": ("mistake", "correct", "wrong", "feedback", "how did i do"),
    "ar": ("خطأ", "صحيح", "غلط", "تقييم"),
    "it": ("sbaglio", "corretto", "errore", "feedback"),
}

# Anything shorter reads as the speaker trailing off.
ASSISTANCE_MIN_LENGTH = 10
ASSISTANCE_MARKERS: tuple[str, ...] = ("...", "…")


def language_name(language: str) -> str:
    return LANGUAGE_NAMES.get(language, LANGUAGE_NAMES[DEFAULT_LANGUAGE])


def is_supported_language(language: str) -> bool:
    return language in SUPPORTED_LANGUAGES


def greeting_for(language: str) -> str:
    return GREETINGS.get(language, GREETINGS[DEFAULT_LANGUAGE])


def clarification_for(language: str) -> str:
    return CLARIFICATIONS.get(language, CLARIFICATIONS[DEFAULT_LANGUAGE])


def feedback_keywords_for(language: str) -> tuple[str, ...]:
    return FEEDBACK_KEYWORDS.get(language, FEEDBACK_KEYWORDS[DEFAULT_LANGUAGE])


__all__ = [
    "ASSISTANCE_MARKERS",
    "ASSISTANCE_MIN_LENGTH",
    "CLARIFICATIONS",
    "DEFAULT_LANGUAGE",
    "DEFAULT_TOPIC_LABEL",
    "FEEDBACK_KEYWORDS",
    "GREETINGS",
    "LANGUAGE_NAMES",
    "SOURCE_LANGUAGE_NAME",
    "SUPPORTED_LANGUAGES",
    "clarification_for",
    "feedback_keywords_for",
    "greeting_for",
    "is_supported_language",
    "language_name",
]
