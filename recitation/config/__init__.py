"""Configuration module exports (constants only)."""

from .languages import SUPPORTED_LANGUAGES, DEFAULT_LANGUAGE
from .limits import DEFAULT_MAX_CONCURRENT_CONNECTIONS

__all__ = [
    "DEFAULT_LANGUAGE",
    "DEFAULT_MAX_CONCURRENT_CONNECTIONS",
    "SUPPORTED_LANGUAGES",
]
