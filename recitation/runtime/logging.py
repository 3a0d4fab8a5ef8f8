"""Logging initialization."""

from __future__ import annotations

import os
import logging

from recitation.config.logging import LOG_LEVEL, LOG_FORMAT

_NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging() -> None:
    # Every Gemini call logs a request line at INFO; keep it quiet unless asked.
    if (os.getenv("SHOW_HTTP_LOGS") or "").strip().lower() not in {"1", "true", "yes"}:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)
    logging.basicConfig(level=LOG_LEVEL, format=LOG_FORMAT)


__all__ = ["configure_logging"]
