"""Secrets and authentication configuration."""

from __future__ import annotations

ENV_RECITATION_API_KEY = "RECITATION_API_KEY"
ENV_GEMINI_API_KEY = "GEMINI_API_KEY"

__all__ = ["ENV_GEMINI_API_KEY", "ENV_RECITATION_API_KEY"]
