"""Session registry configuration."""

from __future__ import annotations

ENV_SESSION_MAX_AGE_MINUTES = "SESSION_MAX_AGE_MINUTES"
ENV_SESSION_SWEEP_INTERVAL_S = "SESSION_SWEEP_INTERVAL_S"

# Sessions idle for an hour are dropped; the sweep runs every 15 minutes.
DEFAULT_SESSION_MAX_AGE_MINUTES = 60.0
DEFAULT_SESSION_SWEEP_INTERVAL_S = 15 * 60.0

# Normal-path prompts only carry this many previous transcripts.
RECENT_HISTORY_WINDOW = 3

__all__ = [
    "DEFAULT_SESSION_MAX_AGE_MINUTES",
    "DEFAULT_SESSION_SWEEP_INTERVAL_S",
    "ENV_SESSION_MAX_AGE_MINUTES",
    "ENV_SESSION_SWEEP_INTERVAL_S",
    "RECENT_HISTORY_WINDOW",
]
