"""Logging and per-session analytics hooks."""

from __future__ import annotations

from mediscript.hooks.logging_config import setup_logging
from mediscript.hooks.session_tracker import (
    end_session,
    get_current_session,
    mark_degraded,
    start_session,
    track_stage,
)

__all__ = [
    "end_session",
    "get_current_session",
    "mark_degraded",
    "setup_logging",
    "start_session",
    "track_stage",
]
