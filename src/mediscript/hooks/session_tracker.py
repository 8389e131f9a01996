"""Per-evaluation session tracker using ContextVars.

Usage::

    session = start_session()
    with track_stage("review:gemini") as stage:
        ...
    session = end_session()
    print(session.total_duration_ms)

Tasks spawned inside an active session inherit it (``asyncio`` copies the
context), so each reviewer's stage lands on the same session object.
"""

from __future__ import annotations

import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Generator

import structlog

from mediscript.models import EvaluationSession, StageMetrics

_current_session: ContextVar[EvaluationSession | None] = ContextVar(
    "mediscript_current_session", default=None
)


def get_current_session() -> EvaluationSession | None:
    """Get the active EvaluationSession, or None if no session is active."""
    return _current_session.get()


def start_session(session_id: str | None = None) -> EvaluationSession:
    """Create and activate a new EvaluationSession for the current context."""
    session = EvaluationSession(
        session_id=session_id or uuid.uuid4().hex[:12],
        started_at=datetime.now(timezone.utc),
    )
    _current_session.set(session)
    structlog.contextvars.bind_contextvars(session_id=session.session_id)
    return session


def end_session() -> EvaluationSession | None:
    """Finalize the current session and return it. Returns None if no session is active."""
    session = _current_session.get()
    if session is None:
        return None

    session.finalize()
    _current_session.set(None)
    structlog.contextvars.unbind_contextvars("session_id")
    return session


def mark_degraded(reason: str) -> None:
    """Flag the active session as having used the fallback comparison."""
    session = _current_session.get()
    if session is not None:
        session.degraded = True
        session.errors.append(reason)


@contextmanager
def track_stage(name: str) -> Generator[StageMetrics, None, None]:
    """Record a StageMetrics entry on the current session.

    No-op bookkeeping if no session is active. Exceptions propagate after
    the stage is marked failed.
    """
    session = _current_session.get()
    stage = StageMetrics(stage=name, started_at=datetime.now(timezone.utc))

    try:
        yield stage
    except BaseException as exc:
        stage.succeeded = False
        stage.error = f"{type(exc).__name__}: {exc}"
        if session is not None:
            session.errors.append(f"{name}: {exc}")
        raise
    finally:
        stage.ended_at = datetime.now(timezone.utc)
        if stage.started_at:
            stage.duration_ms = (stage.ended_at - stage.started_at).total_seconds() * 1000
        if session is not None:
            session.stages.append(stage)
