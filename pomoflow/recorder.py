"""Bridge between timer lifecycle events and the session history.

``SessionRecorder`` is registered as a ``TimerEngine`` listener.  It is
the only writer of ``pomodoro_sessions`` rows:

* ``SessionStarted``      → insert a provisional record (not completed)
* ``SessionCompleted``    → finalize it as completed
* ``SessionInterrupted``  → finalize it as incomplete, one interruption

A record left open by a stop with nothing elapsed is closed as incomplete
when the next session starts.

Storage failures are logged and kept on ``last_error`` /
``history_error``.  They never propagate back into the engine, so the
countdown keeps working when the database does not.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable

from sqlalchemy.exc import SQLAlchemyError

from .database.models import PomodoroSession
from .database.repository import HISTORY_LIMIT, SessionRepository
from .stats import POMODORO_COMPLETED, POMODORO_STARTED, record_focus, track_event
from .timer.engine import SessionType
from .timer.events import (
    SessionCompleted,
    SessionInterrupted,
    SessionStarted,
    TimerEvent,
)

logger = logging.getLogger(__name__)


class SessionRecorder:
    def __init__(
        self,
        user_id: str,
        repository: SessionRepository | None = None,
        *,
        track_analytics: bool = True,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.user_id = user_id
        self._repo = repository or SessionRepository()
        self._track_analytics = track_analytics
        self._clock = clock

        self._pending_id: str | None = None

        self.sessions: list[PomodoroSession] = []
        self.last_error: SQLAlchemyError | None = None
        self.history_error: SQLAlchemyError | None = None

    @property
    def pending_id(self) -> str | None:
        """Identifier of the provisional record awaiting finalization."""
        return self._pending_id

    def __call__(self, event: TimerEvent) -> None:
        self.handle(event)

    def handle(self, event: TimerEvent) -> None:
        logger.debug("Recording %s for user %s", event.name, self.user_id)
        try:
            if isinstance(event, SessionStarted):
                self._on_started(event)
            elif isinstance(event, SessionCompleted):
                self._on_completed(event)
            elif isinstance(event, SessionInterrupted):
                self._on_interrupted(event)
        except SQLAlchemyError as exc:
            self.last_error = exc
            logger.error("Failed to record %s: %s", event.name, exc)
        else:
            self.last_error = None

    # ── event handlers ────────────────────────────────────────────────

    def _on_started(self, event: SessionStarted) -> None:
        if self._pending_id is not None:
            self._close_stale()
        minutes = event.total_time // 60
        record = self._repo.create(
            user_id=self.user_id,
            task_id=event.task_id,
            start_time=self._clock(),
            duration_minutes=minutes,
            session_type=event.session_type.value,
            completed=False,
            interruptions=0,
        )
        self._pending_id = record.id
        logger.info(
            "Started %s session %s (%d min)",
            event.session_type.value, record.id, minutes,
        )
        if self._track_analytics and event.session_type == SessionType.WORK:
            track_event(self.user_id, POMODORO_STARTED, event.task_id)

    def _on_completed(self, event: SessionCompleted) -> None:
        end_time = self._clock()
        self._finalize(
            end_time=end_time,
            completed=True,
            interruptions=event.interruptions,
        )
        if self._track_analytics and event.session_type == SessionType.WORK:
            minutes = event.total_time // 60
            track_event(self.user_id, POMODORO_COMPLETED, event.task_id, minutes)
            record_focus(self.user_id, end_time.date(), minutes)

    def _on_interrupted(self, event: SessionInterrupted) -> None:
        self._finalize(
            end_time=self._clock(),
            completed=False,
            interruptions=1,
        )

    def _finalize(self, **patch) -> None:
        session_id = self._pending_id
        if session_id is None:
            logger.warning("No provisional session to finalize")
            return
        # Clear first so a failed write is not retried against a later event
        self._pending_id = None
        record = self._repo.update(session_id, **patch)
        if record is None:
            logger.warning("Session %s vanished before finalization", session_id)
            return
        logger.info(
            "Finalized session %s (completed=%s)", session_id, patch["completed"]
        )

    def _close_stale(self) -> None:
        """Close a record whose session was stopped before any time elapsed.

        The engine emits nothing for such a stop, so the record is closed
        when the next session starts.  A failure here must not keep the
        new session from being recorded.
        """
        stale_id = self._pending_id
        logger.info("Closing session %s stopped without elapsed time", stale_id)
        try:
            self._finalize(end_time=self._clock(), completed=False, interruptions=0)
        except SQLAlchemyError as exc:
            logger.error("Failed to close session %s: %s", stale_id, exc)

    # ── history ───────────────────────────────────────────────────────

    def fetch_sessions(
        self,
        user_id: str | None = None,
        limit: int = HISTORY_LIMIT,
    ) -> list[PomodoroSession]:
        """Most recent sessions first.  Returns ``[]`` if storage fails."""
        try:
            sessions = self._repo.list(user_id or self.user_id, limit=limit)
        except SQLAlchemyError as exc:
            self.history_error = exc
            logger.error("Failed to fetch session history: %s", exc)
            self.sessions = []
            return []
        self.history_error = None
        self.sessions = sessions
        return sessions
