"""Timer state machine for Pomoflow.

States
------
IDLE       Not counting down; the pending session is ready to start.
RUNNING    Countdown in progress.
PAUSED     Countdown frozen, remaining time preserved.

Transitions
-----------
IDLE → RUNNING               (start)
RUNNING → PAUSED             (pause)
PAUSED → RUNNING             (resume)
RUNNING → IDLE + rotation    (tick reaches 0)
RUNNING | PAUSED → IDLE      (stop; same session type, full duration)

The engine is a plain reducer: it owns no timers and does no I/O.  Some
external driver calls ``tick()`` once per second while ``is_running``.
Every control method returns the events it emitted and also hands them
to subscribed listeners.  Calls that are not valid in the current state
are ignored and return an empty list.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable

from ..settings import TimerSettings
from .events import (
    SessionCompleted,
    SessionInterrupted,
    SessionStarted,
    TimerEvent,
)


# ── enums ─────────────────────────────────────────────────────────────────


class TimerStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"


class SessionType(Enum):
    WORK = "work"
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"

    @property
    def label(self) -> str:
        return _SESSION_LABELS[self]


_SESSION_LABELS: dict[SessionType, str] = {
    SessionType.WORK: "Focus Time",
    SessionType.SHORT_BREAK: "Short Break",
    SessionType.LONG_BREAK: "Long Break",
}


# ── state snapshot ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class TimerState:
    session_type: SessionType
    current_time: int  # seconds remaining
    total_time: int  # seconds the current session started with
    is_running: bool
    is_paused: bool
    current_task_id: str | None
    session_count: int  # completed work sessions since the last long break

    @property
    def status(self) -> TimerStatus:
        if self.is_running:
            return TimerStatus.RUNNING
        if self.is_paused:
            return TimerStatus.PAUSED
        return TimerStatus.IDLE


Listener = Callable[[TimerEvent], None]


# ── engine ────────────────────────────────────────────────────────────────


class TimerEngine:
    """Pomodoro countdown with work/break rotation.

    Listeners registered through ``subscribe`` receive every
    ``SessionStarted``, ``SessionCompleted`` and ``SessionInterrupted``
    event synchronously, in emission order.
    """

    def __init__(self, settings: TimerSettings | None = None) -> None:
        self._settings: TimerSettings = settings or TimerSettings()
        self._listeners: list[Listener] = []

        self._session_type: SessionType = SessionType.WORK
        self._session_count: int = 0
        self._running: bool = False
        self._paused: bool = False
        self._task_id: str | None = None

        self._total: int = self._settings.duration_for(SessionType.WORK)
        self._remaining: int = self._total

    # ══════════════════════════════════════════════════════════════════
    #  PUBLIC PROPERTIES
    # ══════════════════════════════════════════════════════════════════

    @property
    def state(self) -> TimerState:
        return TimerState(
            session_type=self._session_type,
            current_time=self._remaining,
            total_time=self._total,
            is_running=self._running,
            is_paused=self._paused,
            current_task_id=self._task_id,
            session_count=self._session_count,
        )

    @property
    def status(self) -> TimerStatus:
        return self.state.status

    @property
    def session_type(self) -> SessionType:
        """The session type currently active (or next, when idle)."""
        return self._session_type

    @property
    def current_time(self) -> int:
        """Seconds left on the clock."""
        return self._remaining

    @property
    def total_time(self) -> int:
        return self._total

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def is_idle(self) -> bool:
        return not (self._running or self._paused)

    @property
    def current_task_id(self) -> str | None:
        return self._task_id

    @property
    def session_count(self) -> int:
        return self._session_count

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # ══════════════════════════════════════════════════════════════════
    #  CONTROLS
    # ══════════════════════════════════════════════════════════════════

    def start(self, task_id: str | None = None) -> list[TimerEvent]:
        """Begin the pending session.  Only valid from IDLE."""
        if not self.is_idle:
            return []
        self._init_session(self._session_type)
        self._task_id = task_id
        self._running = True
        self._paused = False
        return self._emit(SessionStarted(
            session_type=self._session_type,
            total_time=self._total,
            task_id=task_id,
        ))

    def tick(self) -> list[TimerEvent]:
        """Apply one elapsed second.  Ignored unless RUNNING."""
        if not self._running:
            return []
        self._remaining = max(0, self._remaining - 1)
        if self._remaining > 0:
            return []
        return self._finish_session()

    def pause(self) -> list[TimerEvent]:
        if not self._running:
            return []
        self._running = False
        self._paused = True
        return []

    def resume(self) -> list[TimerEvent]:
        if not self._paused:
            return []
        self._paused = False
        self._running = True
        return []

    def stop(self) -> list[TimerEvent]:
        """Abandon the session in flight and reset it to full length.

        The session type does not rotate and ``session_count`` is left
        alone.  A ``SessionInterrupted`` is emitted only if some time had
        already elapsed.
        """
        if self.is_idle:
            return []
        elapsed = self._total - self._remaining
        stopped_type = self._session_type
        task_id = self._task_id

        self._running = False
        self._paused = False
        self._task_id = None
        self._init_session(stopped_type)

        if elapsed <= 0:
            return []
        return self._emit(SessionInterrupted(
            session_type=stopped_type,
            elapsed=elapsed,
            task_id=task_id,
        ))

    def update_settings(self, **partial) -> TimerSettings:
        """Merge ``partial`` into the settings.

        Raises ``InvalidSettingsError`` and keeps the old settings when a
        value is rejected.  A session in flight keeps its length; only
        sessions initialized afterwards use the new values.
        """
        self._settings = self._settings.merged(**partial)
        if self.is_idle:
            self._init_session(self._session_type)
        return self._settings

    def replace_settings(self, settings: TimerSettings) -> None:
        """Adopt an already validated settings value (settings source hook)."""
        self._settings = settings
        if self.is_idle:
            self._init_session(self._session_type)

    # ══════════════════════════════════════════════════════════════════
    #  INTERNAL
    # ══════════════════════════════════════════════════════════════════

    def _init_session(self, session_type: SessionType) -> None:
        self._session_type = session_type
        self._total = self._settings.duration_for(session_type)
        self._remaining = self._total

    def _finish_session(self) -> list[TimerEvent]:
        completed_type = self._session_type
        completed_total = self._total
        task_id = self._task_id

        self._running = False
        self._paused = False
        self._task_id = None

        if completed_type == SessionType.WORK:
            self._session_count += 1
        next_type = next_session_type(
            completed_type,
            self._session_count,
            self._settings.sessions_until_long_break,
        )
        if next_type == SessionType.LONG_BREAK:
            self._session_count = 0
        self._init_session(next_type)

        return self._emit(SessionCompleted(
            session_type=completed_type,
            total_time=completed_total,
            task_id=task_id,
            interruptions=0,
        ))

    def _emit(self, event: TimerEvent) -> list[TimerEvent]:
        for listener in list(self._listeners):
            listener(event)
        return [event]


def next_session_type(
    completed: SessionType,
    session_count: int,
    sessions_until_long_break: int,
) -> SessionType:
    """Rotation after a natural completion.

    ``session_count`` already includes the work session that just ended.
    """
    if completed != SessionType.WORK:
        return SessionType.WORK
    if session_count % sessions_until_long_break == 0:
        return SessionType.LONG_BREAK
    return SessionType.SHORT_BREAK
