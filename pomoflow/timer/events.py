"""Lifecycle events emitted by the timer engine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, TYPE_CHECKING, Union

if TYPE_CHECKING:
    from .engine import SessionType


@dataclass(frozen=True)
class SessionStarted:
    name: ClassVar[str] = "session_started"

    session_type: SessionType
    total_time: int  # seconds
    task_id: str | None = None


@dataclass(frozen=True)
class SessionCompleted:
    """A session ran down to zero.  Describes the session that finished."""

    name: ClassVar[str] = "session_completed"

    session_type: SessionType
    total_time: int
    task_id: str | None = None
    interruptions: int = 0


@dataclass(frozen=True)
class SessionInterrupted:
    """A session was stopped by hand after ``elapsed`` seconds."""

    name: ClassVar[str] = "session_interrupted"

    session_type: SessionType
    elapsed: int
    task_id: str | None = None


TimerEvent = Union[SessionStarted, SessionCompleted, SessionInterrupted]
