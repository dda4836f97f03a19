"""Timer package."""

from .engine import (
    TimerEngine,
    TimerState,
    TimerStatus,
    SessionType,
    next_session_type,
)
from .events import SessionStarted, SessionCompleted, SessionInterrupted
from .display import format_time, progress_percent

__all__ = [
    "TimerEngine",
    "TimerState",
    "TimerStatus",
    "SessionType",
    "next_session_type",
    "SessionStarted",
    "SessionCompleted",
    "SessionInterrupted",
    "format_time",
    "progress_percent",
]
