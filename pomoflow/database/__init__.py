"""Database package."""

from .db import get_session, init_db, configure_engine
from .models import PomodoroSession, AnalyticsEvent, DailyStats
from .repository import SessionRepository

__all__ = [
    "get_session",
    "init_db",
    "configure_engine",
    "PomodoroSession",
    "AnalyticsEvent",
    "DailyStats",
    "SessionRepository",
]
