"""SQLAlchemy ORM models for Pomoflow."""

import uuid
from datetime import datetime

from sqlalchemy import (
    Column, Integer, String, Boolean, DateTime, Date, UniqueConstraint
)
from sqlalchemy.orm import DeclarativeBase


def _new_id() -> str:
    return uuid.uuid4().hex


class Base(DeclarativeBase):
    pass


class PomodoroSession(Base):
    """One Pomodoro session (work or break).

    Inserted when the session starts and finalized once when it ends;
    ``end_time`` is null while the session is still in flight.
    """

    __tablename__ = "pomodoro_sessions"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    task_id = Column(String(64), nullable=True)
    start_time = Column(DateTime, nullable=False, default=datetime.now)
    end_time = Column(DateTime, nullable=True)
    duration_minutes = Column(Integer, nullable=False, default=0)
    session_type = Column(String(20), nullable=False, default="work")  # work | short_break | long_break
    completed = Column(Boolean, nullable=False, default=False)
    interruptions = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return (
            f"<PomodoroSession id={self.id} type={self.session_type} "
            f"completed={self.completed}>"
        )


class AnalyticsEvent(Base):
    """Pomodoro started/completed events for the analytics views."""

    __tablename__ = "analytics_events"

    id = Column(String(32), primary_key=True, default=_new_id)
    user_id = Column(String(64), nullable=False, index=True)
    event_type = Column(String(40), nullable=False)  # pomodoro_started | pomodoro_completed
    task_id = Column(String(64), nullable=True)
    duration_minutes = Column(Integer, nullable=True)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    def __repr__(self) -> str:
        return f"<AnalyticsEvent type={self.event_type} user={self.user_id}>"


class DailyStats(Base):
    """Aggregated per-user, per-day focus counters."""

    __tablename__ = "daily_stats"
    __table_args__ = (UniqueConstraint("user_id", "stats_date"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(64), nullable=False)
    stats_date = Column(Date, nullable=False)
    pomodoros_completed = Column(Integer, nullable=False, default=0)
    total_focus_time = Column(Integer, nullable=False, default=0)  # minutes

    def __repr__(self) -> str:
        return (
            f"<DailyStats date={self.stats_date} "
            f"pomodoros={self.pomodoros_completed} "
            f"focus={self.total_focus_time}m>"
        )
