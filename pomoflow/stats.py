"""Analytics events, daily focus counters and history summaries.

Writes
------
``track_event``        one ``analytics_events`` row per pomodoro start or
                       completion (work sessions only).
``record_focus``       bumps the ``daily_stats`` row for the user and day.

Reads
-----
``daily_stats``        counters for one day (zeros when nothing was logged).
``summarize``          totals over an already fetched session history.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable

from .database.db import get_session
from .database.models import AnalyticsEvent, DailyStats, PomodoroSession

POMODORO_STARTED = "pomodoro_started"
POMODORO_COMPLETED = "pomodoro_completed"


def track_event(
    user_id: str,
    event_type: str,
    task_id: str | None = None,
    duration_minutes: int | None = None,
) -> AnalyticsEvent:
    with get_session() as db:
        event = AnalyticsEvent(
            user_id=user_id,
            event_type=event_type,
            task_id=task_id,
            duration_minutes=duration_minutes,
        )
        db.add(event)
        db.flush()
        return event


def record_focus(user_id: str, day: date, minutes: int) -> None:
    """Count one completed pomodoro of ``minutes`` towards ``day``."""
    with get_session() as db:
        daily = (
            db.query(DailyStats)
            .filter_by(user_id=user_id, stats_date=day)
            .first()
        )
        if daily is None:
            daily = DailyStats(
                user_id=user_id,
                stats_date=day,
                pomodoros_completed=0,
                total_focus_time=0,
            )
            db.add(daily)
        daily.pomodoros_completed += 1
        daily.total_focus_time += minutes


@dataclass(frozen=True)
class DayStats:
    stats_date: date
    pomodoros_completed: int = 0
    total_focus_time: int = 0  # minutes


def daily_stats(user_id: str, day: date | None = None) -> DayStats:
    day = day or date.today()
    with get_session() as db:
        row = (
            db.query(DailyStats)
            .filter_by(user_id=user_id, stats_date=day)
            .first()
        )
        if row is None:
            return DayStats(stats_date=day)
        return DayStats(
            stats_date=day,
            pomodoros_completed=row.pomodoros_completed,
            total_focus_time=row.total_focus_time,
        )


@dataclass(frozen=True)
class SessionSummary:
    completed_work: int
    focus_minutes: int
    interrupted: int
    total_interruptions: int

    @property
    def completion_rate(self) -> float:
        """Share of finished work sessions that ran to zero, 0-100."""
        finished = self.completed_work + self.interrupted
        if finished == 0:
            return 0.0
        return self.completed_work / finished * 100


def summarize(sessions: Iterable[PomodoroSession]) -> SessionSummary:
    """Totals over work sessions; breaks and in-flight records are skipped."""
    completed = focus = interrupted = interruptions = 0
    for s in sessions:
        if s.session_type != "work" or s.end_time is None:
            continue
        interruptions += s.interruptions or 0
        if s.completed:
            completed += 1
            focus += s.duration_minutes
        else:
            interrupted += 1
    return SessionSummary(
        completed_work=completed,
        focus_minutes=focus,
        interrupted=interrupted,
        total_interruptions=interruptions,
    )
