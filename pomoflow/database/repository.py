"""Storage operations for Pomodoro session records."""

from __future__ import annotations

from sqlalchemy import inspect as sa_inspect

from .db import get_session
from .models import PomodoroSession

HISTORY_LIMIT = 50

_COLUMNS = frozenset(c.key for c in sa_inspect(PomodoroSession).column_attrs)


def _check_columns(fields: dict) -> None:
    unknown = set(fields) - _COLUMNS
    if unknown:
        raise ValueError(f"unknown session field(s): {', '.join(sorted(unknown))}")


class SessionRepository:
    """``create`` / ``update`` / ``list`` over the ``pomodoro_sessions`` table.

    Returned rows are detached copies; callers never hold an open ORM
    session.  Errors from the database propagate as SQLAlchemy exceptions.
    """

    def create(self, **fields) -> PomodoroSession:
        _check_columns(fields)
        with get_session() as db:
            record = PomodoroSession(**fields)
            db.add(record)
            db.flush()
            return record

    def update(self, session_id: str, **patch) -> PomodoroSession | None:
        """Apply ``patch`` to one record.  Returns ``None`` if it is missing."""
        _check_columns(patch)
        patch.pop("id", None)
        with get_session() as db:
            record = db.get(PomodoroSession, session_id)
            if record is None:
                return None
            for key, value in patch.items():
                setattr(record, key, value)
            return record

    def get(self, session_id: str) -> PomodoroSession | None:
        with get_session() as db:
            return db.get(PomodoroSession, session_id)

    def list(
        self,
        user_id: str,
        limit: int = HISTORY_LIMIT,
    ) -> list[PomodoroSession]:
        """Sessions for ``user_id``, most recent first."""
        with get_session() as db:
            return (
                db.query(PomodoroSession)
                .filter(PomodoroSession.user_id == user_id)
                .order_by(
                    PomodoroSession.start_time.desc(),
                    PomodoroSession.created_at.desc(),
                )
                .limit(limit)
                .all()
            )
