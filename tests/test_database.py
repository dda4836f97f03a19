"""Tests for database setup."""

from sqlalchemy import inspect

from pomoflow.database import db
from pomoflow.database.db import configure_engine, init_db


class TestInitDb:

    def test_creates_every_table(self):
        tables = set(inspect(db._get_engine()).get_table_names())
        assert tables == {"pomodoro_sessions", "analytics_events", "daily_stats"}

    def test_session_columns(self):
        columns = {
            c["name"]
            for c in inspect(db._get_engine()).get_columns("pomodoro_sessions")
        }
        assert columns == {
            "id", "user_id", "task_id", "start_time", "end_time",
            "duration_minutes", "session_type", "completed",
            "interruptions", "created_at",
        }

    def test_init_db_is_repeatable(self, tmp_path):
        configure_engine(f"sqlite:///{tmp_path / 'pomoflow.db'}")
        init_db()
        init_db()
        tables = set(inspect(db._get_engine()).get_table_names())
        assert "pomodoro_sessions" in tables
