"""Shared pytest fixtures for Pomoflow tests."""

import sys
import pytest

from PyQt6.QtCore import QCoreApplication

from pomoflow.database.db import configure_engine, init_db
from pomoflow.recorder import SessionRecorder
from pomoflow.settings import TimerSettings
from pomoflow.timer.engine import TimerEngine


@pytest.fixture(scope="session")
def qapp():
    """A single QCoreApplication instance shared across the entire test run."""
    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    yield app


@pytest.fixture(autouse=True)
def test_db():
    """Point every test at a fresh in-memory SQLite database."""
    configure_engine("sqlite:///:memory:")
    init_db()
    yield


@pytest.fixture
def engine():
    """Fresh TimerEngine with default settings (25 / 5 / 15, every 4)."""
    return TimerEngine(TimerSettings())


@pytest.fixture
def short_engine():
    """One-minute sessions so full countdowns stay cheap."""
    return TimerEngine(TimerSettings(
        work_duration=1,
        short_break_duration=1,
        long_break_duration=1,
        sessions_until_long_break=4,
    ))


@pytest.fixture
def recorder():
    return SessionRecorder("user-1")


@pytest.fixture
def recorded_engine(short_engine, recorder):
    """Short-session engine with a recorder subscribed."""
    short_engine.subscribe(recorder)
    return short_engine
