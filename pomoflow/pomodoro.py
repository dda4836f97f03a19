"""Consumer-facing view of the Pomodoro timer for one user.

``Pomodoro`` wires a ``TimerEngine`` to a ``SessionRecorder`` and a
``SettingsStore`` and exposes the values a timer screen needs: raw
countdown numbers plus ``formatted_time`` and ``progress_percent``.

When a ``TickDriver`` is attached, every control call goes through it so
the driver's timer starts and stops together with ``is_running``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from .database.models import PomodoroSession
from .recorder import SessionRecorder
from .settings import SettingsStore, TimerSettings
from .timer.display import format_time, progress_percent
from .timer.engine import SessionType, TimerEngine, TimerState
from .timer.events import TimerEvent

if TYPE_CHECKING:
    from .timer.driver import TickDriver


class Pomodoro:
    def __init__(
        self,
        user_id: str,
        *,
        settings_store: SettingsStore | None = None,
        recorder: SessionRecorder | None = None,
        engine: TimerEngine | None = None,
    ) -> None:
        self.settings_store = settings_store or SettingsStore()
        self.engine = engine or TimerEngine(self.settings_store.settings)
        self.recorder = recorder or SessionRecorder(user_id)
        self.user_id = user_id
        self.driver: TickDriver | None = None

        self.engine.subscribe(self.recorder)
        self._unsubscribe_settings = self.settings_store.subscribe(
            self.engine.replace_settings
        )

    def attach_driver(self, driver: TickDriver) -> None:
        """Route controls through ``driver``, which must drive ``self.engine``."""
        if driver.engine is not self.engine:
            raise ValueError("driver is bound to a different TimerEngine")
        self.driver = driver
        driver.sync()

    # ── controls ──────────────────────────────────────────────────────

    def start(self, task_id: str | None = None) -> list[TimerEvent]:
        if self.driver is not None:
            return self.driver.start(task_id)
        return self.engine.start(task_id)

    def pause(self) -> list[TimerEvent]:
        if self.driver is not None:
            return self.driver.pause()
        return self.engine.pause()

    def resume(self) -> list[TimerEvent]:
        if self.driver is not None:
            return self.driver.resume()
        return self.engine.resume()

    def stop(self) -> list[TimerEvent]:
        if self.driver is not None:
            return self.driver.stop()
        return self.engine.stop()

    def tick(self) -> list[TimerEvent]:
        """Apply one tick by hand (tests, or a UI without a driver)."""
        events = self.engine.tick()
        if self.driver is not None:
            self.driver.sync()
        return events

    def update_settings(self, **partial) -> TimerSettings:
        """Validate and apply through the settings store.

        The engine picks the change up via its subscription.
        """
        return self.settings_store.update(**partial)

    def fetch_sessions(self) -> list[PomodoroSession]:
        return self.recorder.fetch_sessions(self.user_id)

    def close(self) -> None:
        self._unsubscribe_settings()

    # ── read-only state ───────────────────────────────────────────────

    @property
    def state(self) -> TimerState:
        return self.engine.state

    @property
    def session_type(self) -> SessionType:
        return self.engine.session_type

    @property
    def current_time(self) -> int:
        return self.engine.current_time

    @property
    def total_time(self) -> int:
        return self.engine.total_time

    @property
    def is_running(self) -> bool:
        return self.engine.is_running

    @property
    def is_paused(self) -> bool:
        return self.engine.is_paused

    @property
    def session_count(self) -> int:
        return self.engine.session_count

    @property
    def current_task_id(self) -> str | None:
        return self.engine.current_task_id

    @property
    def settings(self) -> TimerSettings:
        return self.engine.settings

    @property
    def progress_percent(self) -> float:
        return progress_percent(self.engine.current_time, self.engine.total_time)

    @property
    def formatted_time(self) -> str:
        return format_time(self.engine.current_time)

    @property
    def sessions(self) -> list[PomodoroSession]:
        return self.recorder.sessions

    @property
    def history_error(self) -> bool:
        """True when the last history fetch failed."""
        return self.recorder.history_error is not None
