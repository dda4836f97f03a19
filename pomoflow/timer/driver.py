"""Qt tick source for the timer engine.

The engine only knows how to apply a single ``tick()``.  ``TickDriver``
owns the 1 Hz ``QTimer`` and keeps it alive exactly while the engine is
running: it is started on the transition into RUNNING and stopped on
every transition out of it (pause, stop, natural completion).  UI code
should issue control calls through the driver so that timeouts and
button presses go through the same path on the Qt event loop.
"""

from __future__ import annotations

from PyQt6.QtCore import QObject, QTimer, pyqtSignal

from .engine import TimerEngine, TimerState
from .events import TimerEvent

TICK_INTERVAL_MS = 1000


class TickDriver(QObject):
    """Drives a ``TimerEngine`` from a ``QTimer``.

    Signals
    -------
    ticked(remaining_seconds: int)
        Emitted after every applied tick.
    running_changed(is_running: bool)
        Emitted whenever the engine's ``is_running`` flips.
    state_changed(state: TimerState)
        Emitted after every control call or tick that changed state.
    event_emitted(event: TimerEvent)
        Re-broadcast of engine lifecycle events for Qt consumers.
    """

    ticked = pyqtSignal(int)
    running_changed = pyqtSignal(bool)
    state_changed = pyqtSignal(object)
    event_emitted = pyqtSignal(object)

    def __init__(
        self,
        engine: TimerEngine,
        parent: QObject | None = None,
        *,
        interval_ms: int = TICK_INTERVAL_MS,
    ) -> None:
        super().__init__(parent)
        self._engine = engine
        self._last_state: TimerState = engine.state

        self._qt_timer = QTimer(self)
        self._qt_timer.setInterval(interval_ms)
        self._qt_timer.timeout.connect(self._on_timeout)

        self._unsubscribe = engine.subscribe(self._on_engine_event)

    @property
    def engine(self) -> TimerEngine:
        return self._engine

    @property
    def is_active(self) -> bool:
        """True while the underlying ``QTimer`` is scheduled."""
        return self._qt_timer.isActive()

    # ── controls ──────────────────────────────────────────────────────

    def start(self, task_id: str | None = None) -> list[TimerEvent]:
        events = self._engine.start(task_id)
        self._sync()
        return events

    def pause(self) -> list[TimerEvent]:
        events = self._engine.pause()
        self._sync()
        return events

    def resume(self) -> list[TimerEvent]:
        events = self._engine.resume()
        self._sync()
        return events

    def stop(self) -> list[TimerEvent]:
        events = self._engine.stop()
        self._sync()
        return events

    def sync(self) -> None:
        """Re-align the timer after the engine was driven directly."""
        self._sync()

    def shutdown(self) -> None:
        self._qt_timer.stop()
        self._unsubscribe()

    # ── internal ──────────────────────────────────────────────────────

    def _on_timeout(self) -> None:
        if not self._engine.is_running:
            # Should not happen while _sync keeps the timer aligned
            self._qt_timer.stop()
            return
        self._engine.tick()
        self.ticked.emit(self._engine.current_time)
        self._sync()

    def _on_engine_event(self, event: TimerEvent) -> None:
        self.event_emitted.emit(event)

    def _sync(self) -> None:
        state = self._engine.state
        if state.is_running and not self._qt_timer.isActive():
            self._qt_timer.start()
        elif not state.is_running and self._qt_timer.isActive():
            self._qt_timer.stop()

        if state.is_running != self._last_state.is_running:
            self.running_changed.emit(state.is_running)
        if state != self._last_state:
            self.state_changed.emit(state)
        self._last_state = state
