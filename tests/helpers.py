"""Shared test helpers for Pomoflow."""

from sqlalchemy.exc import OperationalError

from pomoflow.database.repository import SessionRepository
from pomoflow.timer.engine import TimerEngine


class EventCollector:
    """Utility to capture engine events or Qt signal emissions into a list."""

    def __init__(self):
        self.items: list = []

    def slot(self, *args):
        self.items.append(args if len(args) > 1 else args[0] if args else None)

    def __call__(self, *args):
        self.slot(*args)

    def __len__(self):
        return len(self.items)

    def __getitem__(self, idx):
        return self.items[idx]

    @property
    def last(self):
        return self.items[-1] if self.items else None

    def of_type(self, cls) -> list:
        return [e for e in self.items if isinstance(e, cls)]

    def clear(self):
        self.items.clear()


def run_ticks(engine: TimerEngine, count: int) -> list:
    """Call ``tick()`` ``count`` times and return every emitted event."""
    events = []
    for _ in range(count):
        events.extend(engine.tick())
    return events


def complete_session(engine: TimerEngine, task_id=None) -> list:
    """Start the pending session and tick it down to zero."""
    events = engine.start(task_id)
    events.extend(run_ticks(engine, engine.current_time))
    return events


class BrokenRepository(SessionRepository):
    """Repository whose every call fails like an unreachable database."""

    def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    create = update = get = list = _fail
