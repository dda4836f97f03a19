"""Timer settings with JSON persistence.

Settings are stored at:
    ~/Library/Application Support/Pomoflow/settings.json

(or ``$POMOFLOW_HOME/settings.json`` when that variable is set).

Usage::

    settings = load_settings()
    settings = settings.merged(work_duration=50)
    save_settings(settings)
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Callable

from .errors import InvalidSettingsError

logger = logging.getLogger(__name__)


def _app_support_dir() -> Path:
    override = os.environ.get("POMOFLOW_HOME")
    if override:
        return Path(override).expanduser()
    return Path.home() / "Library" / "Application Support" / "Pomoflow"


APP_SUPPORT_DIR = _app_support_dir()
SETTINGS_PATH = APP_SUPPORT_DIR / "settings.json"


@dataclass(frozen=True)
class TimerSettings:
    """User-configurable timer preferences.  Durations are in minutes."""

    work_duration: int = 25
    short_break_duration: int = 5
    long_break_duration: int = 15
    sessions_until_long_break: int = 4

    def __post_init__(self) -> None:
        for f in fields(self):
            _check_positive(f.name, getattr(self, f.name))

    def duration_for(self, session_type) -> int:
        """Configured length of ``session_type`` in seconds."""
        minutes = getattr(self, f"{session_type.value}_duration")
        return minutes * 60

    def merged(self, **partial) -> TimerSettings:
        """Return a copy with ``partial`` applied.

        Raises ``InvalidSettingsError`` for unknown keys or non-positive
        values; ``self`` is never modified.
        """
        valid_keys = {f.name for f in fields(self)}
        unknown = set(partial) - valid_keys
        if unknown:
            raise InvalidSettingsError(
                f"unknown timer setting(s): {', '.join(sorted(unknown))}"
            )
        return replace(self, **partial)

    def to_dict(self) -> dict[str, int]:
        return asdict(self)


def _check_positive(name: str, value) -> None:
    # bool is an int subclass; True would otherwise pass as 1
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSettingsError(f"{name} must be an integer, got {value!r}")
    if value <= 0:
        raise InvalidSettingsError(f"{name} must be positive, got {value}")


def load_settings() -> TimerSettings:
    """Load settings from disk, falling back to defaults."""
    try:
        if SETTINGS_PATH.exists():
            data = json.loads(SETTINGS_PATH.read_text(encoding="utf-8"))
            # Only use keys that exist in the dataclass
            valid_keys = {f.name for f in fields(TimerSettings)}
            filtered = {k: v for k, v in data.items() if k in valid_keys}
            return TimerSettings(**filtered)
    except (OSError, ValueError, AttributeError) as exc:
        logger.warning("Ignoring unreadable settings at %s: %s", SETTINGS_PATH, exc)
    return TimerSettings()


def save_settings(settings: TimerSettings) -> None:
    """Write settings to disk as JSON."""
    APP_SUPPORT_DIR.mkdir(parents=True, exist_ok=True)
    SETTINGS_PATH.write_text(
        json.dumps(settings.to_dict(), indent=2) + "\n",
        encoding="utf-8",
    )


SettingsListener = Callable[[TimerSettings], None]


class SettingsStore:
    """Holds the user's current ``TimerSettings`` and notifies on change.

    ``persist=False`` keeps everything in memory (tests, headless runs).
    """

    def __init__(
        self,
        settings: TimerSettings | None = None,
        *,
        persist: bool = False,
    ) -> None:
        self._persist = persist
        if settings is None:
            settings = load_settings() if persist else TimerSettings()
        self._settings = settings
        self._listeners: list[SettingsListener] = []

    @property
    def settings(self) -> TimerSettings:
        return self._settings

    def subscribe(self, listener: SettingsListener) -> Callable[[], None]:
        """Register ``listener``; returns a callable that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(self, **partial) -> TimerSettings:
        """Validate, store and broadcast a partial update."""
        new = self._settings.merged(**partial)
        self._settings = new
        if self._persist:
            save_settings(new)
        logger.info("Timer settings updated: %s", partial)
        for listener in list(self._listeners):
            listener(new)
        return new
