"""Tests for timer settings: validation, JSON persistence, and the store."""

import json

import pytest

from pomoflow.errors import InvalidSettingsError
from pomoflow.settings import (
    SettingsStore, TimerSettings, load_settings, save_settings,
)
from pomoflow.timer.engine import SessionType

from helpers import EventCollector


@pytest.fixture
def settings_path(tmp_path, monkeypatch):
    path = tmp_path / "settings.json"
    monkeypatch.setattr("pomoflow.settings.SETTINGS_PATH", path)
    monkeypatch.setattr("pomoflow.settings.APP_SUPPORT_DIR", tmp_path)
    return path


class TestTimerSettings:

    def test_defaults(self):
        s = TimerSettings()
        assert s.work_duration == 25
        assert s.short_break_duration == 5
        assert s.long_break_duration == 15
        assert s.sessions_until_long_break == 4

    def test_duration_for_returns_seconds(self):
        s = TimerSettings()
        assert s.duration_for(SessionType.WORK) == 1500
        assert s.duration_for(SessionType.SHORT_BREAK) == 300
        assert s.duration_for(SessionType.LONG_BREAK) == 900

    def test_merged_returns_new_value(self):
        s = TimerSettings()
        merged = s.merged(work_duration=50)
        assert merged.work_duration == 50
        assert merged.short_break_duration == 5
        assert s.work_duration == 25

    @pytest.mark.parametrize("kwargs", [
        {"work_duration": 0},
        {"long_break_duration": -1},
        {"sessions_until_long_break": 0},
        {"short_break_duration": 2.5},
    ])
    def test_constructor_rejects_invalid(self, kwargs):
        with pytest.raises(InvalidSettingsError):
            TimerSettings(**kwargs)

    def test_invalid_settings_error_is_value_error(self):
        with pytest.raises(ValueError):
            TimerSettings().merged(work_duration=-1)


class TestPersistence:

    def test_round_trip(self, settings_path):
        original = TimerSettings(work_duration=45, sessions_until_long_break=3)
        save_settings(original)
        assert load_settings() == original

    def test_missing_file_returns_defaults(self, settings_path):
        assert load_settings() == TimerSettings()

    def test_invalid_json_returns_defaults(self, settings_path):
        settings_path.write_text("{not json", encoding="utf-8")
        assert load_settings() == TimerSettings()

    def test_invalid_values_return_defaults(self, settings_path):
        settings_path.write_text(json.dumps({"work_duration": 0}))
        assert load_settings() == TimerSettings()

    def test_unknown_keys_ignored(self, settings_path):
        settings_path.write_text(json.dumps({"work_duration": 30, "theme": "dark"}))
        assert load_settings().work_duration == 30


class TestSettingsStore:

    def test_update_notifies_subscribers(self):
        store = SettingsStore()
        c = EventCollector()
        store.subscribe(c)
        store.update(short_break_duration=10)
        assert c.last.short_break_duration == 10
        assert store.settings.short_break_duration == 10

    def test_invalid_update_keeps_previous(self):
        store = SettingsStore()
        c = EventCollector()
        store.subscribe(c)
        with pytest.raises(InvalidSettingsError):
            store.update(work_duration=0)
        assert store.settings == TimerSettings()
        assert len(c) == 0

    def test_unsubscribe(self):
        store = SettingsStore()
        c = EventCollector()
        unsubscribe = store.subscribe(c)
        unsubscribe()
        store.update(work_duration=30)
        assert len(c) == 0

    def test_persisting_store_writes_file(self, settings_path):
        store = SettingsStore(persist=True)
        store.update(work_duration=35)
        assert json.loads(settings_path.read_text())["work_duration"] == 35
        assert SettingsStore(persist=True).settings.work_duration == 35
