# tests/test_bootstrap.py

from __future__ import annotations

from types import SimpleNamespace

from remindly.cli.bootstrap import create_initial_state, request_notification_permission
from remindly.config import Settings
from remindly.notify.permissions import NotificationPermission


def test_create_initial_state_wires_components(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)

    assert settings.db_path.exists()
    assert settings.cache_dir.is_dir()
    assert state.offline_cache is None
    assert state.task_store.list() == []
    assert state.permissions.state == NotificationPermission.DEFAULT


def test_offline_cache_enabled_by_origin(settings: SimpleNamespace) -> None:
    settings.asset_origin = "http://localhost:5173"

    state = create_initial_state(settings=settings)

    assert state.offline_cache is not None
    assert state.offline_cache.cache_name == "remindly-cache-v1"


def test_permission_is_requested_once(settings: SimpleNamespace) -> None:
    state = create_initial_state(settings=settings)
    asked: list[int] = []

    def allow() -> bool:
        asked.append(1)
        return True

    assert request_notification_permission(state, allow) == NotificationPermission.GRANTED
    # a fresh process on the same data dir does not ask again
    again = create_initial_state(settings=settings)
    assert request_notification_permission(again, allow) == NotificationPermission.GRANTED
    assert len(asked) == 1


def test_settings_from_env(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("REMINDLY_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("REMINDLY_DEFAULT_LEAD_MINUTES", "15")
    monkeypatch.setenv("REMINDLY_NOTIFICATION_TIMEOUT_SECONDS", "oops")
    monkeypatch.setenv("REMINDLY_ASSET_ORIGIN", "http://localhost:5173/")

    s = Settings.from_env()

    assert s.db_path == tmp_path / "remindly.sqlite3"
    assert s.cache_dir == tmp_path / "caches"
    assert s.default_lead_minutes == 15
    assert s.notification_timeout_seconds == 10.0
    assert s.asset_origin == "http://localhost:5173"
