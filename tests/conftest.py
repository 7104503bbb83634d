# tests/conftest.py

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from types import SimpleNamespace

import pytest

from remindly.core.ports import Clock, KeyValueStore
from remindly.core.state import AppState
from remindly.notify.notifier import AlertTier, Notifier, SystemNotificationTier
from remindly.notify.permissions import PermissionManager
from remindly.storage.kv_store import SQLiteKeyValueStore
from remindly.tasks.task_models import utc_now
from remindly.tasks.task_scheduler import ReminderScheduler
from remindly.tasks.task_store import TaskStore

from .fakes import RecordingBackend, RecordingHaptics


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and the CLI modules.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="Remindly",
        data_dir=tmp_path,
        db_path=tmp_path / "remindly.sqlite3",
        cache_dir=tmp_path / "caches",
        storage_key="remindly-tasks",
        default_lead_minutes=5,
        notification_timeout_seconds=10.0,
        icon_path=None,
        asset_origin="",
        cache_name="remindly-cache-v1",
    )


@pytest.fixture()
def alerts() -> list[str]:
    """Texts shown by the console-alert tier."""
    return []


@pytest.fixture()
def backend() -> RecordingBackend:
    return RecordingBackend()


@pytest.fixture()
def make_state(
    settings: SimpleNamespace, alerts: list[str], backend: RecordingBackend
) -> Callable[..., AppState]:
    """
    Build an AppState around a given key-value store and clock.

    The notifier is real; only its outputs are fakes (recording backend,
    alerts list, recording haptics).
    """

    def _make(kv: KeyValueStore | None = None, clock: Clock = utc_now) -> AppState:
        kv = kv if kv is not None else SQLiteKeyValueStore(settings.db_path)
        store = TaskStore(kv, key=settings.storage_key, clock=clock)
        permissions = PermissionManager(kv)
        haptics = RecordingHaptics()
        notifier = Notifier(
            [SystemNotificationTier(backend, permissions), AlertTier(alerts.append)],
            haptics=haptics,
        )
        return AppState(
            settings=settings,
            task_store=store,
            scheduler=ReminderScheduler(notifier.notify, lookup=store.get, clock=clock),
            notifier=notifier,
            permissions=permissions,
            haptics=haptics,
            push_backend=backend,
        )

    return _make


@pytest.fixture()
def state(make_state: Callable[..., AppState]) -> AppState:
    """
    AppState on a real SQLite key-value store and the real clock.

    NOTE: We keep real SQLite storage here because snapshot persistence
    is part of what we want to test.
    """
    return make_state()
