# src/remindly/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from ..notify.notifier import NotificationBackend, Notifier
from ..notify.permissions import PermissionManager
from ..offline.cache import OfflineCache
from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore
from .ports import Haptics


@dataclass
class AppState:
    # Store Settings on the state for easy access in other modules later.
    settings: Any

    task_store: TaskStore
    scheduler: ReminderScheduler
    notifier: Notifier
    permissions: PermissionManager
    haptics: Haptics | None = None
    offline_cache: OfflineCache | None = None
    push_backend: NotificationBackend | None = None
