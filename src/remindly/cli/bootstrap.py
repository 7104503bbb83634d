# src/remindly/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations into AppState (storage/tasks/scheduler/notifier),
- asks for notification permission once, if it was never decided.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.state import AppState
from ..notify.backends import ConsoleAlert, PlyerHaptics, PlyerNotificationBackend
from ..notify.notifier import AlertTier, Notifier, SystemNotificationTier
from ..notify.permissions import NotificationPermission, PermissionManager, PermissionPrompt
from ..offline.cache import OfflineCache
from ..storage.kv_store import SQLiteKeyValueStore
from ..tasks.task_scheduler import ReminderScheduler
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.db_path.parent.mkdir(parents=True, exist_ok=True)
    settings.cache_dir.mkdir(parents=True, exist_ok=True)


def create_initial_state(*, settings=None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings injectable makes the app easier to test and avoids hidden global config reads.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    kv = SQLiteKeyValueStore(settings.db_path)
    store = TaskStore(kv, key=settings.storage_key)
    permissions = PermissionManager(kv)
    haptics = PlyerHaptics()

    icon = str(settings.icon_path) if settings.icon_path else ""
    system_backend = PlyerNotificationBackend(settings.app_name)
    notifier = Notifier(
        [
            SystemNotificationTier(
                system_backend,
                permissions,
                icon=icon,
                timeout_seconds=settings.notification_timeout_seconds,
            ),
            AlertTier(ConsoleAlert()),
        ],
        haptics=haptics,
    )

    scheduler = ReminderScheduler(notifier.notify, lookup=store.get)

    offline_cache = None
    if settings.asset_origin:
        offline_cache = OfflineCache(
            settings.cache_dir,
            origin=settings.asset_origin,
            cache_name=settings.cache_name,
        )

    return AppState(
        settings=settings,
        task_store=store,
        scheduler=scheduler,
        notifier=notifier,
        permissions=permissions,
        haptics=haptics,
        offline_cache=offline_cache,
        push_backend=system_backend,
    )


def console_permission_prompt() -> bool | None:
    """Ask on stdin. Empty answer or EOF leaves the decision open."""
    try:
        answer = input("Allow desktop notifications for reminders? [y/n] ").strip().lower()
    except EOFError:
        return None
    if not answer:
        return None
    return answer in ("y", "yes")


def request_notification_permission(
    state: AppState, prompt: PermissionPrompt = console_permission_prompt
) -> NotificationPermission:
    decided = state.permissions.request_once(prompt)
    logger.info("Notification permission: %s", decided.value)
    return decided
