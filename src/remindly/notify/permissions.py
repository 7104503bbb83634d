# src/remindly/notify/permissions.py

from __future__ import annotations

import logging
from collections.abc import Callable
from enum import StrEnum

from ..core.ports import KeyValueStore

logger = logging.getLogger(__name__)

DEFAULT_PERMISSION_KEY = "remindly-notification-permission"

# Asks the user; True = allow, False = block, None = dismissed without answering.
PermissionPrompt = Callable[[], "bool | None"]


class NotificationPermission(StrEnum):
    """Tri-state permission, same values as the web Notification API."""

    DEFAULT = "default"
    GRANTED = "granted"
    DENIED = "denied"

    @classmethod
    def from_db(cls, raw: str | None) -> NotificationPermission:
        if not raw:
            return cls.DEFAULT
        try:
            return cls(raw)
        except Exception:
            return cls.DEFAULT


class PermissionManager:
    """
    Persisted notification permission.

    The user is asked at most once per decision: request_once() only prompts
    while the state is still "default". A denial is kept and never re-prompted.
    """

    def __init__(self, kv: KeyValueStore, *, key: str = DEFAULT_PERMISSION_KEY) -> None:
        self._kv = kv
        self._key = key

    @property
    def state(self) -> NotificationPermission:
        try:
            return NotificationPermission.from_db(self._kv.get(self._key))
        except Exception:
            logger.exception("Failed to read notification permission; assuming default")
            return NotificationPermission.DEFAULT

    def is_granted(self) -> bool:
        return self.state == NotificationPermission.GRANTED

    def set_state(self, state: NotificationPermission) -> None:
        self._kv.set(self._key, state.value)
        logger.info("Notification permission -> %s", state.value)

    def request_once(self, prompt: PermissionPrompt) -> NotificationPermission:
        current = self.state
        if current != NotificationPermission.DEFAULT:
            return current

        try:
            answer = prompt()
        except Exception:
            logger.exception("Permission prompt failed; leaving permission undecided")
            return current

        if answer is None:
            return current

        decided = NotificationPermission.GRANTED if answer else NotificationPermission.DENIED
        self.set_state(decided)
        return decided
