# src/remindly/notify/backends.py

"""
Platform backends for the Notifier (plyer-based) plus the console alert.

plyer picks an implementation per platform at call time. Facades without an
implementation raise NotImplementedError, which the callers treat as
"unsupported here".
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

from plyer import notification, vibrator

from .notifier import NotificationPayload

logger = logging.getLogger(__name__)


class PlyerHaptics:
    """Vibration via plyer (Android/iOS). Desktop platforms have none."""

    def pulse(self, pattern: list[int]) -> bool:
        if not pattern:
            return False
        try:
            if len(pattern) == 1:
                vibrator.vibrate(time=pattern[0] / 1000.0)
            else:
                # plyer patterns start with an initial "off" delay, in seconds.
                vibrator.pattern(pattern=[0.0] + [ms / 1000.0 for ms in pattern], repeat=-1)
            return True
        except NotImplementedError:
            logger.debug("Vibration not supported on this platform.")
            return False


class PlyerNotificationBackend:
    """
    Desktop notification via plyer.notification.

    plyer has no tag-replacement or click callback; auto-dismiss uses its
    timeout argument where the platform honours it.
    """

    def __init__(self, app_name: str = "Remindly") -> None:
        self._app_name = app_name

    def show(self, payload: NotificationPayload) -> None:
        notification.notify(
            title=payload.title,
            message=payload.body,
            app_name=self._app_name,
            app_icon=payload.icon,
            timeout=int(payload.timeout_seconds),
        )
        logger.debug("System notification shown tag=%s", payload.tag)


class ConsoleAlert:
    """Synchronous alert written straight to the terminal, with a bell."""

    def __init__(self, stream: TextIO | None = None) -> None:
        self._stream = stream

    def __call__(self, text: str) -> None:
        stream = self._stream or sys.stdout
        stream.write(f"\a\n{text}\n")
        stream.flush()
