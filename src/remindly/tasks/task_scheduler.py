# src/remindly/tasks/task_scheduler.py

from __future__ import annotations

"""
Reminder scheduler.

One transient asyncio timer per task id:
- arm() computes delay = reminder_time - now and schedules loop.call_later(...)
- a newer arm() for the same id cancels the older handle first
- disarm() cancels by id
- at fire time the task is looked up again; deleted or completed tasks are skipped

Nothing here survives a restart. Callers re-arm from the restored snapshot,
and reminders whose instant already passed are skipped (no catch-up).
"""

import asyncio
import logging
from collections.abc import Callable, Iterable
from typing import Any

from ..core.ports import Clock
from .task_models import Task, to_iso, utc_now

logger = logging.getLogger(__name__)

TaskLookup = Callable[[int], Task | None]


class ReminderScheduler:
    """
    Cancellation table of armed reminders: task id -> asyncio.TimerHandle.

    All calls must happen on the event loop thread (the app is single-threaded
    and cooperative, so no locking is needed).
    """

    def __init__(
        self,
        notify: Callable[[Task], Any],
        *,
        lookup: TaskLookup | None = None,
        clock: Clock = utc_now,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._notify = notify
        self._lookup = lookup
        self._clock = clock
        self._loop = loop
        self._handles: dict[int, asyncio.TimerHandle] = {}

    def _get_loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    # ---- public API ----

    def arm(self, task: Task) -> bool:
        """
        Schedule the reminder for task; returns True if a timer is now pending.

        Any timer already pending for task.id is cancelled first, even when the
        new state is not schedulable (completed, or reminder already passed).
        """
        self.disarm(task.id)

        if task.completed:
            logger.debug("Not arming task %s: completed", task.id)
            return False

        delay = (task.reminder_time - self._clock()).total_seconds()
        if delay <= 0:
            logger.debug("Not arming task %s: reminder %s already passed", task.id, to_iso(task.reminder_time))
            return False

        loop = self._get_loop()
        self._handles[task.id] = loop.call_later(delay, self._fire, task)
        logger.info("Reminder armed task=%s in %.1fs (at %s)", task.id, delay, to_iso(task.reminder_time))
        return True

    def disarm(self, task_id: int) -> bool:
        handle = self._handles.pop(task_id, None)
        if handle is None:
            return False
        handle.cancel()
        logger.debug("Reminder disarmed task=%s", task_id)
        return True

    def arm_all(self, tasks: Iterable[Task]) -> int:
        armed = 0
        for task in tasks:
            if self.arm(task):
                armed += 1
        return armed

    def cancel_all(self) -> None:
        for task_id in list(self._handles):
            self.disarm(task_id)

    def is_armed(self, task_id: int) -> bool:
        return task_id in self._handles

    def pending_ids(self) -> list[int]:
        return list(self._handles)

    # ---- timer callback ----

    def _fire(self, armed: Task) -> None:
        self._handles.pop(armed.id, None)

        task: Task | None = armed
        if self._lookup is not None:
            try:
                task = self._lookup(armed.id)
            except Exception:
                logger.exception("Task lookup failed at fire time task=%s", armed.id)
                return

        if task is None:
            logger.debug("Reminder fired for deleted task=%s; ignoring", armed.id)
            return
        if task.completed:
            logger.debug("Reminder fired for completed task=%s; ignoring", armed.id)
            return

        logger.info("Reminder due task=%s name=%r", task.id, task.name)
        try:
            self._notify(task)
        except Exception:
            logger.exception("Notifier raised for task=%s", task.id)
