# src/remindly/tasks/task_store.py

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import datetime
from typing import Any

from ..core.errors import NotFoundError, PersistenceCorruption, ValidationError
from ..core.ports import Clock, KeyValueStore
from .task_models import (
    Task,
    TaskStats,
    compute_reminder_time,
    ensure_aware,
    from_iso,
    to_iso,
    utc_now,
)

logger = logging.getLogger(__name__)

DEFAULT_STORAGE_KEY = "remindly-tasks"


class TaskStore:
    """
    In-memory task list mirrored to a key-value snapshot.

    The store is the single writer:
    - every mutating method validates first, then writes the WHOLE collection
      under one key (snapshot overwrite), then swaps its in-memory list
    - a failed validation or a failed write leaves both sides untouched

    Scheduling is not the store's job; see task_api for arm/disarm wiring.
    """

    def __init__(
        self,
        kv: KeyValueStore,
        *,
        key: str = DEFAULT_STORAGE_KEY,
        clock: Clock = utc_now,
    ) -> None:
        self._kv = kv
        self._key = key
        self._clock = clock
        self._tasks: list[Task] = []

    # ---- codec ----

    @staticmethod
    def _task_to_record(task: Task) -> dict[str, Any]:
        return {
            "id": task.id,
            "name": task.name,
            "time": task.target_time.isoformat(),
            "reminderMinutes": task.lead_minutes,
            "reminderTime": to_iso(task.reminder_time),
            "completed": task.completed,
            "createdAt": to_iso(task.created_at),
        }

    @staticmethod
    def _record_to_task(rec: Any) -> Task:
        if not isinstance(rec, dict):
            raise PersistenceCorruption(f"task record is not an object: {rec!r}")
        try:
            task_id = rec["id"]
            if isinstance(task_id, bool) or not isinstance(task_id, int):
                raise PersistenceCorruption(f"bad task id: {task_id!r}")
            target_time = from_iso(str(rec["time"]))
            name = str(rec["name"])
            if not name.strip():
                raise PersistenceCorruption(f"blank task name for id {task_id}")
            lead_minutes = int(rec["reminderMinutes"])
            if lead_minutes < 0:
                raise PersistenceCorruption(f"negative reminderMinutes for id {task_id}")
            completed = rec.get("completed", False)
            if not isinstance(completed, bool):
                raise PersistenceCorruption(f"bad completed flag for id {task_id}: {completed!r}")
            raw_reminder = rec.get("reminderTime")
            reminder_time = (
                from_iso(str(raw_reminder))
                if raw_reminder
                else compute_reminder_time(target_time, lead_minutes)
            )
            return Task(
                id=task_id,
                name=name,
                target_time=target_time,
                lead_minutes=lead_minutes,
                reminder_time=reminder_time,
                completed=completed,
                created_at=from_iso(str(rec["createdAt"])),
            )
        except PersistenceCorruption:
            raise
        except (KeyError, TypeError, ValueError, OverflowError) as e:
            raise PersistenceCorruption(f"bad task record: {e}") from e

    # ---- low-level helpers ----

    def _persist(self, tasks: list[Task]) -> None:
        payload = json.dumps([self._task_to_record(t) for t in tasks], ensure_ascii=False)
        self._kv.set(self._key, payload)

    def _commit(self, tasks: list[Task]) -> None:
        self._persist(tasks)
        self._tasks = tasks

    def _index_of(self, task_id: int) -> int:
        for i, t in enumerate(self._tasks):
            if t.id == task_id:
                return i
        raise NotFoundError(task_id)

    def _validate(
        self, name: str | None, target_time: datetime | None, lead_minutes: Any
    ) -> tuple[str, datetime, int, datetime]:
        clean = (name or "").strip()
        if not clean:
            raise ValidationError("Please enter a task name")
        if target_time is None:
            raise ValidationError("Please select a time")
        if not isinstance(target_time, datetime):
            raise ValidationError("Task time must be a datetime")
        if isinstance(lead_minutes, bool) or not isinstance(lead_minutes, int) or lead_minutes < 0:
            raise ValidationError("Reminder minutes must be a non-negative integer")

        target = ensure_aware(target_time)
        if target <= self._clock():
            raise ValidationError("Please select a future time")
        try:
            reminder = compute_reminder_time(target, lead_minutes)
        except OverflowError:
            raise ValidationError("Reminder time out of range") from None
        return clean, target, lead_minutes, reminder

    def _next_id(self, now: datetime) -> int:
        candidate = int(now.timestamp() * 1000)
        if self._tasks:
            candidate = max(candidate, max(t.id for t in self._tasks) + 1)
        return candidate

    # ---- public API ----

    def list(self) -> list[Task]:
        """All tasks in insertion order (copies of the list, not of the tasks)."""
        return list(self._tasks)

    def get(self, task_id: int) -> Task | None:
        for t in self._tasks:
            if t.id == task_id:
                return t
        return None

    def add(self, name: str, target_time: datetime | None, lead_minutes: int) -> Task:
        clean, target, lead, reminder = self._validate(name, target_time, lead_minutes)
        now = self._clock()
        task = Task(
            id=self._next_id(now),
            name=clean,
            target_time=target,
            lead_minutes=lead,
            reminder_time=reminder,
            completed=False,
            created_at=now,
        )
        self._commit([*self._tasks, task])
        logger.debug("Task added id=%s reminder_at=%s", task.id, to_iso(task.reminder_time))
        return task

    def update(
        self, task_id: int, name: str, target_time: datetime | None, lead_minutes: int
    ) -> Task:
        idx = self._index_of(task_id)
        clean, target, lead, reminder = self._validate(name, target_time, lead_minutes)
        updated = replace(
            self._tasks[idx],
            name=clean,
            target_time=target,
            lead_minutes=lead,
            reminder_time=reminder,
        )
        tasks = list(self._tasks)
        tasks[idx] = updated
        self._commit(tasks)
        logger.debug("Task updated id=%s reminder_at=%s", task_id, to_iso(updated.reminder_time))
        return updated

    def toggle_completed(self, task_id: int) -> Task:
        idx = self._index_of(task_id)
        toggled = replace(self._tasks[idx], completed=not self._tasks[idx].completed)
        tasks = list(self._tasks)
        tasks[idx] = toggled
        self._commit(tasks)
        logger.debug("Task toggled id=%s completed=%s", task_id, toggled.completed)
        return toggled

    def delete(self, task_id: int) -> None:
        idx = self._index_of(task_id)
        self._commit(self._tasks[:idx] + self._tasks[idx + 1 :])
        logger.debug("Task deleted id=%s", task_id)

    def restore(self) -> list[Task]:
        """
        Load the last snapshot into memory.

        A missing or corrupt snapshot yields an empty collection. Corruption is
        logged, never raised; the next mutation overwrites the bad value.
        """
        try:
            raw = self._kv.get(self._key)
        except Exception:
            logger.exception("Failed to read task snapshot key=%s", self._key)
            raw = None

        if raw is None:
            self._tasks = []
            return []

        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise PersistenceCorruption("snapshot is not a JSON array")
            tasks = [self._record_to_task(rec) for rec in data]
            ids = [t.id for t in tasks]
            if len(set(ids)) != len(ids):
                raise PersistenceCorruption("duplicate task ids in snapshot")
        except (ValueError, PersistenceCorruption) as e:
            logger.error("Error loading tasks, starting empty: %s", e)
            self._tasks = []
            return []

        self._tasks = tasks
        logger.info("Restored %d task(s) from key=%s", len(tasks), self._key)
        return list(tasks)

    def stats(self) -> TaskStats:
        done = sum(1 for t in self._tasks if t.completed)
        return TaskStats(total=len(self._tasks), pending=len(self._tasks) - done, completed=done)
