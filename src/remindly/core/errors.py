# src/remindly/core/errors.py

from __future__ import annotations


class RemindlyError(Exception):
    """Base class for errors surfaced to callers of the task API."""


class ValidationError(RemindlyError):
    """User input failed a precondition; the operation had no effect."""


class NotFoundError(RemindlyError):
    """The referenced task id is not in the store."""

    def __init__(self, task_id: int) -> None:
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class PersistenceCorruption(RemindlyError):
    """Stored snapshot could not be decoded. Recovered inside TaskStore.restore()."""
