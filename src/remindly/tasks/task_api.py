# src/remindly/tasks/task_api.py

from __future__ import annotations

import logging
from datetime import datetime

from ..core.state import AppState
from .task_models import Task

logger = logging.getLogger(__name__)

# Short confirmation pulses (ms) after user actions.
ADD_PULSE = [100]
TOGGLE_PULSE = [50]
DELETE_PULSE = [50, 50, 50]


def _feedback(state: AppState, pattern: list[int]) -> None:
    if state.haptics is None:
        return
    try:
        state.haptics.pulse(pattern)
    except Exception:
        logger.debug("Feedback pulse failed.", exc_info=True)


def add_task(state: AppState, name: str, target_time: datetime | None, lead_minutes: int) -> Task:
    """Create a task and arm its reminder. Raises ValidationError."""
    task = state.task_store.add(name, target_time, lead_minutes)
    state.scheduler.arm(task)
    _feedback(state, ADD_PULSE)
    logger.info("Task %s added: %r", task.id, task.name)
    return task


def update_task(
    state: AppState, task_id: int, name: str, target_time: datetime | None, lead_minutes: int
) -> Task:
    """Replace a task's editable fields and re-arm (the old timer is cancelled)."""
    task = state.task_store.update(task_id, name, target_time, lead_minutes)
    state.scheduler.arm(task)
    logger.info("Task %s updated: %r", task.id, task.name)
    return task


def toggle_task(state: AppState, task_id: int) -> Task:
    """
    Flip completion. Timers are left alone: a completed task's timer is
    ignored when it fires because the scheduler re-reads the task.
    """
    task = state.task_store.toggle_completed(task_id)
    _feedback(state, TOGGLE_PULSE)
    return task


def delete_task(state: AppState, task_id: int) -> None:
    state.task_store.delete(task_id)
    state.scheduler.disarm(task_id)
    _feedback(state, DELETE_PULSE)
    logger.info("Task %s deleted", task_id)


def restore_tasks(state: AppState) -> list[Task]:
    """Load the snapshot and re-arm every pending task whose reminder is still ahead."""
    tasks = state.task_store.restore()
    armed = state.scheduler.arm_all(tasks)
    logger.info("Restored %d task(s), %d reminder(s) armed", len(tasks), armed)
    return tasks


def sorted_by_time(tasks: list[Task]) -> tuple[list[Task], list[Task]]:
    """Display order: (pending, completed), each sorted by target time."""
    ordered = sorted(tasks, key=lambda t: t.target_time)
    return [t for t in ordered if not t.completed], [t for t in ordered if t.completed]
