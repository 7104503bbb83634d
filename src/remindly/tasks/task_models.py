# src/remindly/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

DEFAULT_LEAD_MINUTES = 5

# Lead times offered by the console UI; any non-negative integer is accepted.
LEAD_MINUTE_CHOICES: tuple[int, ...] = (1, 5, 10, 15, 30, 60)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_aware(dt: datetime) -> datetime:
    """Naive datetimes are taken as local wall-clock time."""
    if dt.tzinfo is None:
        return dt.astimezone()
    return dt


def compute_reminder_time(target_time: datetime, lead_minutes: int) -> datetime:
    return target_time - timedelta(minutes=lead_minutes)


def to_iso(dt: datetime) -> str:
    """UTC ISO-8601 with a 'Z' suffix (same shape as JS Date.toISOString)."""
    return dt.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


def from_iso(raw: str) -> datetime:
    return ensure_aware(datetime.fromisoformat(raw))


@dataclass(slots=True)
class Task:
    id: int
    name: str
    target_time: datetime
    lead_minutes: int
    reminder_time: datetime
    completed: bool
    created_at: datetime


@dataclass(slots=True, frozen=True)
class TaskStats:
    total: int
    pending: int
    completed: int
