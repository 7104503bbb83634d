# tests/fakes.py

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any

from remindly.notify.notifier import NotificationPayload, TierOutcome

T0 = datetime(2026, 1, 15, 9, 0, tzinfo=timezone.utc)


class FixedClock:
    """Deterministic clock; advance() moves it forward."""

    def __init__(self, now: datetime = T0) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)


class MemoryKeyValueStore:
    """dict-backed KeyValueStore; fail_writes simulates a broken disk."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.writes = 0
        self.fail_writes = False

    def get(self, key: str) -> str | None:
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if self.fail_writes:
            raise RuntimeError("disk full")
        self.writes += 1
        self.data[key] = value

    def delete(self, key: str) -> None:
        self.data.pop(key, None)


@dataclass(slots=True)
class RecordingNotifier:
    """Stands in for Notifier.notify in scheduler tests."""

    calls: list[Any] = field(default_factory=list)

    def notify(self, subject: Any) -> None:
        self.calls.append(subject)

    @property
    def ids(self) -> list[Any]:
        return [s.id for s in self.calls]


@dataclass(slots=True)
class RecordingHaptics:
    supported: bool = True
    pulses: list[list[int]] = field(default_factory=list)

    def pulse(self, pattern: list[int]) -> bool:
        self.pulses.append(list(pattern))
        return self.supported


@dataclass(slots=True)
class RecordingBackend:
    """NotificationBackend that records payloads, or raises if broken."""

    broken: bool = False
    shown: list[NotificationPayload] = field(default_factory=list)

    def show(self, payload: NotificationPayload) -> None:
        if self.broken:
            raise OSError("no notification daemon")
        self.shown.append(payload)


class ScriptedTier:
    """DeliveryTier returning a fixed outcome (or raising)."""

    def __init__(self, name: str, outcome: TierOutcome | None = None, *, error: bool = False) -> None:
        self.name = name
        self._outcome = outcome or TierOutcome.DELIVERED
        self._error = error
        self.calls: list[Any] = []

    def deliver(self, subject: Any) -> TierOutcome:
        self.calls.append(subject)
        if self._error:
            raise RuntimeError(f"{self.name} exploded")
        return self._outcome
