# src/remindly/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The core depends on Protocols instead of concrete implementations.
This keeps storage and notification backends swappable and makes testing easier.
"""

from collections.abc import Callable
from datetime import datetime
from typing import Any, Protocol

Clock = Callable[[], datetime]
# Returns "now" as a timezone-aware datetime.


class KeyValueStore(Protocol):
    """Local string key-value storage (the browser localStorage analogue)."""

    def get(self, key: str) -> str | None: ...
    def set(self, key: str, value: str) -> None: ...
    def delete(self, key: str) -> None: ...


class Remindable(Protocol):
    """Anything the Notifier can announce: a Task, or a probe for /test."""

    @property
    def id(self) -> Any: ...

    @property
    def name(self) -> str: ...


class Haptics(Protocol):
    """Best-effort vibration. Pattern is alternating on/off durations in ms."""

    def pulse(self, pattern: list[int]) -> bool: ...
