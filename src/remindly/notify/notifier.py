# src/remindly/notify/notifier.py

from __future__ import annotations

"""
Tiered reminder delivery.

notify() runs a haptic pulse, then walks an ordered list of delivery tiers
until one reports DELIVERED:
- SystemNotificationTier: desktop notification, only when permission is granted
- AlertTier: synchronous console alert, the always-visible last resort

A tier that raises counts as FAILED and the chain moves on. notify() itself
never raises; the worst case is a DeliveryResult with delivered_by=None.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Protocol

from ..core.ports import Haptics, Remindable
from .permissions import PermissionManager

logger = logging.getLogger(__name__)

APP_TITLE = "⏰ Remindly - Task Reminder"
DEFAULT_ICON = "icon-192x192.png"
AUTO_CLOSE_SECONDS = 10.0

# Alternating on/off durations in milliseconds.
REMINDER_VIBRATION: list[int] = [200, 100, 200, 100, 200]


class TierOutcome(str, Enum):
    DELIVERED = "delivered"
    SKIPPED = "skipped"
    FAILED = "failed"


@dataclass(slots=True, frozen=True)
class NotificationPayload:
    title: str
    body: str
    tag: str
    require_interaction: bool = True
    icon: str = DEFAULT_ICON
    timeout_seconds: float = AUTO_CLOSE_SECONDS
    vibrate: tuple[int, ...] = ()


def reminder_tag(subject_id: Any) -> str:
    """Same tag for the same task, so repeat notifications replace each other."""
    return f"task-{subject_id}"


def build_payload(
    subject: Remindable,
    *,
    icon: str = DEFAULT_ICON,
    timeout_seconds: float = AUTO_CLOSE_SECONDS,
) -> NotificationPayload:
    return NotificationPayload(
        title=APP_TITLE,
        body=f"Time for: {subject.name}",
        tag=reminder_tag(subject.id),
        require_interaction=True,
        icon=icon,
        timeout_seconds=timeout_seconds,
    )


class NotificationBackend(Protocol):
    """Shows a system-level notification. Raises if the platform can't."""

    def show(self, payload: NotificationPayload) -> None: ...


class DeliveryTier(Protocol):
    name: str

    def deliver(self, subject: Remindable) -> TierOutcome: ...


class SystemNotificationTier:
    name = "system"

    def __init__(
        self,
        backend: NotificationBackend,
        permissions: PermissionManager,
        *,
        icon: str = DEFAULT_ICON,
        timeout_seconds: float = AUTO_CLOSE_SECONDS,
    ) -> None:
        self._backend = backend
        self._permissions = permissions
        self._icon = icon
        self._timeout_seconds = timeout_seconds

    def deliver(self, subject: Remindable) -> TierOutcome:
        if not self._permissions.is_granted():
            return TierOutcome.SKIPPED
        payload = build_payload(subject, icon=self._icon, timeout_seconds=self._timeout_seconds)
        self._backend.show(payload)
        return TierOutcome.DELIVERED


class AlertTier:
    name = "alert"

    def __init__(self, alert: Callable[[str], None]) -> None:
        self._alert = alert

    def deliver(self, subject: Remindable) -> TierOutcome:
        self._alert(f"⏰ Reminder: {subject.name}")
        return TierOutcome.DELIVERED


@dataclass(slots=True)
class DeliveryResult:
    subject_id: Any
    haptic: bool = False
    delivered_by: str | None = None
    attempts: list[tuple[str, TierOutcome]] = field(default_factory=list)

    @property
    def delivered(self) -> bool:
        return self.delivered_by is not None


@dataclass(slots=True, frozen=True)
class ProbeReminder:
    """Stand-in subject for the "test notification" command."""

    id: str = "test"
    name: str = "Test Notification"


class Notifier:
    def __init__(
        self,
        tiers: list[DeliveryTier],
        *,
        haptics: Haptics | None = None,
        vibration: list[int] | None = None,
    ) -> None:
        self._tiers = list(tiers)
        self._haptics = haptics
        self._vibration = list(vibration or REMINDER_VIBRATION)

    def notify(self, subject: Remindable) -> DeliveryResult:
        result = DeliveryResult(subject_id=subject.id)

        if self._haptics is not None:
            try:
                result.haptic = bool(self._haptics.pulse(self._vibration))
            except Exception:
                logger.debug("Haptic pulse failed.", exc_info=True)

        for tier in self._tiers:
            try:
                outcome = tier.deliver(subject)
            except Exception:
                logger.warning("Delivery tier %s failed for %s", tier.name, subject.id, exc_info=True)
                outcome = TierOutcome.FAILED

            result.attempts.append((tier.name, outcome))
            if outcome == TierOutcome.DELIVERED:
                result.delivered_by = tier.name
                break

        if result.delivered:
            logger.info("Reminder %s delivered via %s", subject.id, result.delivered_by)
        else:
            logger.warning("Reminder %s not delivered by any tier: %s", subject.id, result.attempts)
        return result
