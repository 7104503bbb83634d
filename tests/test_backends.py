# tests/test_backends.py

from __future__ import annotations

import io
from typing import Any

import pytest

from remindly.notify import backends
from remindly.notify.notifier import NotificationPayload


class _Recorder:
    def __init__(self, error: type[Exception] | None = None) -> None:
        self.calls: list[dict[str, Any]] = []
        self._error = error

    def _record(self, **kwargs: Any) -> None:
        if self._error is not None:
            raise self._error()
        self.calls.append(kwargs)

    notify = vibrate = pattern = _record


def test_system_notification_keeps_tag_out_of_visible_text(monkeypatch: pytest.MonkeyPatch) -> None:
    rec = _Recorder()
    monkeypatch.setattr(backends, "notification", rec)

    backends.PlyerNotificationBackend("Remindly").show(
        NotificationPayload(title="⏰ Remindly", body="Time for: Gym", tag="task-5", icon="icon.png")
    )

    (kwargs,) = rec.calls
    assert kwargs == {
        "title": "⏰ Remindly",
        "message": "Time for: Gym",
        "app_name": "Remindly",
        "app_icon": "icon.png",
        "timeout": 10,
    }
    assert "task-5" not in kwargs.values()


def test_haptics_pattern_and_unsupported(monkeypatch: pytest.MonkeyPatch) -> None:
    rec = _Recorder()
    monkeypatch.setattr(backends, "vibrator", rec)
    haptics = backends.PlyerHaptics()

    assert haptics.pulse([100]) is True
    assert haptics.pulse([200, 100, 200]) is True
    assert haptics.pulse([]) is False
    assert rec.calls == [
        {"time": 0.1},
        {"pattern": [0.0, 0.2, 0.1, 0.2], "repeat": -1},
    ]

    monkeypatch.setattr(backends, "vibrator", _Recorder(NotImplementedError))
    assert haptics.pulse([50]) is False


def test_console_alert_rings_bell() -> None:
    out = io.StringIO()
    backends.ConsoleAlert(out)("⏰ Reminder: Gym")
    assert out.getvalue() == "\a\n⏰ Reminder: Gym\n"
