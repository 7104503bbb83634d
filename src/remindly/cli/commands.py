# src/remindly/cli/commands.py

from __future__ import annotations

import inspect
import logging
import re
from collections.abc import Awaitable, Callable
from datetime import datetime, timedelta

from ..core.errors import NotFoundError, ValidationError
from ..core.state import AppState
from ..notify.notifier import ProbeReminder
from ..offline.cache import handle_push
from ..tasks import task_api
from ..tasks.task_models import LEAD_MINUTE_CHOICES, Task, ensure_aware, utc_now

CommandHandler = Callable[[AppState, list[str]], "str | Awaitable[str]"]

logger = logging.getLogger(__name__)

_RELATIVE_RE = re.compile(r"^\+(\d+)([mhd]?)$")
_UNITS = {"": "minutes", "m": "minutes", "h": "hours", "d": "days"}


class CommandRegistry:
    """Simple slash-command registry used by the console connector (/help, /add, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(self, state: AppState, line: str) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            result = handler(state, args)
            if inspect.isawaitable(result):
                result = await result
            return result
        except (ValidationError, NotFoundError) as e:
            return str(e)

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


# ---- parsing / formatting helpers ----


def parse_when(raw: str, now: datetime | None = None) -> datetime:
    """
    "+90m", "+2h", "+1d" (bare "+N" means minutes) or any ISO-8601 datetime.
    Naive ISO values are local time.
    """
    m = _RELATIVE_RE.match(raw.strip())
    if m:
        base = now or utc_now()
        try:
            return base + timedelta(**{_UNITS[m.group(2)]: int(m.group(1))})
        except OverflowError:
            raise ValidationError(f"Time {raw!r} is out of range") from None
    try:
        return ensure_aware(datetime.fromisoformat(raw.strip()))
    except ValueError:
        raise ValidationError(f"Can't read time {raw!r}; use ISO (2026-01-31T09:30) or +30m/+2h/+1d") from None


def parse_task_id(raw: str) -> int:
    try:
        return int(raw)
    except ValueError:
        raise ValidationError(f"Task id must be a number, got {raw!r}") from None


def split_task_args(state: AppState, args: list[str]) -> tuple[datetime, int, str]:
    """<when> [lead] <name...>; lead is only taken when a name follows it."""
    if not args:
        raise ValidationError("Please select a time")
    when = parse_when(args[0])
    rest = args[1:]
    lead = int(getattr(state.settings, "default_lead_minutes", 5))
    if len(rest) >= 2 and rest[0].isdigit():
        lead = int(rest[0])
        rest = rest[1:]
    return when, lead, " ".join(rest)


def format_date(dt: datetime) -> str:
    return dt.astimezone().strftime("%a, %b %d, %I:%M %p")


def format_task(task: Task) -> str:
    mark = "x" if task.completed else " "
    line = f"[{mark}] #{task.id} {task.name} - {format_date(task.target_time)}"
    if not task.completed:
        line += f" (reminder: {task.lead_minutes} min before)"
    return line


# ---- handlers ----


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_add(state: AppState, args: list[str]) -> str:
    when, lead, name = split_task_args(state, args)
    task = task_api.add_task(state, name, when, lead)
    return f"Added #{task.id} {task.name}; reminder at {format_date(task.reminder_time)}"


def cmd_edit(state: AppState, args: list[str]) -> str:
    if not args:
        raise ValidationError("Usage: /edit <id> <when> [lead] <name>")
    task_id = parse_task_id(args[0])
    when, lead, name = split_task_args(state, args[1:])
    task = task_api.update_task(state, task_id, name, when, lead)
    return f"Updated #{task.id} {task.name}; reminder at {format_date(task.reminder_time)}"


def cmd_done(state: AppState, args: list[str]) -> str:
    if not args:
        raise ValidationError("Usage: /done <id>")
    task = task_api.toggle_task(state, parse_task_id(args[0]))
    status = "completed" if task.completed else "pending"
    return f"#{task.id} {task.name} marked {status}"


def cmd_delete(state: AppState, args: list[str]) -> str:
    if not args:
        raise ValidationError("Usage: /delete <id>")
    task_id = parse_task_id(args[0])
    task_api.delete_task(state, task_id)
    return f"Deleted #{task_id}"


def cmd_list(state: AppState, args: list[str]) -> str:
    tasks = state.task_store.list()
    if not tasks:
        return 'No tasks yet! Use "/add" to create your first reminder.'
    pending, completed = task_api.sorted_by_time(tasks)
    lines: list[str] = []
    if pending:
        lines.append(f"Pending Tasks ({len(pending)})")
        lines.extend(f"  {format_task(t)}" for t in pending)
    if completed:
        lines.append(f"Completed Tasks ({len(completed)})")
        lines.extend(f"  {format_task(t)}" for t in completed)
    return "\n".join(lines)


def cmd_stats(state: AppState, args: list[str]) -> str:
    s = state.task_store.stats()
    return f"Total: {s.total}  Pending: {s.pending}  Completed: {s.completed}"


def cmd_test(state: AppState, args: list[str]) -> str:
    result = state.notifier.notify(ProbeReminder())
    if result.delivered:
        return f"Test notification delivered via {result.delivered_by}"
    return "Test notification could not be delivered"


def cmd_status(state: AppState, args: list[str]) -> str:
    return (
        "Status:\n"
        f"  Notifications: {state.permissions.state.value}\n"
        f"  Armed reminders: {len(state.scheduler.pending_ids())}\n"
        f"  Lead choices: {', '.join(str(m) for m in LEAD_MINUTE_CHOICES)} min\n"
        f"  Data: {getattr(state.settings, 'db_path', '?')}"
    )


async def cmd_offline(state: AppState, args: list[str]) -> str:
    cache = state.offline_cache
    if cache is None:
        return "Offline cache disabled (set REMINDLY_ASSET_ORIGIN)."
    try:
        count = await cache.install()
    except Exception as e:
        logger.warning("Offline cache install failed: %s", e)
        return f"Offline cache install failed: {e}"
    deleted = cache.activate()
    return f"Cached {count} asset(s) in {cache.cache_name}; removed {len(deleted)} old cache(s)"


def cmd_push(state: AppState, args: list[str]) -> str:
    if state.push_backend is None:
        return "Push notifications are not available."
    raw = " ".join(args).strip()
    if not raw:
        raise ValidationError('Usage: /push {"title": ..., "body": ..., "tag": ...}')
    try:
        payload = handle_push(raw, state.push_backend)
    except ValueError as e:
        raise ValidationError(f"Bad push message: {e}") from None
    return f"Push shown: {payload.title or '(untitled)'}"


registry.register("help", cmd_help, "Show this help.", aliases=["h", "?"])
registry.register("add", cmd_add, "Add a task: /add <when> [lead minutes] <name>.")
registry.register("edit", cmd_edit, "Edit a task: /edit <id> <when> [lead minutes] <name>.")
registry.register("done", cmd_done, "Toggle a task completed/pending: /done <id>.", aliases=["toggle"])
registry.register("delete", cmd_delete, "Delete a task: /delete <id>.", aliases=["rm"])
registry.register("list", cmd_list, "List tasks by time.", aliases=["ls"])
registry.register("stats", cmd_stats, "Show task counters.")
registry.register("test", cmd_test, "Send a test notification.")
registry.register("status", cmd_status, "Show notification and scheduler status.")
registry.register("offline", cmd_offline, "Install and activate the offline asset cache.")
registry.register("push", cmd_push, "Show a push message: /push <json object>.")
