# src/remindly/offline/cache.py

from __future__ import annotations

"""
Offline asset cache.

Three lifecycle steps, same contract as an installable web worker:
- install():  fetch every manifest path from the origin into the current cache
- activate(): delete every other cache generation (one live generation at a time)
- fetch():    cache first, then network; navigations fall back to the app shell

Caches live on disk as <cache_root>/<cache_name>/<sha256(path)>.{json,body}.
This module does not touch the task store or the scheduler.
"""

import contextlib
import hashlib
import json
import logging
import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx

from ..notify.notifier import NotificationBackend, NotificationPayload, REMINDER_VIBRATION

logger = logging.getLogger(__name__)

CACHE_NAME = "remindly-cache-v1"
APP_SHELL = "/index.html"
URLS_TO_CACHE: tuple[str, ...] = (
    "/",
    "/index.html",
    "/static/js/bundle.js",
    "/icon-192x192.png",
    "/icon-512x512.png",
)
PUSH_ICON = "/icon-192x192.png"


@dataclass(slots=True, frozen=True)
class CachedResponse:
    path: str
    status: int
    content_type: str
    body: bytes
    from_cache: bool


class OfflineCache:
    def __init__(
        self,
        cache_root: str | Path,
        *,
        origin: str,
        cache_name: str = CACHE_NAME,
        manifest: tuple[str, ...] = URLS_TO_CACHE,
        client: httpx.AsyncClient | None = None,
        timeout_seconds: float = 10.0,
    ) -> None:
        self._root = Path(cache_root)
        self._origin = origin.rstrip("/")
        self._cache_name = cache_name
        self._manifest = manifest
        self._client = client
        self._timeout = timeout_seconds

    @property
    def cache_name(self) -> str:
        return self._cache_name

    # ---- low-level helpers ----

    def _cache_dir(self, name: str | None = None) -> Path:
        return self._root / (name or self._cache_name)

    @staticmethod
    def _entry_stem(path: str) -> str:
        return hashlib.sha256(path.encode("utf-8")).hexdigest()

    def _client_ctx(self) -> Any:
        if self._client is not None:
            return contextlib.nullcontext(self._client)
        return httpx.AsyncClient(base_url=self._origin, timeout=self._timeout)

    def _write_entry(self, resp: CachedResponse) -> None:
        cache_dir = self._cache_dir()
        cache_dir.mkdir(parents=True, exist_ok=True)
        stem = self._entry_stem(resp.path)
        (cache_dir / f"{stem}.body").write_bytes(resp.body)
        meta = {"path": resp.path, "status": resp.status, "content_type": resp.content_type}
        (cache_dir / f"{stem}.json").write_text(json.dumps(meta), "utf-8")

    @staticmethod
    def _from_httpx(path: str, r: httpx.Response, *, from_cache: bool) -> CachedResponse:
        return CachedResponse(
            path=path,
            status=r.status_code,
            content_type=r.headers.get("content-type", "application/octet-stream"),
            body=r.content,
            from_cache=from_cache,
        )

    # ---- lifecycle ----

    async def install(self) -> int:
        """
        Fetch the whole manifest, then write it. One failed asset aborts the
        install and nothing is written (all-or-nothing, like cache.addAll).
        """
        fetched: list[CachedResponse] = []
        async with self._client_ctx() as client:
            for path in self._manifest:
                r = await client.get(path)
                r.raise_for_status()
                fetched.append(self._from_httpx(path, r, from_cache=True))

        for resp in fetched:
            self._write_entry(resp)
        logger.info("Installed %d asset(s) into cache %s", len(fetched), self._cache_name)
        return len(fetched)

    def activate(self) -> list[str]:
        """Delete every cache generation except the current one; return deleted names."""
        deleted: list[str] = []
        for name in self.cache_names():
            if name == self._cache_name:
                continue
            shutil.rmtree(self._cache_dir(name), ignore_errors=True)
            deleted.append(name)
            logger.info("Deleted stale cache %s", name)
        return deleted

    def cache_names(self) -> list[str]:
        if not self._root.exists():
            return []
        return sorted(p.name for p in self._root.iterdir() if p.is_dir())

    def match(self, path: str) -> CachedResponse | None:
        stem = self._entry_stem(path)
        meta_path = self._cache_dir() / f"{stem}.json"
        body_path = self._cache_dir() / f"{stem}.body"
        if not meta_path.exists() or not body_path.exists():
            return None
        try:
            meta = json.loads(meta_path.read_text("utf-8"))
            return CachedResponse(
                path=path,
                status=int(meta.get("status", 200)),
                content_type=str(meta.get("content_type", "application/octet-stream")),
                body=body_path.read_bytes(),
                from_cache=True,
            )
        except (OSError, ValueError):
            logger.warning("Unreadable cache entry for %s", path, exc_info=True)
            return None

    async def fetch(self, path: str, *, navigate: bool = False) -> CachedResponse | None:
        cached = self.match(path)
        if cached is not None:
            return cached

        try:
            async with self._client_ctx() as client:
                r = await client.get(path)
            return self._from_httpx(path, r, from_cache=False)
        except httpx.HTTPError:
            logger.debug("Network fetch failed for %s", path, exc_info=True)

        if navigate:
            return self.match(APP_SHELL)
        return None


def push_payload(data: dict[str, Any]) -> NotificationPayload:
    """Build the notification for a push message {"title", "body", "tag"}."""
    return NotificationPayload(
        title=str(data.get("title") or ""),
        body=str(data.get("body") or ""),
        tag=str(data.get("tag") or ""),
        require_interaction=True,
        icon=PUSH_ICON,
        vibrate=tuple(REMINDER_VIBRATION),
    )


def handle_push(raw: str | bytes, backend: NotificationBackend) -> NotificationPayload:
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError("push message must be a JSON object")
    payload = push_payload(data)
    backend.show(payload)
    return payload
