# tests/test_offline_cache.py

from __future__ import annotations

import json
from pathlib import Path

import httpx
import pytest

from remindly.offline.cache import URLS_TO_CACHE, OfflineCache, handle_push, push_payload

from .fakes import RecordingBackend

ORIGIN = "http://remindly.test"


def _site(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    if path in URLS_TO_CACHE or path == "/extra.css":
        ctype = "text/html" if path in ("/", "/index.html") else "application/octet-stream"
        return httpx.Response(200, content=f"asset {path}".encode(), headers={"content-type": ctype})
    return httpx.Response(404, content=b"missing")


def _offline(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("network down", request=request)


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url=ORIGIN)


def _cache(root: Path, handler, name: str = "remindly-cache-v1") -> OfflineCache:
    return OfflineCache(root, origin=ORIGIN, cache_name=name, client=_client(handler))


@pytest.mark.asyncio
async def test_install_then_serve_offline(tmp_path: Path) -> None:
    assert await _cache(tmp_path, _site).install() == len(URLS_TO_CACHE)

    offline = _cache(tmp_path, _offline)
    resp = await offline.fetch("/static/js/bundle.js")

    assert resp is not None
    assert resp.from_cache is True
    assert resp.body == b"asset /static/js/bundle.js"


@pytest.mark.asyncio
async def test_uncached_path_goes_to_network(tmp_path: Path) -> None:
    cache = _cache(tmp_path, _site)

    resp = await cache.fetch("/extra.css")

    assert resp is not None
    assert resp.from_cache is False
    assert resp.status == 200
    # network responses are not added to the cache
    assert cache.match("/extra.css") is None


@pytest.mark.asyncio
async def test_navigation_falls_back_to_app_shell(tmp_path: Path) -> None:
    await _cache(tmp_path, _site).install()
    offline = _cache(tmp_path, _offline)

    shell = await offline.fetch("/tasks/123", navigate=True)
    asset = await offline.fetch("/tasks/123")

    assert shell is not None
    assert shell.body == b"asset /index.html"
    assert shell.content_type == "text/html"
    assert asset is None


@pytest.mark.asyncio
async def test_failed_install_writes_nothing(tmp_path: Path) -> None:
    def broken_icon(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/icon-512x512.png":
            return httpx.Response(500)
        return _site(request)

    cache = _cache(tmp_path, broken_icon)

    with pytest.raises(httpx.HTTPStatusError):
        await cache.install()

    assert cache.match("/") is None


@pytest.mark.asyncio
async def test_activate_keeps_only_current_generation(tmp_path: Path) -> None:
    await _cache(tmp_path, _site, name="remindly-cache-v0").install()
    current = _cache(tmp_path, _site, name="remindly-cache-v1")
    await current.install()
    (tmp_path / "someone-elses-cache").mkdir()

    deleted = current.activate()

    assert sorted(deleted) == ["remindly-cache-v0", "someone-elses-cache"]
    assert current.cache_names() == ["remindly-cache-v1"]
    assert current.match("/index.html") is not None


def test_activate_without_caches(tmp_path: Path) -> None:
    cache = OfflineCache(tmp_path / "none", origin=ORIGIN)
    assert cache.activate() == []


def test_push_payload() -> None:
    payload = push_payload({"title": "Remindly", "body": "Time for: Gym", "tag": "task-7"})

    assert payload.title == "Remindly"
    assert payload.body == "Time for: Gym"
    assert payload.tag == "task-7"
    assert payload.require_interaction is True
    assert payload.icon == "/icon-192x192.png"
    assert payload.vibrate == (200, 100, 200, 100, 200)


def test_handle_push_shows_notification() -> None:
    backend = RecordingBackend()

    handle_push(json.dumps({"title": "Remindly", "body": "hi", "tag": "t"}), backend)

    assert [p.body for p in backend.shown] == ["hi"]

    with pytest.raises(ValueError):
        handle_push("[1, 2]", backend)
