# src/remindly/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- Nothing required at import time; every value has a local default.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "REMINDLY"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Local data (ignored by git) ----
    data_dir: Path
    db_path: Path
    storage_key: str

    # ---- Reminders ----
    default_lead_minutes: int
    notification_timeout_seconds: float
    icon_path: Optional[Path]

    # ---- Offline asset cache ----
    asset_origin: str
    cache_name: str
    cache_dir: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "Remindly")
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/remindly"))
        db_path = _env_path(_k("DB_PATH"), data_dir / "remindly.sqlite3")
        storage_key = _env(_k("STORAGE_KEY"), "remindly-tasks")

        default_lead_minutes = max(0, _env_int(_k("DEFAULT_LEAD_MINUTES"), 5))
        notification_timeout_seconds = max(0.0, _env_float(_k("NOTIFICATION_TIMEOUT_SECONDS"), 10.0))

        raw_icon = _env(_k("ICON_PATH"), "").strip()
        icon_path = Path(raw_icon).expanduser() if raw_icon else None

        asset_origin = _env(_k("ASSET_ORIGIN"), "").strip().rstrip("/")
        cache_name = _env(_k("CACHE_NAME"), "remindly-cache-v1")
        cache_dir = _env_path(_k("CACHE_DIR"), data_dir / "caches")

        return Settings(
            app_name=app_name,
            log_level=log_level,
            data_dir=data_dir,
            db_path=db_path,
            storage_key=storage_key,
            default_lead_minutes=default_lead_minutes,
            notification_timeout_seconds=notification_timeout_seconds,
            icon_path=icon_path,
            asset_origin=asset_origin,
            cache_name=cache_name,
            cache_dir=cache_dir,
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
