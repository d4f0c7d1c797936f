# src/rtc_taskqueue/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

One Settings object per process. Every field has a default, so nothing is
required at import time. Keyword options passed to create_task_queue() win over
anything read here.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from .tasks.priority import DEFAULT_PRIORITIES

ENV_PREFIX = "RTC_TASKQUEUE"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


load_dotenv(override=False)


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


def _env_list(name: str, default: list[str]) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default)
    return [p.strip() for p in raw.replace(",", " ").split() if p.strip()]


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
    log_dir: Path

    # ---- Poll timing (milliseconds) ----
    retry_delay_ms: int
    settle_delay_ms: int

    # ---- Ordering ----
    priorities: list[str]

    @property
    def retry_delay_seconds(self) -> float:
        return self.retry_delay_ms / 1000.0

    @property
    def settle_delay_seconds(self) -> float:
        return self.settle_delay_ms / 1000.0

    @staticmethod
    def from_env() -> "Settings":
        return Settings(
            app_name=_env(_k("APP_NAME"), "rtc-taskqueue"),
            log_level=_env(_k("LOG_LEVEL"), "INFO"),
            log_dir=_env_path(_k("LOG_DIR"), Path(".local/rtc_taskqueue")),
            retry_delay_ms=max(1, _env_int(_k("RETRY_DELAY_MS"), 100)),
            settle_delay_ms=max(0, _env_int(_k("SETTLE_DELAY_MS"), 5)),
            priorities=_env_list(_k("PRIORITIES"), list(DEFAULT_PRIORITIES)),
        )


SETTINGS = Settings.from_env()


def get_settings() -> Settings:
    return SETTINGS
