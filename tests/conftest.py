# tests/conftest.py

from __future__ import annotations

from pathlib import Path

import pytest

from rtc_taskqueue.config import Settings
from rtc_taskqueue.tasks.priority import DEFAULT_PRIORITIES


@pytest.fixture()
def settings(tmp_path: Path) -> Settings:
    """
    Settings with short poll delays.

    Built directly rather than from the environment to keep tests deterministic.
    """
    return Settings(
        app_name="rtc-taskqueue-test",
        log_level="DEBUG",
        log_dir=tmp_path / "logs",
        retry_delay_ms=10,
        settle_delay_ms=1,
        priorities=list(DEFAULT_PRIORITIES),
    )
