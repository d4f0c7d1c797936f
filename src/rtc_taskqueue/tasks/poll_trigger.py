# src/rtc_taskqueue/tasks/poll_trigger.py

from __future__ import annotations

import asyncio
from collections.abc import Callable


class PollTrigger:
    """
    Single-shot, re-armable timer.

    arm() cancels whatever is pending and schedules exactly one callback, so any
    burst of arm() calls collapses into a single poll.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        *,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self._callback = callback
        self._loop = loop
        self._handle: asyncio.TimerHandle | None = None

    @property
    def armed(self) -> bool:
        return self._handle is not None

    def arm(self, delay_seconds: float) -> None:
        """Schedule the callback after delay_seconds. Needs a running loop unless one was given."""
        self.cancel()
        loop = self._loop or asyncio.get_running_loop()
        self._handle = loop.call_later(max(0.0, delay_seconds), self._fire)

    def cancel(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        self._handle = None
        self._callback()
