# src/rtc_taskqueue/tasks/task_scheduler.py

"""
Task scheduler.

Owns the pending tasks, the single-flight slot and the poll timer for one peer
connection. Each poll:
- peeks the best-ranked pending task (rank is computed live),
- if it is not ready, re-arms the timer with the retry delay (unless the peer
  connection is closed),
- if it is ready, moves it into the slot and runs its body.

When the body settles the slot is cleared first, then the pass/fail handler runs.
Success re-arms the timer with the settle delay. Failure does not re-arm: the
queue stays idle until the next enqueue.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from typing import Any

from .checks import is_not_closed
from .poll_trigger import PollTrigger
from .priority import DEFAULT_PRIORITIES, PriorityModel
from .strategies import as_task_error
from .task_models import FailHandler, Outcome, Task, TaskStatus
from .task_queue import PendingTasks

logger = logging.getLogger(__name__)

RETRY_DELAY_SECONDS = 0.1
SETTLE_DELAY_SECONDS = 0.005


def _log_failure(err: BaseException) -> None:
    logger.error("unhandled task failure: %s", err)


class TaskScheduler:
    def __init__(
        self,
        pc: Any,
        *,
        priorities: Sequence[str] = DEFAULT_PRIORITIES,
        retry_delay_seconds: float = RETRY_DELAY_SECONDS,
        settle_delay_seconds: float = SETTLE_DELAY_SECONDS,
        default_fail: FailHandler | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
    ) -> None:
        self.pc = pc
        self.priority = PriorityModel(pc, priorities)
        self.pending = PendingTasks(self.priority.rank)
        self.retry_delay_seconds = retry_delay_seconds
        self.settle_delay_seconds = settle_delay_seconds
        self.default_fail: FailHandler = default_fail or _log_failure
        self.trigger = PollTrigger(self.poll, loop=loop)
        self._current: Task | None = None

    @property
    def current(self) -> Task | None:
        return self._current

    def is_ready(self, task: Task) -> bool:
        return self.priority.is_ready(task)

    def rank(self, task: Task) -> int:
        return self.priority.rank(task)

    def push(self, task: Task) -> None:
        if task.status is not TaskStatus.PENDING:
            raise ValueError(f"{task!r} cannot be queued again")
        self.pending.push(task)

    def schedule(self, delay_seconds: float | None = None) -> None:
        """(Re)arm the poll timer. Defaults to the settle delay."""
        if delay_seconds is None:
            delay_seconds = self.settle_delay_seconds
        self.trigger.arm(delay_seconds)

    def poll(self) -> None:
        task = self.pending.peek() if self._current is None else None
        if task is None or not self.is_ready(task):
            if self.pending and is_not_closed(self.pc):
                self.schedule(self.retry_delay_seconds)
            return

        self.pending.remove(task)
        task.advance(TaskStatus.EXECUTING)
        self._current = task
        logger.debug("running %s", task.name)

        settled = False

        def done(outcome: Outcome) -> None:
            nonlocal settled
            if settled:
                logger.warning("%s settled more than once; ignoring %s", task.name, outcome)
                return
            settled = True
            self._settle(task, outcome)

        try:
            task.body(task, done)
        except Exception as exc:
            done(Outcome.failure(as_task_error(task.name, exc)))

    def _settle(self, task: Task, outcome: Outcome) -> None:
        # clear the slot before handlers run; they may enqueue more work
        if self._current is task:
            self._current = None
        task.advance(TaskStatus.SETTLED)

        if not outcome.ok:
            err = outcome.error
            assert err is not None
            logger.error("%s failed: %s", task.name, err)
            fail = task.on_failure or self.default_fail
            try:
                fail(err)
            except Exception:
                logger.exception("fail handler for %s raised", task.name)
            # TODO: decide whether a failure should resume polling; pending tasks wait for the next enqueue
            return

        logger.debug("%s done", task.name)
        if task.on_success is not None:
            try:
                task.on_success(*outcome.results)
            except Exception:
                logger.exception("pass handler for %s raised", task.name)

        self.schedule()
