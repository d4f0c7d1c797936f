# src/rtc_taskqueue/tasks/task_models.py

from __future__ import annotations

import itertools
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

_ids = itertools.count(1)


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    A task moves forward only: pending -> executing -> settled.
    """

    PENDING = "pending"
    EXECUTING = "executing"
    SETTLED = "settled"


@dataclass(frozen=True, slots=True)
class Outcome:
    """Result of running a task body: either an error or a tuple of results."""

    error: BaseException | None = None
    results: tuple[Any, ...] = ()

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, *results: Any) -> Outcome:
        return cls(results=results)

    @classmethod
    def failure(cls, error: BaseException) -> Outcome:
        return cls(error=error)


Check = Callable[[Any], bool]
Continuation = Callable[[Outcome], None]
Strategy = Callable[["Task", Continuation], None]
PassHandler = Callable[..., Any]
FailHandler = Callable[[BaseException], Any]


@dataclass(slots=True, eq=False)
class Task:
    name: str
    args: tuple[Any, ...]
    body: Strategy
    checks: tuple[Check, ...] = ()
    on_success: PassHandler | None = None
    on_failure: FailHandler | None = None

    id: int = field(default_factory=lambda: next(_ids))
    status: TaskStatus = TaskStatus.PENDING

    def __post_init__(self) -> None:
        # freeze whatever sequence the caller handed us
        if not isinstance(self.args, tuple):
            self.args = tuple(self.args)
        if not isinstance(self.checks, tuple):
            self.checks = tuple(self.checks)

    def advance(self, status: TaskStatus) -> None:
        """Move to the next lifecycle status. Going back or skipping is an error."""
        order = list(TaskStatus)
        if order.index(status) != order.index(self.status) + 1:
            raise RuntimeError(f"task {self.name}#{self.id}: cannot go {self.status} -> {status}")
        self.status = status

    def __repr__(self) -> str:
        return f"Task({self.name}#{self.id}, {self.status})"


def make_task(
    name: str,
    args: Sequence[Any],
    body: Strategy,
    *,
    checks: Sequence[Check] = (),
    on_success: PassHandler | None = None,
    on_failure: FailHandler | None = None,
) -> Task:
    return Task(
        name=name,
        args=tuple(args),
        body=body,
        checks=tuple(checks),
        on_success=on_success,
        on_failure=on_failure,
    )
