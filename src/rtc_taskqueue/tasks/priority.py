# src/rtc_taskqueue/tasks/priority.py

"""
Priority model.

Rank is recomputed against the live peer connection every time it is asked for:
- a task that fails its checks ranks PRIORITY_WAIT (worse than anything ready),
- a ready task ranks by its position in the priority list,
- a ready task not in the list ranks PRIORITY_LOW.

Lower rank runs first. Nothing is cached on the task.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .checks import all_pass
from .task_models import Task

PRIORITY_LOW = 100
PRIORITY_WAIT = 1000

DEFAULT_PRIORITIES: tuple[str, ...] = (
    "add_ice_candidate",
    "set_local_description",
    "set_remote_description",
    "create_answer",
    "create_offer",
)


class PriorityModel:
    def __init__(self, pc: Any, priorities: Sequence[str] = DEFAULT_PRIORITIES) -> None:
        if len(priorities) >= PRIORITY_LOW:
            raise ValueError(f"at most {PRIORITY_LOW - 1} named priorities are supported")
        self._pc = pc
        self._priorities = tuple(priorities)

    @property
    def priorities(self) -> tuple[str, ...]:
        return self._priorities

    def is_ready(self, task: Task) -> bool:
        return all_pass(task.checks, self._pc)

    def rank(self, task: Task) -> int:
        if not self.is_ready(task):
            return PRIORITY_WAIT
        try:
            return self._priorities.index(task.name)
        except ValueError:
            return PRIORITY_LOW

    def compare(self, a: Task, b: Task) -> int:
        """cmp-style comparator: negative when a should run before b."""
        return self.rank(a) - self.rank(b)
