# src/rtc_taskqueue/tasks/task_queue.py

"""
Pending task storage.

Order depends on live peer connection state, so a heap would go stale between
polls. Tasks are kept in arrival order and ranked at peek time instead.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator

from .task_models import Task


class PendingTasks:
    def __init__(self, rank: Callable[[Task], int]) -> None:
        self._rank = rank
        self._items: list[Task] = []

    def __len__(self) -> int:
        return len(self._items)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __iter__(self) -> Iterator[Task]:
        return iter(list(self._items))

    def push(self, task: Task) -> None:
        if any(t is task for t in self._items):
            raise ValueError(f"{task!r} is already queued")
        self._items.append(task)

    def peek(self) -> Task | None:
        """Best-ranked task right now, or None when empty."""
        if not self._items:
            return None
        return min(self._items, key=self._rank)

    def remove(self, task: Task) -> None:
        for i, t in enumerate(self._items):
            if t is task:
                del self._items[i]
                return
        raise ValueError(f"{task!r} is not queued")

    def pop(self) -> Task | None:
        task = self.peek()
        if task is not None:
            self.remove(task)
        return task
