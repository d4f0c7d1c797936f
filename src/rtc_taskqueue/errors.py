# src/rtc_taskqueue/errors.py

"""Errors raised or reported by the task queue."""

from __future__ import annotations


class TaskQueueError(Exception):
    """Base class for task queue errors."""


class UnsupportedOperation(TaskQueueError):
    """A dequeued task names a method the peer connection does not have."""

    def __init__(self, task_name: str) -> None:
        super().__init__(f'cannot call "{task_name}" on peer connection')
        self.task_name = task_name


class ExecutionError(TaskQueueError):
    """The peer connection reported failure for an operation."""

    def __init__(self, task_name: str, reason: object = None) -> None:
        msg = f"{task_name} failed"
        if reason is not None:
            msg = f"{msg}: {reason}"
        super().__init__(msg)
        self.task_name = task_name
        self.reason = reason


class MalformedPayload(TaskQueueError):
    """A candidate could not be built or applied. Logged, never reported."""
