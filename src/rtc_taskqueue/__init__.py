"""Priority task queue that serializes peer connection operations."""

from .errors import ExecutionError, MalformedPayload, TaskQueueError, UnsupportedOperation
from .tasks.task_api import TaskQueue, create_task_queue
from .tasks.task_models import Outcome, Task, TaskStatus

__all__ = [
    "ExecutionError",
    "MalformedPayload",
    "Outcome",
    "Task",
    "TaskQueue",
    "TaskQueueError",
    "TaskStatus",
    "UnsupportedOperation",
    "create_task_queue",
]
