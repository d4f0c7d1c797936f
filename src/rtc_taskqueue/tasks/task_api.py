# src/rtc_taskqueue/tasks/task_api.py

"""
Public queueing API.

TaskQueue wraps one peer connection. Each operation (create_offer,
set_remote_description, add_ice_candidate, ...) is a callable that only queues a
task; the scheduler decides when it actually touches the peer connection.

Events:
- "fail": a task failed and had no fail handler of its own (arg: the error)
- "sdp":  a local description was applied (arg: pc.local_description)
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Iterable, Sequence
from typing import Any

from ..config import Settings, get_settings
from ..core.detect import detect, find_plugin
from ..core.ports import Factory, PeerConnection, Plugin
from ..errors import TaskQueueError
from .checks import (
    HAVE_REMOTE_OFFER,
    has_local_or_remote_description,
    is_not_closed,
    is_not_negotiating,
    read_attr,
    signaling_state,
)
from .strategies import Strategies
from .task_models import Check, FailHandler, PassHandler, Strategy, Task, make_task
from .task_scheduler import TaskScheduler

logger = logging.getLogger(__name__)

Listener = Callable[..., Any]
Operation = Callable[..., Task]


class TaskQueue:
    """Serializes operations against a single peer connection."""

    def __init__(
        self,
        pc: PeerConnection,
        *,
        priorities: Sequence[str] | None = None,
        plugins: Iterable[Plugin] | None = None,
        session_description_factory: Factory | None = None,
        ice_candidate_factory: Factory | None = None,
        detect_namespace: Any = None,
        retry_delay_seconds: float | None = None,
        settle_delay_seconds: float | None = None,
        loop: asyncio.AbstractEventLoop | None = None,
        settings: Settings | None = None,
    ) -> None:
        settings = settings or get_settings()

        self.pc = pc
        self.plugin = find_plugin(plugins)
        self._listeners: dict[str, list[Listener]] = {}

        self._session_description_factory = session_description_factory or detect(
            "RTCSessionDescription", detect_namespace
        )
        self._ice_candidate_factory = ice_candidate_factory or detect("RTCIceCandidate", detect_namespace)
        if self._session_description_factory is None or self._ice_candidate_factory is None:
            raise TaskQueueError("no session description / ice candidate constructor available")

        self.scheduler = TaskScheduler(
            pc,
            priorities=settings.priorities if priorities is None else priorities,
            retry_delay_seconds=(
                settings.retry_delay_seconds if retry_delay_seconds is None else retry_delay_seconds
            ),
            settle_delay_seconds=(
                settings.settle_delay_seconds if settle_delay_seconds is None else settle_delay_seconds
            ),
            default_fail=self._default_fail,
            loop=loop,
        )

        self.strategies = strategies = Strategies(pc, create_ice_candidate=self.create_ice_candidate)

        self.add_ice_candidate: Operation = self.enqueue(
            "add_ice_candidate",
            strategies.apply_candidate,
            checks=[has_local_or_remote_description],
        )
        self.set_local_description: Operation = self.enqueue(
            "set_local_description",
            strategies.exec_method,
            on_success=self._emit_sdp,
        )
        self.set_remote_description: Operation = self.enqueue(
            "set_remote_description",
            strategies.exec_method,
            checks=[is_not_closed],
            process_args=self.create_session_description,
            on_success=self._complete_connection,
        )
        self.create_offer: Operation = self.enqueue(
            "create_offer",
            strategies.exec_method,
            checks=[is_not_closed, is_not_negotiating],
            on_success=self.set_local_description,
        )
        self.create_answer: Operation = self.enqueue(
            "create_answer",
            strategies.exec_method,
            checks=[is_not_closed],
            on_success=self.set_local_description,
        )

    # ---- events ----

    def on(self, event: str, listener: Listener) -> None:
        self._listeners.setdefault(event, []).append(listener)

    def once(self, event: str, listener: Listener) -> None:
        def _once(*args: Any) -> Any:
            self.off(event, _once)
            return listener(*args)

        self.on(event, _once)

    def off(self, event: str, listener: Listener) -> None:
        listeners = self._listeners.get(event, [])
        if listener in listeners:
            listeners.remove(listener)

    def emit(self, event: str, *args: Any) -> bool:
        """Call every listener for event. Returns False when nobody listens."""
        listeners = list(self._listeners.get(event, []))
        for listener in listeners:
            try:
                listener(*args)
            except Exception:
                logger.exception("listener for %r raised", event)
        return bool(listeners)

    # ---- queueing ----

    def enqueue(
        self,
        name: str,
        body: Strategy,
        *,
        checks: Sequence[Check] = (),
        process_args: Callable[[Any], Any] | None = None,
        on_success: PassHandler | None = None,
        on_failure: FailHandler | None = None,
    ) -> Operation:
        """Build the public callable that queues a `name` task."""

        def operation(*args: Any) -> Task:
            if process_args is not None:
                args = tuple(process_args(a) for a in args)

            task = make_task(
                name,
                args,
                body,
                checks=checks,
                on_success=on_success,
                on_failure=on_failure,
            )
            logger.debug("queueing: %s %r", name, task.args)
            self.scheduler.push(task)
            self.scheduler.schedule()
            return task

        operation.__name__ = name
        return operation

    @property
    def pending(self) -> int:
        return len(self.scheduler.pending)

    @property
    def current(self) -> str | None:
        task = self.scheduler.current
        return None if task is None else task.name

    # ---- domain objects ----

    def create_session_description(self, data: Any) -> Any:
        hook = getattr(self.plugin, "create_session_description", None)
        if callable(hook):
            return hook(data)
        return self._session_description_factory(data)

    def create_ice_candidate(self, data: Any) -> Any:
        hook = getattr(self.plugin, "create_ice_candidate", None)
        if callable(hook):
            return hook(data)
        return self._ice_candidate_factory(data)

    # ---- handlers ----

    def _default_fail(self, err: BaseException) -> None:
        self.emit("fail", err)

    def _emit_sdp(self, *_results: Any) -> None:
        self.emit("sdp", read_attr(self.pc, "local_description"))

    def _complete_connection(self, *_results: Any) -> None:
        if signaling_state(self.pc) == HAVE_REMOTE_OFFER:
            self.create_answer()


def create_task_queue(pc: PeerConnection, **opts: Any) -> TaskQueue:
    """Build a TaskQueue for pc. See TaskQueue for the accepted options."""
    return TaskQueue(pc, **opts)
