# src/rtc_taskqueue/tasks/strategies.py

"""
Task bodies.

A strategy is called as strategy(task, done) and must eventually call
done(Outcome). Peer connection methods come in three flavours and all of them
are folded into Outcome here:

- legacy callbacks: method(*args, success, failure)
- coroutine / awaitable: result = await method(*args)
- plain call: result = method(*args)
"""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from typing import Any

from ..core.models import read_field
from ..errors import ExecutionError, MalformedPayload, TaskQueueError, UnsupportedOperation
from .checks import camel_name
from .task_models import Continuation, Outcome, Task

logger = logging.getLogger(__name__)

_CALLBACK_HINTS = ("success", "fail", "callback", "errback")
_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)


def resolve_method(pc: Any, name: str) -> Callable[..., Any] | None:
    for attr in (name, camel_name(name)):
        fn = getattr(pc, attr, None)
        if callable(fn):
            return fn
    return None


def accepts_callbacks(fn: Callable[..., Any], nargs: int) -> bool:
    """
    True when fn takes success/failure callbacks right after its nargs arguments.

    Both callback slots must exist as positional parameters and each must either be
    required or be named like a callback. Methods taking *args are treated as modern.
    """
    try:
        params = list(inspect.signature(fn).parameters.values())
    except (TypeError, ValueError):
        return False

    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        return False

    positional = [p for p in params if p.kind in _POSITIONAL]
    slots = positional[nargs:nargs + 2]
    if len(slots) < 2:
        return False

    return all(
        p.default is inspect.Parameter.empty or any(h in p.name.lower() for h in _CALLBACK_HINTS)
        for p in slots
    )


def as_task_error(task_name: str, err: object) -> TaskQueueError:
    if isinstance(err, TaskQueueError):
        return err
    wrapped = ExecutionError(task_name, err)
    if isinstance(err, BaseException):
        wrapped.__cause__ = err
    return wrapped


def unwrap_candidate(data: Any) -> Any:
    """Return the candidate-like payload, unwrapping an icecandidate event if needed."""
    if data is None:
        return None
    inner = read_field(data, "candidate")
    if inner is None or isinstance(inner, str):
        return data
    return inner


class Strategies:
    def __init__(self, pc: Any, *, create_ice_candidate: Callable[[Any], Any]) -> None:
        self._pc = pc
        self._create_ice_candidate = create_ice_candidate

    def exec_method(self, task: Task, done: Continuation) -> None:
        """Invoke the peer connection method named after the task."""
        fn = resolve_method(self._pc, task.name)
        if fn is None:
            done(Outcome.failure(UnsupportedOperation(task.name)))
            return

        def success(*results: Any) -> None:
            done(Outcome.success(*results))

        def failure(err: object = None) -> None:
            done(Outcome.failure(as_task_error(task.name, err)))

        if accepts_callbacks(fn, len(task.args)):
            try:
                fn(*task.args, success, failure)
            except Exception as exc:
                failure(exc)
            return

        try:
            result = fn(*task.args)
        except Exception as exc:
            failure(exc)
            return

        if inspect.isawaitable(result):
            future = asyncio.ensure_future(result)
            future.add_done_callback(lambda f: _settle_future(f, success, failure))
            return

        if result is None:
            success()
        else:
            success(result)

    def apply_candidate(self, task: Task, done: Continuation) -> None:
        """
        Apply an ICE candidate. Always reports success.

        A None payload or an empty candidate line means gathering finished and the
        peer connection is not touched. Bad candidates are logged and dropped.
        """
        data = unwrap_candidate(task.args[0] if task.args else None)
        if data is None or not read_field(data, "candidate"):
            logger.debug("end of candidates")
            done(Outcome.success())
            return

        try:
            candidate = self._create_ice_candidate(data)
            add = resolve_method(self._pc, "add_ice_candidate")
            if add is None:
                raise UnsupportedOperation("add_ice_candidate")
            result = add(candidate)
        except Exception as exc:
            _drop_candidate(exc)
            done(Outcome.success())
            return

        if not inspect.isawaitable(result):
            done(Outcome.success())
            return

        def _applied(future: asyncio.Future[Any]) -> None:
            if not future.cancelled() and future.exception() is not None:
                _drop_candidate(future.exception())
            done(Outcome.success())

        asyncio.ensure_future(result).add_done_callback(_applied)


def _settle_future(
    future: asyncio.Future[Any],
    success: Callable[..., None],
    failure: Callable[[object], None],
) -> None:
    if future.cancelled():
        failure(asyncio.CancelledError())
        return
    exc = future.exception()
    if exc is not None:
        failure(exc)
        return
    result = future.result()
    if result is None:
        success()
    else:
        success(result)


def _drop_candidate(exc: BaseException | None) -> None:
    err = MalformedPayload(f"invalid ice candidate: {exc}")
    err.__cause__ = exc
    logger.warning("%s", err, exc_info=exc)
