# tests/test_task_scheduler.py

from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest

from rtc_taskqueue.errors import ExecutionError
from rtc_taskqueue.tasks.task_models import Outcome, TaskStatus, make_task
from rtc_taskqueue.tasks.task_scheduler import TaskScheduler

from .fakes import wait_until


def _pc(state: str = "stable") -> SimpleNamespace:
    return SimpleNamespace(signaling_state=state, local_description=None, remote_description=None)


def _scheduler(pc, **kwargs) -> TaskScheduler:
    kwargs.setdefault("retry_delay_seconds", 0.005)
    kwargs.setdefault("settle_delay_seconds", 0.001)
    return TaskScheduler(pc, **kwargs)


def _ok(log: list[str]):
    def body(task, done) -> None:
        log.append(task.name)
        done(Outcome.success(task.name.upper()))

    return body


def _err(log: list[str]):
    def body(task, done) -> None:
        log.append(task.name)
        done(Outcome.failure(ExecutionError(task.name, "boom")))

    return body


@pytest.mark.asyncio
async def test_single_flight() -> None:
    loop = asyncio.get_running_loop()
    scheduler = _scheduler(_pc())
    running: list[str] = []
    peak = 0
    finished: list[str] = []

    def slow(task, done) -> None:
        nonlocal peak
        running.append(task.name)
        peak = max(peak, len(running))
        assert scheduler.current is task

        def _finish() -> None:
            running.remove(task.name)
            finished.append(task.name)
            done(Outcome.success())

        loop.call_later(0.01, _finish)

    for name in ("a", "b", "c"):
        scheduler.push(make_task(name, (), slow))
        scheduler.schedule()

    await wait_until(lambda: len(finished) == 3)
    assert peak == 1
    assert scheduler.current is None


@pytest.mark.asyncio
async def test_ready_task_runs_before_unready_higher_priority() -> None:
    pc = _pc()
    scheduler = _scheduler(pc)
    log: list[str] = []

    candidate = make_task(
        "add_ice_candidate",
        (),
        _ok(log),
        checks=[lambda p: p.remote_description is not None],
    )
    offer = make_task("create_offer", (), _ok(log))
    scheduler.push(candidate)
    scheduler.push(offer)
    scheduler.schedule()

    await wait_until(lambda: log == ["create_offer"])
    assert candidate.status is TaskStatus.PENDING
    assert scheduler.trigger.armed

    pc.remote_description = {"type": "answer"}
    await wait_until(lambda: log == ["create_offer", "add_ice_candidate"])
    assert candidate.status is TaskStatus.SETTLED


@pytest.mark.asyncio
async def test_unlisted_names_run_after_listed_ones() -> None:
    scheduler = _scheduler(_pc())
    log: list[str] = []

    for name in ("restart_ice", "create_offer", "create_answer", "add_ice_candidate"):
        scheduler.push(make_task(name, (), _ok(log)))
    scheduler.schedule()

    await wait_until(lambda: len(log) == 4)
    assert log == ["add_ice_candidate", "create_answer", "create_offer", "restart_ice"]


@pytest.mark.asyncio
async def test_success_passes_results_and_rearms() -> None:
    scheduler = _scheduler(_pc())
    log: list[str] = []
    results: list[tuple] = []

    task = make_task("create_offer", (), _ok(log), on_success=lambda *r: results.append(r))
    scheduler.push(task)
    scheduler.schedule()

    await wait_until(lambda: results == [("CREATE_OFFER",)])
    assert task.status is TaskStatus.SETTLED


@pytest.mark.asyncio
async def test_failure_does_not_resume_polling() -> None:
    failures: list[BaseException] = []
    scheduler = _scheduler(_pc(), default_fail=failures.append)
    log: list[str] = []

    scheduler.push(make_task("create_offer", (), _err(log)))
    scheduler.push(make_task("restart_ice", (), _ok(log)))
    scheduler.schedule()

    await wait_until(lambda: len(failures) == 1)
    assert isinstance(failures[0], ExecutionError)

    await asyncio.sleep(0.03)
    assert log == ["create_offer"]
    assert len(scheduler.pending) == 1
    assert not scheduler.trigger.armed

    # the next external trigger picks the queue back up
    scheduler.schedule()
    await wait_until(lambda: log == ["create_offer", "restart_ice"])


@pytest.mark.asyncio
async def test_task_fail_handler_overrides_default() -> None:
    default: list[BaseException] = []
    own: list[BaseException] = []
    scheduler = _scheduler(_pc(), default_fail=default.append)

    scheduler.push(make_task("create_offer", (), _err([]), on_failure=own.append))
    scheduler.schedule()

    await wait_until(lambda: len(own) == 1)
    assert default == []


@pytest.mark.asyncio
async def test_pass_handler_can_enqueue_more_work() -> None:
    scheduler = _scheduler(_pc())
    log: list[str] = []

    def chain(*_results) -> None:
        assert scheduler.current is None
        scheduler.push(make_task("set_local_description", (), _ok(log)))
        scheduler.schedule()

    scheduler.push(make_task("create_offer", (), _ok(log), on_success=chain))
    scheduler.schedule()

    await wait_until(lambda: log == ["create_offer", "set_local_description"])


@pytest.mark.asyncio
async def test_retry_stops_once_closed() -> None:
    pc = _pc()
    scheduler = _scheduler(pc)
    task = make_task("set_remote_description", (), _ok([]), checks=[lambda p: False])
    scheduler.push(task)
    scheduler.schedule()

    await asyncio.sleep(0.02)
    assert scheduler.trigger.armed

    pc.signaling_state = "closed"
    await wait_until(lambda: not scheduler.trigger.armed)
    assert task.status is TaskStatus.PENDING
    assert len(scheduler.pending) == 1


@pytest.mark.asyncio
async def test_body_raising_is_reported_as_failure() -> None:
    failures: list[BaseException] = []
    scheduler = _scheduler(_pc(), default_fail=failures.append)

    def explode(task, done) -> None:
        raise KeyError("oops")

    scheduler.push(make_task("create_offer", (), explode))
    scheduler.schedule()

    await wait_until(lambda: len(failures) == 1)
    assert isinstance(failures[0], ExecutionError)
    assert scheduler.current is None


@pytest.mark.asyncio
async def test_second_settle_is_ignored() -> None:
    scheduler = _scheduler(_pc())
    passes: list[str] = []
    fails: list[BaseException] = []

    def twice(task, done) -> None:
        done(Outcome.success())
        done(Outcome.failure(ExecutionError(task.name)))

    scheduler.push(make_task("create_offer", (), twice, on_success=lambda: passes.append("ok"), on_failure=fails.append))
    scheduler.schedule()

    await wait_until(lambda: passes == ["ok"])
    await asyncio.sleep(0.01)
    assert fails == []


def test_settled_task_cannot_be_requeued() -> None:
    scheduler = _scheduler(_pc())
    task = make_task("create_offer", (), _ok([]))
    task.advance(TaskStatus.EXECUTING)

    with pytest.raises(ValueError):
        scheduler.push(task)
    with pytest.raises(RuntimeError):
        task.advance(TaskStatus.PENDING)
