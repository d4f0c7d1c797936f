# tests/test_poll_trigger.py

from __future__ import annotations

import asyncio

import pytest

from rtc_taskqueue.tasks.poll_trigger import PollTrigger


@pytest.mark.asyncio
async def test_rearming_coalesces_into_one_call() -> None:
    fired: list[float] = []
    loop = asyncio.get_running_loop()
    trigger = PollTrigger(lambda: fired.append(loop.time()))

    for _ in range(5):
        trigger.arm(0.01)
    assert trigger.armed

    await asyncio.sleep(0.05)
    assert len(fired) == 1
    assert not trigger.armed


@pytest.mark.asyncio
async def test_rearm_replaces_pending_delay() -> None:
    fired: list[str] = []
    trigger = PollTrigger(lambda: fired.append("poll"))

    trigger.arm(10.0)
    trigger.arm(0.0)

    await asyncio.sleep(0.02)
    assert fired == ["poll"]


@pytest.mark.asyncio
async def test_cancel() -> None:
    fired: list[str] = []
    trigger = PollTrigger(lambda: fired.append("poll"))

    trigger.arm(0.005)
    trigger.cancel()

    await asyncio.sleep(0.02)
    assert fired == []
    assert not trigger.armed


def test_arm_without_loop_fails() -> None:
    trigger = PollTrigger(lambda: None)
    with pytest.raises(RuntimeError):
        trigger.arm(0.01)
