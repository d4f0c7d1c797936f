# src/rtc_taskqueue/cli/main.py

"""
Demo entrypoint.

Negotiates two in-memory peers through two task queues:
alice offers, bob answers, both trickle candidates. Exits 0 once both sides
are stable and every candidate has landed, 1 otherwise.
"""

from __future__ import annotations

import asyncio
import logging

from ..config import Settings, get_settings
from ..logging_setup import setup_logging
from ..peer.loopback import LoopbackPeerConnection
from ..tasks.checks import STABLE
from ..tasks.task_api import TaskQueue, create_task_queue

logger = logging.getLogger(__name__)


def _wire(local: LoopbackPeerConnection, local_q: TaskQueue, remote_q: TaskQueue) -> None:
    def on_sdp(description) -> None:
        logger.info("%s: local %s ready", local.name, description.type)
        remote_q.set_remote_description(description)
        for candidate in local.gather_candidates():
            remote_q.add_ice_candidate(candidate)

    def on_fail(err: BaseException) -> None:
        logger.error("%s: %s", local.name, err)

    local_q.on("sdp", on_sdp)
    local_q.on("fail", on_fail)


async def negotiate(settings: Settings, *, timeout_seconds: float = 5.0) -> bool:
    alice = LoopbackPeerConnection("alice")
    bob = LoopbackPeerConnection("bob")

    alice_q = create_task_queue(alice, settings=settings)
    bob_q = create_task_queue(bob, settings=settings)

    _wire(alice, alice_q, bob_q)
    _wire(bob, bob_q, alice_q)

    def connected() -> bool:
        return (
            alice.signaling_state == STABLE
            and bob.signaling_state == STABLE
            and alice.remote_description is not None
            and bob.remote_description is not None
            and len(alice.remote_candidates) == bob.candidate_count
            and len(bob.remote_candidates) == alice.candidate_count
            and alice_q.pending == 0
            and bob_q.pending == 0
        )

    async def _wait() -> None:
        while not connected():
            await asyncio.sleep(0.01)

    alice_q.create_offer()
    try:
        await asyncio.wait_for(_wait(), timeout_seconds)
    except TimeoutError:
        logger.error(
            "negotiation timed out: alice=%s bob=%s pending=%d/%d",
            alice.signaling_state,
            bob.signaling_state,
            alice_q.pending,
            bob_q.pending,
        )
        return False

    logger.info("alice calls: %s", ", ".join(alice.calls))
    logger.info("bob calls: %s", ", ".join(bob.calls))
    return True


def main() -> None:
    settings = get_settings()

    level_name = str(settings.log_level).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    setup_logging(log_dir=settings.log_dir, console_level=console_level)

    logger.info("Starting %s...", settings.app_name)
    ok = asyncio.run(negotiate(settings))
    logger.info("negotiation %s", "complete" if ok else "failed")
    raise SystemExit(0 if ok else 1)


if __name__ == "__main__":
    main()
