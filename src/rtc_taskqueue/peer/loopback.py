# src/rtc_taskqueue/peer/loopback.py

"""
In-memory peer connection.

Implements just enough of the offer/answer state machine to drive a TaskQueue
without a real WebRTC stack: used by the demo CLI and by tests. Every operation
is a coroutine and yields to the loop once, like a real implementation would.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any

from ..core.models import IceCandidate, SessionDescription
from ..tasks.checks import CLOSED, HAVE_LOCAL_OFFER, HAVE_REMOTE_OFFER, STABLE

logger = logging.getLogger(__name__)

_session_ids = itertools.count(1000)


class InvalidStateError(Exception):
    pass


@dataclass(slots=True)
class LoopbackPeerConnection:
    name: str = "peer"
    candidate_count: int = 2

    signaling_state: str = STABLE
    local_description: SessionDescription | None = None
    remote_description: SessionDescription | None = None
    remote_candidates: list[IceCandidate] = field(default_factory=list)
    calls: list[str] = field(default_factory=list)

    session_id: int = field(default_factory=lambda: next(_session_ids))

    def _enter(self, op: str) -> None:
        self.calls.append(op)
        if self.signaling_state == CLOSED:
            raise InvalidStateError(f"{self.name}: {op} on a closed connection")

    def _sdp(self, kind: str) -> str:
        return (
            "v=0\r\n"
            f"o=- {self.session_id} 1 IN IP4 127.0.0.1\r\n"
            f"s={self.name}-{kind}\r\n"
            "t=0 0\r\n"
        )

    async def create_offer(self) -> SessionDescription:
        self._enter("create_offer")
        await asyncio.sleep(0)
        return SessionDescription(type="offer", sdp=self._sdp("offer"))

    async def create_answer(self) -> SessionDescription:
        self._enter("create_answer")
        if self.signaling_state != HAVE_REMOTE_OFFER:
            raise InvalidStateError(f"{self.name}: cannot answer in {self.signaling_state}")
        await asyncio.sleep(0)
        return SessionDescription(type="answer", sdp=self._sdp("answer"))

    async def set_local_description(self, description: SessionDescription) -> None:
        self._enter("set_local_description")
        await asyncio.sleep(0)
        if description.type == "offer" and self.signaling_state == STABLE:
            self.signaling_state = HAVE_LOCAL_OFFER
        elif description.type == "answer" and self.signaling_state == HAVE_REMOTE_OFFER:
            self.signaling_state = STABLE
        else:
            raise InvalidStateError(
                f"{self.name}: cannot set local {description.type} in {self.signaling_state}"
            )
        self.local_description = description
        logger.debug("%s: local %s -> %s", self.name, description.type, self.signaling_state)

    async def set_remote_description(self, description: SessionDescription) -> None:
        self._enter("set_remote_description")
        await asyncio.sleep(0)
        if description.type == "offer" and self.signaling_state == STABLE:
            self.signaling_state = HAVE_REMOTE_OFFER
        elif description.type == "answer" and self.signaling_state == HAVE_LOCAL_OFFER:
            self.signaling_state = STABLE
        else:
            raise InvalidStateError(
                f"{self.name}: cannot set remote {description.type} in {self.signaling_state}"
            )
        self.remote_description = description
        logger.debug("%s: remote %s -> %s", self.name, description.type, self.signaling_state)

    async def add_ice_candidate(self, candidate: IceCandidate) -> None:
        self._enter("add_ice_candidate")
        if self.local_description is None and self.remote_description is None:
            raise InvalidStateError(f"{self.name}: candidate before any description")
        await asyncio.sleep(0)
        self.remote_candidates.append(candidate)

    def gather_candidates(self) -> list[dict[str, Any] | None]:
        """Host candidates for this peer, followed by the end-of-candidates marker."""
        out: list[dict[str, Any] | None] = [
            {
                "candidate": f"candidate:{i} 1 udp {2130706431 - i} 127.0.0.1 {50000 + i} typ host",
                "sdpMid": "0",
                "sdpMLineIndex": 0,
            }
            for i in range(self.candidate_count)
        ]
        out.append(None)
        return out

    def close(self) -> None:
        self.calls.append("close")
        self.signaling_state = CLOSED
