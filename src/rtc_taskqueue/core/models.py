# src/rtc_taskqueue/core/models.py

"""Default platform objects for session descriptions and ICE candidates."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

SDP_TYPES = ("offer", "pranswer", "answer", "rollback")


def read_field(data: Any, *names: str) -> Any:
    """Read the first present field from a mapping or an object."""
    for name in names:
        if isinstance(data, Mapping):
            if name in data:
                return data[name]
        elif hasattr(data, name):
            return getattr(data, name)
    return None


@dataclass(frozen=True, slots=True)
class SessionDescription:
    type: str
    sdp: str

    def __post_init__(self) -> None:
        if self.type not in SDP_TYPES:
            raise ValueError(f"invalid session description type: {self.type!r}")

    @classmethod
    def from_data(cls, data: Any) -> SessionDescription:
        if isinstance(data, cls):
            return data
        kind = read_field(data, "type")
        sdp = read_field(data, "sdp")
        if not kind:
            raise ValueError("session description requires a type")
        return cls(type=str(kind), sdp=str(sdp or ""))


@dataclass(frozen=True, slots=True)
class IceCandidate:
    candidate: str
    sdp_mid: str | None = None
    sdp_mline_index: int | None = None

    @classmethod
    def from_data(cls, data: Any) -> IceCandidate:
        if isinstance(data, cls):
            return data
        candidate = read_field(data, "candidate")
        if not isinstance(candidate, str) or not candidate.strip():
            raise ValueError(f"invalid candidate line: {candidate!r}")

        mline = read_field(data, "sdp_mline_index", "sdpMLineIndex")
        return cls(
            candidate=candidate,
            sdp_mid=read_field(data, "sdp_mid", "sdpMid"),
            sdp_mline_index=None if mline is None else int(mline),
        )
