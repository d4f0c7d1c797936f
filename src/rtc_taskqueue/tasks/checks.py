# src/rtc_taskqueue/tasks/checks.py

"""
Readiness checks.

Each check is a pure predicate over the peer connection. A task is ready when all
of its checks pass; a task with no checks is always ready.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any

from .task_models import Check

CLOSED = "closed"
STABLE = "stable"
HAVE_LOCAL_OFFER = "have-local-offer"
HAVE_REMOTE_OFFER = "have-remote-offer"


def camel_name(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(p.title() for p in rest)


def read_attr(pc: Any, name: str, default: Any = None) -> Any:
    """Read a peer connection attribute by its snake_case or camelCase name."""
    if hasattr(pc, name):
        return getattr(pc, name)
    return getattr(pc, camel_name(name), default)


def signaling_state(pc: Any) -> str | None:
    return read_attr(pc, "signaling_state")


def is_not_closed(pc: Any) -> bool:
    return signaling_state(pc) != CLOSED


def is_not_negotiating(pc: Any) -> bool:
    return signaling_state(pc) != HAVE_LOCAL_OFFER


def is_stable(pc: Any) -> bool:
    return signaling_state(pc) == STABLE


def has_local_or_remote_description(pc: Any) -> bool:
    return (
        read_attr(pc, "local_description") is not None
        or read_attr(pc, "remote_description") is not None
    )


def all_pass(checks: Iterable[Check], pc: Any) -> bool:
    return all(check(pc) for check in checks)
