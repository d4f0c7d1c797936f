# src/rtc_taskqueue/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the task queue.

The queue never imports a concrete WebRTC stack. It talks to anything that looks
like a peer connection, and builds descriptions/candidates through factories.
"""

from typing import Any, Callable, Protocol

Factory = Callable[[Any], Any]


class PeerConnection(Protocol):
    """
    The managed resource.

    Only the attributes below are read by readiness checks. Operations
    (create_offer, set_local_description, ...) are looked up by name at run time,
    so they are not part of the Protocol. camelCase spellings are accepted too.
    """

    signaling_state: str
    local_description: Any | None
    remote_description: Any | None


class Plugin(Protocol):
    """
    Platform plugin (e.g. a native bridge).

    A plugin is selected when supported() returns True. It may provide
    create_ice_candidate / create_session_description to override the defaults.
    """

    def supported(self) -> bool: ...
