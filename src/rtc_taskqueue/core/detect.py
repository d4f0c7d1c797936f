# src/rtc_taskqueue/core/detect.py

"""
Constructor detection and plugin lookup.

detect("RTCSessionDescription") answers "what builds a session description on
this platform". Callers can pass their own namespace (a module or a mapping) to
resolve against a real WebRTC stack; otherwise the built-in models are used.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .models import IceCandidate, SessionDescription
from .ports import Factory

logger = logging.getLogger(__name__)

_BUILTINS: dict[str, Factory] = {
    "RTCSessionDescription": SessionDescription.from_data,
    "RTCIceCandidate": IceCandidate.from_data,
}


def detect(name: str, namespace: Any = None) -> Factory | None:
    """Resolve a platform constructor by name, with or without the vendor prefix."""
    candidates = [name]
    if name.startswith("RTC"):
        candidates.append(name[3:])

    if namespace is not None:
        for n in candidates:
            found = namespace.get(n) if isinstance(namespace, Mapping) else getattr(namespace, n, None)
            if found is not None:
                return found

    return _BUILTINS.get(name)


def find_plugin(plugins: Iterable[Any] | None) -> Any | None:
    """Return the first plugin that reports itself supported on this platform."""
    for plugin in plugins or ():
        supported = getattr(plugin, "supported", None)
        try:
            ok = supported() if callable(supported) else bool(supported)
        except Exception:
            logger.warning("plugin %r failed its support check", plugin, exc_info=True)
            continue
        if ok:
            logger.debug("using plugin %r", plugin)
            return plugin
    return None
