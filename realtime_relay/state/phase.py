"""Connection phases shared by the relay and the client transports.

Each phase carries only the fields valid in it: a bridged connection always has
a live handle and only a connecting one owns an outbound queue.
"""

from __future__ import annotations

from typing import Any
from collections import deque
from dataclasses import field, dataclass


@dataclass(frozen=True, slots=True)
class Disconnected:
    pass


@dataclass(slots=True)
class Connecting:
    queue: deque[str | bytes] = field(default_factory=deque)
    handle: Any = None


@dataclass(frozen=True, slots=True)
class Bridged:
    handle: Any


@dataclass(frozen=True, slots=True)
class Closed:
    reason: str = ""


ConnectionPhase = Disconnected | Connecting | Bridged | Closed

__all__ = ["Bridged", "Closed", "Connecting", "ConnectionPhase", "Disconnected"]
