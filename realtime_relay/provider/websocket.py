"""Upstream realtime WebSocket connector."""

from __future__ import annotations

from typing import Any, Protocol
from collections.abc import Callable, Awaitable, AsyncIterator

import websockets


class UpstreamConnection(Protocol):
    """The slice of a websockets client connection the relay relies on."""

    close_code: int | None
    close_reason: str | None

    async def send(self, message: str | bytes) -> None: ...

    async def close(self, code: int = 1000, reason: str = "") -> None: ...

    def __aiter__(self) -> AsyncIterator[str | bytes]: ...


UpstreamConnector = Callable[[str, dict[str, str]], Awaitable[Any]]


async def connect_upstream(url: str, headers: dict[str, str]) -> UpstreamConnection:
    # The relay bounds the handshake itself (UPSTREAM_HANDSHAKE_TIMEOUT_S), so the
    # library's own open_timeout is disabled. Audio deltas exceed the 1 MiB frame default.
    return await websockets.connect(url, additional_headers=headers, open_timeout=None, max_size=None)


__all__ = ["UpstreamConnection", "UpstreamConnector", "connect_upstream"]
