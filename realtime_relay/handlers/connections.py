"""Registry of live relay bridges.

There is no admission limit: every client connection gets its own upstream.
"""

from __future__ import annotations

import asyncio
from typing import Any


class RelayRegistry:
    def __init__(self) -> None:
        self._lock = asyncio.Lock()
        self._active: set[int] = set()

    async def register(self, ws: Any) -> None:
        async with self._lock:
            self._active.add(id(ws))

    async def unregister(self, ws: Any) -> None:
        async with self._lock:
            self._active.discard(id(ws))

    def get_active_count(self) -> int:
        return len(self._active)


__all__ = ["RelayRegistry"]
