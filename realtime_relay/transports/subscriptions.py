"""Scoped event-listener registration for pyee emitters (aiortc peers and channels)."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable

logger = logging.getLogger(__name__)


class Subscriptions:
    """Tracks listeners so that one `release()` detaches all of them."""

    def __init__(self) -> None:
        self._handles: list[tuple[Any, str, Callable[..., Any]]] = []

    def on(self, emitter: Any, event: str, handler: Callable[..., Any]) -> Callable[..., Any]:
        emitter.on(event, handler)
        self._handles.append((emitter, event, handler))
        return handler

    def release(self) -> None:
        handles, self._handles = self._handles, []
        for emitter, event, handler in reversed(handles):
            # Listeners already removed by the emitter itself are fine.
            with contextlib.suppress(KeyError, ValueError):
                emitter.remove_listener(event, handler)

    def __len__(self) -> int:
        return len(self._handles)


async def wait_for_ice_gathering(pc: Any, timeout_s: float) -> bool:
    """Wait until ICE gathering completes; after `timeout_s` it is treated as complete anyway."""
    if pc.iceGatheringState == "complete":
        return True

    done = asyncio.Event()
    subs = Subscriptions()

    def _check() -> None:
        if pc.iceGatheringState == "complete":
            done.set()

    subs.on(pc, "icegatheringstatechange", _check)
    try:
        await asyncio.wait_for(done.wait(), timeout=timeout_s)
        return True
    except TimeoutError:
        logger.debug("ICE gathering still %s after %.1fs; continuing", pc.iceGatheringState, timeout_s)
        return False
    finally:
        subs.release()


__all__ = ["Subscriptions", "wait_for_ice_gathering"]
