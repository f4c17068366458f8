"""Client WebSocket to upstream realtime WebSocket bridge."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any

import websockets
from fastapi import WebSocket

from realtime_relay.state import RuntimeDeps
from realtime_relay.provider.websocket import UpstreamConnector
from realtime_relay.state.phase import Closed, Bridged, Connecting, ConnectionPhase
from realtime_relay.provider.endpoints import realtime_ws_url, upstream_headers
from realtime_relay.config.websocket import WS_CLOSE_NORMAL_CODE, WS_CLOSE_INTERNAL_ERROR_CODE
from realtime_relay.config.messages import (
    MSG_MISSING_API_KEY,
    MSG_UPSTREAM_FAILED,
    STATUS_UPSTREAM_CLOSED,
    STATUS_UPSTREAM_CONNECTED,
)

from .errors import safe_send_text, safe_send_bytes, send_error_frame, send_status_frame

logger = logging.getLogger(__name__)


def describe_close_reason(reason: str | bytes | bytearray | None) -> str:
    if isinstance(reason, bytes | bytearray):
        reason = bytes(reason).decode("utf-8", errors="replace")
    return reason or STATUS_UPSTREAM_CLOSED


class RelayBridge:
    """Bridges one accepted client socket to exactly one upstream connection.

    Client frames received before the upstream handshake completes are queued
    and flushed in arrival order before any later frame is forwarded. Teardown
    is idempotent: at most one terminal frame reaches the client.
    """

    def __init__(
        self,
        ws: WebSocket,
        *,
        url: str,
        headers: dict[str, str],
        connector: UpstreamConnector,
        handshake_timeout_s: float = 0.0,
    ) -> None:
        self._ws = ws
        self._url = url
        self._headers = headers
        self._connector = connector
        self._handshake_timeout_s = handshake_timeout_s
        self._phase: ConnectionPhase = Connecting()
        self._closing = False

    @property
    def phase(self) -> ConnectionPhase:
        return self._phase

    async def run(self) -> None:
        upstream_task = asyncio.create_task(self._run_upstream())
        client_task = asyncio.create_task(self._run_client())
        tasks = {upstream_task, client_task}
        try:
            done, _pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_COMPLETED)
            for task in done:
                if not task.cancelled() and task.exception() is not None:
                    logger.error("relay task failed", exc_info=task.exception())
        finally:
            await self.close()
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

    async def close(self) -> None:
        """Client-side teardown: drop queued frames and close the upstream in any phase."""
        if not self._begin_teardown():
            return
        phase = self._phase
        self._phase = Closed(reason="client closed")
        upstream: Any = None
        if isinstance(phase, Connecting):
            phase.queue.clear()
            upstream = phase.handle
        elif isinstance(phase, Bridged):
            upstream = phase.handle
        if upstream is not None:
            with contextlib.suppress(Exception):
                await upstream.close()

    def _begin_teardown(self) -> bool:
        if self._closing:
            return False
        self._closing = True
        return True

    async def _open_upstream(self) -> Any:
        connect = self._connector(self._url, self._headers)
        if self._handshake_timeout_s > 0:
            return await asyncio.wait_for(connect, timeout=self._handshake_timeout_s)
        return await connect

    async def _run_upstream(self) -> None:
        try:
            upstream = await self._open_upstream()
        except TimeoutError:
            logger.warning("upstream handshake timed out after %.1fs", self._handshake_timeout_s)
            await self._fail_upstream()
            return
        except Exception:
            logger.exception("upstream connection failed")
            await self._fail_upstream()
            return

        phase = self._phase
        if not isinstance(phase, Connecting):
            # Client left while the handshake was in flight.
            with contextlib.suppress(Exception):
                await upstream.close()
            return
        phase.handle = upstream

        logger.info("upstream connected")
        await send_status_frame(self._ws, STATUS_UPSTREAM_CONNECTED)
        try:
            await self._flush_queue(phase, upstream)
            async for message in upstream:
                await self._forward_to_client(message)
        except websockets.ConnectionClosed:
            pass
        except Exception:
            logger.exception("upstream relay failed")
            await self._fail_upstream()
            return

        await self._finish_upstream_closed(upstream.close_code, upstream.close_reason)

    async def _flush_queue(self, phase: Connecting, upstream: Any) -> None:
        # Frames arriving during the flush are appended to the same queue.
        while phase.queue:
            if self._phase is not phase:
                return
            await upstream.send(phase.queue.popleft())
        if self._phase is phase:
            self._phase = Bridged(handle=upstream)

    async def _run_client(self) -> None:
        while True:
            message = await self._ws.receive()
            if message.get("type") == "websocket.disconnect":
                logger.info("relay client disconnected code=%s", message.get("code"))
                return
            data = message.get("text")
            if data is None:
                data = message.get("bytes")
            if data is None:
                continue
            await self._forward_to_upstream(data)

    async def _forward_to_upstream(self, data: str | bytes) -> None:
        phase = self._phase
        if isinstance(phase, Connecting):
            phase.queue.append(data)
        elif isinstance(phase, Bridged):
            try:
                await phase.handle.send(data)
            except websockets.ConnectionClosed:
                logger.debug("dropping client frame: upstream closed")
        else:
            logger.debug("dropping client frame: relay closed")

    async def _forward_to_client(self, message: str | bytes) -> None:
        if self._closing:
            return
        if isinstance(message, str):
            await safe_send_text(self._ws, message)
        else:
            await safe_send_bytes(self._ws, bytes(message))

    async def _fail_upstream(self) -> None:
        if not self._begin_teardown():
            return
        self._release("upstream error")
        await send_error_frame(self._ws, MSG_UPSTREAM_FAILED)
        await self._close_client(WS_CLOSE_INTERNAL_ERROR_CODE)

    async def _finish_upstream_closed(self, code: int | None, reason: str | bytes | None) -> None:
        if not self._begin_teardown():
            return
        status = describe_close_reason(reason)
        logger.info("upstream closed code=%s reason=%s", code, status)
        self._release(status)
        await send_status_frame(self._ws, status, code=code)
        await self._close_client(WS_CLOSE_NORMAL_CODE)

    def _release(self, reason: str) -> None:
        phase = self._phase
        if isinstance(phase, Connecting):
            phase.queue.clear()
        self._phase = Closed(reason=reason)

    async def _close_client(self, code: int) -> None:
        with contextlib.suppress(Exception):
            await self._ws.close(code=code)


async def handle_relay_connection(ws: WebSocket, runtime_deps: RuntimeDeps) -> None:
    await ws.accept()
    settings = runtime_deps.settings

    if not settings.auth.configured:
        logger.warning("relay refused: OPENAI_API_KEY is not configured")
        await send_error_frame(ws, MSG_MISSING_API_KEY)
        with contextlib.suppress(Exception):
            await ws.close(code=WS_CLOSE_INTERNAL_ERROR_CODE)
        return

    bridge = RelayBridge(
        ws,
        url=realtime_ws_url(settings.upstream.base_url, model=settings.model.model, voice=settings.model.voice),
        headers=upstream_headers(settings.auth.api_key),
        connector=runtime_deps.connector,
        handshake_timeout_s=settings.upstream.handshake_timeout_s,
    )
    await runtime_deps.relays.register(ws)
    logger.info("relay client connected. Active: %s", runtime_deps.relays.get_active_count())
    try:
        await bridge.run()
    finally:
        await runtime_deps.relays.unregister(ws)
        logger.info("relay client closed. Active: %s", runtime_deps.relays.get_active_count())


__all__ = ["RelayBridge", "describe_close_reason", "handle_relay_connection"]
