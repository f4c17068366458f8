"""Client transport speaking to the relay's WebSocket endpoint."""

from __future__ import annotations

import asyncio
import logging
import contextlib
from typing import Any
from collections.abc import Callable, Iterable, Awaitable

import websockets

from realtime_relay.realtime.audio_sink import AudioSink
from realtime_relay.realtime.context import now_ms, append_message
from realtime_relay.config.models import DEFAULT_OPENAI_REALTIME_VOICE
from realtime_relay.state.phase import Closed, Bridged, Connecting
from realtime_relay.config.transport import TRANSPORT_WS, ROLE_ERROR, DEFAULT_SESSION_INSTRUCTIONS
from realtime_relay.realtime.helpers import (
    dump_event,
    build_audio_append_event,
    build_audio_commit_event,
    build_session_update_event,
    build_response_create_event,
    build_audio_response_create_event,
)
from realtime_relay.config.messages import (
    STATUS_IDLE,
    STATUS_READY,
    STATUS_CLOSED,
    STATUS_CONNECTING,
    STATUS_ERROR_DETAIL,
    MSG_AUDIO_TURN_EMPTY,
    STATUS_WAITING_REPLY,
    MSG_WS_CONNECT_FAILED,
    MSG_AUDIO_TURN_PLACEHOLDER,
)

from .base import TransportBase

logger = logging.getLogger(__name__)

SocketConnector = Callable[[str], Awaitable[Any]]


async def _default_connect(url: str) -> Any:
    return await websockets.connect(url, max_size=None)


class WebSocketTransport(TransportBase):
    """Connects to the relay, queueing outbound events until the socket is open.

    On open the `session.update` setup event is sent first, then queued events
    in the order they were queued.
    """

    transport_id = TRANSPORT_WS

    def __init__(
        self,
        url: str,
        *,
        voice: str | None = DEFAULT_OPENAI_REALTIME_VOICE,
        instructions: str = DEFAULT_SESSION_INSTRUCTIONS,
        connect: SocketConnector = _default_connect,
        audio_sink: AudioSink | None = None,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        super().__init__(audio_sink=audio_sink, clock=clock)
        self._url = url
        self._voice = voice
        self._instructions = instructions
        self._connect = connect
        self._reader: asyncio.Task[None] | None = None
        self._settled = asyncio.Event()

    async def start(self) -> None:
        if self.is_active:
            await self._shutdown()
        session = self._renew_session()
        session.status = STATUS_CONNECTING
        phase = Connecting()
        self._phase = phase
        self._settled = asyncio.Event()
        self._reader = asyncio.create_task(self._run(phase))

    async def wait_ready(self, timeout: float | None = None) -> bool:
        """Wait until the socket opens or the attempt fails; returns readiness."""
        await asyncio.wait_for(self._settled.wait(), timeout=timeout)
        return self._session.is_ready

    async def stop(self) -> None:
        self._session.manual_stop = self.is_active
        await self._shutdown()
        self._mark_closed(STATUS_IDLE)

    async def send_event(self, event: dict[str, Any]) -> bool:
        payload = dump_event(event)
        phase = self._phase
        if isinstance(phase, Connecting):
            phase.queue.append(payload)
            return True
        if isinstance(phase, Bridged):
            try:
                await phase.handle.send(payload)
            except websockets.ConnectionClosed:
                logger.debug("event not sent: relay socket closed")
                return False
            return True
        return False

    async def send_text(self, text: str) -> bool:
        message = text.strip()
        if not message or not self.is_active:
            return False
        client_message_id, entry = self._open_turn(message)
        if not await self.send_event(build_response_create_event(message, client_message_id)):
            self._abort_turn(client_message_id, entry)
            return False
        self._session.status = STATUS_WAITING_REPLY
        return True

    async def send_audio_turn(self, chunks: Iterable[str]) -> bool:
        """Append base64 PCM16 chunks to the input buffer, commit, and request a reply."""
        if not self.is_active:
            return False
        pending = [chunk for chunk in chunks if chunk]
        if not pending:
            append_message(self._session, ROLE_ERROR, MSG_AUDIO_TURN_EMPTY)
            self._session.status = STATUS_READY
            return False

        for chunk in pending:
            if not await self.send_event(build_audio_append_event(chunk)):
                return False
        if not await self.send_event(build_audio_commit_event()):
            return False

        client_message_id, entry = self._open_turn(MSG_AUDIO_TURN_PLACEHOLDER)
        if not await self.send_event(build_audio_response_create_event(client_message_id)):
            self._abort_turn(client_message_id, entry)
            return False
        self._session.status = STATUS_WAITING_REPLY
        return True

    async def _run(self, phase: Connecting) -> None:
        session = self._session
        try:
            socket = await self._connect(self._url)
        except Exception:
            logger.exception("relay connection failed url=%s", self._url)
            append_message(session, ROLE_ERROR, MSG_WS_CONNECT_FAILED)
            self._phase = Closed(reason="connect failed")
            self._mark_closed(STATUS_ERROR_DETAIL)
            self._settled.set()
            return

        if self._phase is not phase:
            with contextlib.suppress(Exception):
                await socket.close()
            return
        phase.handle = socket

        try:
            await self._open(phase, socket)
            async for frame in socket:
                self._classifier.handle_frame(session, frame)
        except websockets.ConnectionClosed:
            pass
        except Exception:
            logger.exception("relay transport failed")
            session.status = STATUS_ERROR_DETAIL
        finally:
            self._settled.set()
            if self._phase is phase or isinstance(self._phase, Bridged):
                self._phase = Closed(reason="socket closed")
                self._mark_closed(STATUS_IDLE if session.manual_stop else STATUS_CLOSED)

    async def _open(self, phase: Connecting, socket: Any) -> None:
        session = self._session
        session.is_ready = True
        session.status = STATUS_READY
        await socket.send(dump_event(build_session_update_event(self._voice, self._instructions)))
        while phase.queue:
            await socket.send(phase.queue.popleft())
        self._phase = Bridged(handle=socket)
        self._settled.set()
        logger.info("relay transport open url=%s", self._url)

    async def _shutdown(self) -> None:
        phase = self._phase
        self._phase = Closed(reason="stopped")
        if isinstance(phase, Connecting):
            phase.queue.clear()
        handle = phase.handle if isinstance(phase, Connecting | Bridged) else None
        if handle is not None:
            with contextlib.suppress(Exception):
                await handle.close()
        reader, self._reader = self._reader, None
        if reader is not None:
            reader.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await reader
        self._settled.set()


__all__ = ["WebSocketTransport"]
