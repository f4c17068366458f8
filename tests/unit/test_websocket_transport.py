from __future__ import annotations

import asyncio

import orjson
import pytest

from realtime_relay.state.phase import Closed, Bridged
from realtime_relay.transports.websocket import WebSocketTransport
from realtime_relay.config.transport import ROLE_USER, ROLE_ERROR, ROLE_ASSISTANT_WS
from realtime_relay.config.messages import (
    STATUS_IDLE,
    STATUS_READY,
    STATUS_CLOSED,
    STATUS_CONNECTING,
    STATUS_ERROR_DETAIL,
    STATUS_WAITING_REPLY,
)


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class _FakeSocket:
    def __init__(self) -> None:
        self.sent: list[str] = []
        self.inbound: asyncio.Queue[str | None] = asyncio.Queue()
        self.closed = False

    async def send(self, message: str) -> None:
        self.sent.append(message)

    async def close(self) -> None:
        self.closed = True
        self.inbound.put_nowait(None)

    def __aiter__(self) -> _FakeSocket:
        return self

    async def __anext__(self) -> str:
        item = await self.inbound.get()
        if item is None:
            raise StopAsyncIteration
        return item

    def events(self) -> list[dict]:
        return [orjson.loads(item) for item in self.sent]


class _GatedConnect:
    def __init__(self, socket: _FakeSocket) -> None:
        self.socket = socket
        self.gate = asyncio.Event()

    async def __call__(self, url: str) -> _FakeSocket:
        await self.gate.wait()
        return self.socket


async def _until(predicate, timeout: float = 1.0) -> None:
    async def _poll() -> None:
        while not predicate():
            await asyncio.sleep(0.001)

    await asyncio.wait_for(_poll(), timeout=timeout)


@pytest.mark.asyncio
async def test_setup_event_then_queued_events_in_order() -> None:
    socket = _FakeSocket()
    connect = _GatedConnect(socket)
    transport = WebSocketTransport("ws://relay.test/ws", connect=connect, voice="verse")

    await transport.start()
    assert transport.session.status == STATUS_CONNECTING
    assert await transport.send_text("first")
    assert await transport.send_text("second")
    assert not await transport.send_text("   ")
    assert socket.sent == []

    connect.gate.set()
    assert await transport.wait_ready(timeout=1.0)

    events = socket.events()
    assert [e["type"] for e in events] == ["session.update", "response.create", "response.create"]
    assert events[0]["session"]["voice"] == "verse"
    texts = [e["response"]["input"][0]["content"][0]["text"] for e in events[1:]]
    assert texts == ["first", "second"]
    assert isinstance(transport.phase, Bridged)
    assert transport.session.status == STATUS_READY

    await transport.stop()


@pytest.mark.asyncio
async def test_reply_is_classified_and_latency_recorded() -> None:
    socket = _FakeSocket()
    connect = _GatedConnect(socket)
    connect.gate.set()
    clock = _Clock()
    transport = WebSocketTransport("ws://relay.test/ws", connect=connect, clock=clock)
    await transport.start()
    await transport.wait_ready(timeout=1.0)

    clock.now = 100.0
    assert await transport.send_text("hello")
    assert transport.session.status == STATUS_WAITING_REPLY
    client_message_id = socket.events()[-1]["response"]["metadata"]["client_message_id"]

    response = {"id": "R1", "metadata": {"client_message_id": client_message_id}}
    for delta in ("Hi", " there"):
        socket.inbound.put_nowait(
            orjson.dumps({"type": "response.output_text.delta", "response": response, "delta": delta}).decode()
        )
    clock.now = 340.0
    socket.inbound.put_nowait(orjson.dumps({"type": "response.done", "response": {"id": "R1"}}).decode())
    await _until(lambda: transport.session.latency_samples)

    session = transport.session
    assert [(m.role, m.text) for m in session.messages] == [(ROLE_USER, "hello"), (ROLE_ASSISTANT_WS, "Hi there")]
    assert session.latency_samples == [240.0]
    assert session.pending_turns == {}
    assert session.status == STATUS_READY

    await transport.stop()


@pytest.mark.asyncio
async def test_audio_turn_events() -> None:
    socket = _FakeSocket()
    connect = _GatedConnect(socket)
    connect.gate.set()
    transport = WebSocketTransport("ws://relay.test/ws", connect=connect)
    await transport.start()
    await transport.wait_ready(timeout=1.0)

    assert not await transport.send_audio_turn([])
    assert transport.session.messages[-1].role == ROLE_ERROR

    assert await transport.send_audio_turn(["AAA=", "BBB="])
    types = [e["type"] for e in socket.events()[1:]]
    assert types == [
        "input_audio_buffer.append",
        "input_audio_buffer.append",
        "input_audio_buffer.commit",
        "response.create",
    ]
    assert socket.events()[-1]["response"]["input"] == []
    assert transport.session.messages[-1].text == "（語音訊息）"
    assert len(transport.session.pending_turns) == 1

    await transport.stop()


@pytest.mark.asyncio
async def test_remote_close_clears_state() -> None:
    socket = _FakeSocket()
    connect = _GatedConnect(socket)
    connect.gate.set()
    transport = WebSocketTransport("ws://relay.test/ws", connect=connect)
    await transport.start()
    await transport.wait_ready(timeout=1.0)
    await transport.send_text("pending")

    socket.inbound.put_nowait(None)
    await _until(lambda: isinstance(transport.phase, Closed))

    assert transport.session.status == STATUS_CLOSED
    assert not transport.session.is_ready
    assert transport.session.pending_turns == {}
    assert not await transport.send_text("late")


@pytest.mark.asyncio
async def test_manual_stop_returns_to_idle() -> None:
    socket = _FakeSocket()
    connect = _GatedConnect(socket)
    connect.gate.set()
    transport = WebSocketTransport("ws://relay.test/ws", connect=connect)
    await transport.start()
    await transport.wait_ready(timeout=1.0)

    await transport.stop()

    assert socket.closed
    assert transport.session.status == STATUS_IDLE
    assert not transport.session.manual_stop


@pytest.mark.asyncio
async def test_connect_failure_reports_error() -> None:
    async def _refuse(url: str):
        raise OSError("refused")

    transport = WebSocketTransport("ws://relay.test/ws", connect=_refuse)
    await transport.start()

    assert not await transport.wait_ready(timeout=1.0)
    assert transport.session.status == STATUS_ERROR_DETAIL
    assert transport.session.messages[-1].role == ROLE_ERROR


@pytest.mark.asyncio
async def test_restart_keeps_log_and_resets_latency() -> None:
    first = _FakeSocket()
    connect = _GatedConnect(first)
    connect.gate.set()
    transport = WebSocketTransport("ws://relay.test/ws", connect=connect)
    await transport.start()
    await transport.wait_ready(timeout=1.0)
    await transport.send_text("kept")
    transport.session.latency_samples.append(1.0)

    connect.socket = _FakeSocket()
    await transport.start()
    await transport.wait_ready(timeout=1.0)

    assert first.closed
    assert [m.text for m in transport.session.messages] == ["kept"]
    assert transport.session.latency_samples == []
    assert transport.session.pending_turns == {}

    await transport.stop()
