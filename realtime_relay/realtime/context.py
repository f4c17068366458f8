"""Transport session construction and bookkeeping helpers."""

from __future__ import annotations

import time
import uuid

from realtime_relay.state.transport import Message, TransportSession


def now_ms() -> float:
    return time.perf_counter() * 1000.0


def new_session(transport_id: str, *, messages: list[Message] | None = None) -> TransportSession:
    """Start a fresh session; the display log may carry over from a previous one."""
    return TransportSession(id=transport_id, messages=messages if messages is not None else [])


def append_message(session: TransportSession, role: str, text: str = "") -> Message:
    message = Message(id=str(uuid.uuid4()), role=role, text=text)
    session.messages.append(message)
    return message


def record_latency(session: TransportSession, duration_ms: float) -> None:
    session.latency_samples.append(duration_ms)
    session.latest_latency_ms = duration_ms
    session.average_latency_ms = sum(session.latency_samples) / len(session.latency_samples)


def begin_turn(session: TransportSession, client_message_id: str, started_at_ms: float) -> None:
    session.pending_turns[client_message_id] = started_at_ms


def complete_turn(session: TransportSession, client_message_id: str | None, finished_at_ms: float) -> float | None:
    if client_message_id is None:
        return None
    started = session.pending_turns.pop(client_message_id, None)
    if started is None:
        return None
    elapsed = finished_at_ms - started
    record_latency(session, elapsed)
    return elapsed


__all__ = [
    "append_message",
    "begin_turn",
    "complete_turn",
    "new_session",
    "now_ms",
    "record_latency",
]
