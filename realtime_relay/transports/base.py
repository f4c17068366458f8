"""Shared bookkeeping for client transports."""

from __future__ import annotations

import uuid
import contextlib
from collections.abc import Callable

from realtime_relay.realtime.audio_sink import AudioSink
from realtime_relay.config.transport import ROLE_USER
from realtime_relay.realtime.classifier import EventClassifier
from realtime_relay.state.phase import Bridged, Connecting, Disconnected, ConnectionPhase
from realtime_relay.state.transport import Message, TransportSession
from realtime_relay.realtime.context import now_ms, begin_turn, new_session, append_message


class TransportBase:
    transport_id: str = ""

    def __init__(
        self,
        *,
        audio_sink: AudioSink | None = None,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self._audio_sink = audio_sink
        self._clock = clock
        self._classifier = EventClassifier(audio_sink=audio_sink, clock=clock)
        self._session = new_session(self.transport_id)
        self._phase: ConnectionPhase = Disconnected()

    @property
    def session(self) -> TransportSession:
        return self._session

    @property
    def phase(self) -> ConnectionPhase:
        return self._phase

    @property
    def is_active(self) -> bool:
        return isinstance(self._phase, Connecting | Bridged)

    def _renew_session(self) -> TransportSession:
        # Reconnects replace the session; only the display log carries over.
        self._session = new_session(self.transport_id, messages=self._session.messages)
        if self._audio_sink is not None:
            self._audio_sink.reset()
        return self._session

    def _open_turn(self, text: str) -> tuple[str, Message]:
        # Registered before sending so a fast reply still finds its pending turn.
        client_message_id = str(uuid.uuid4())
        begin_turn(self._session, client_message_id, self._clock())
        return client_message_id, append_message(self._session, ROLE_USER, text)

    def _abort_turn(self, client_message_id: str, message: Message) -> None:
        self._session.pending_turns.pop(client_message_id, None)
        with contextlib.suppress(ValueError):
            self._session.messages.remove(message)

    def _mark_closed(self, status: str) -> None:
        session = self._session
        session.is_ready = False
        session.clear_turns()
        session.status = status
        session.manual_stop = False


__all__ = ["TransportBase"]
