"""Event classifier: applies decoded provider events to a transport session.

Pure state transitions, no I/O besides handing audio chunks to the sink.
Unknown events leave the session untouched.
"""

from __future__ import annotations

import base64
import logging
import binascii
from typing import Any
from collections.abc import Callable

from realtime_relay.errors import ProtocolDecodeError
from realtime_relay.config.transport import ROLE_USER, ROLE_ERROR
from realtime_relay.state.transport import ResponseEntry, TransportSession
from realtime_relay.config.messages import STATUS_ERROR, STATUS_READY, MSG_RESPONSE_FAILED, MSG_UNKNOWN_REALTIME_ERROR

from .audio_sink import AudioSink
from .helpers import parse_event_data
from .events import EventKind, RealtimeEvent, decode_event
from .context import now_ms, complete_turn, append_message
from .content import text_from_content, extract_delta_text, extract_completed_text

logger = logging.getLogger(__name__)


def _error_text(payload: dict[str, Any], fallback: str) -> str:
    error = payload.get("error")
    if isinstance(error, dict) and isinstance(error.get("message"), str) and error["message"]:
        return error["message"]
    if isinstance(payload.get("message"), str) and payload["message"]:
        return payload["message"]
    return fallback


class EventClassifier:
    def __init__(
        self,
        *,
        audio_sink: AudioSink | None = None,
        clock: Callable[[], float] = now_ms,
    ) -> None:
        self._audio_sink = audio_sink
        self._clock = clock

    def handle_frame(self, session: TransportSession, data: Any) -> RealtimeEvent | None:
        """Decode one inbound frame and apply it; undecodable frames are dropped."""
        try:
            payload = parse_event_data(data)
        except ProtocolDecodeError as exc:
            logger.warning("dropping undecodable frame transport=%s: %s", session.id, exc)
            return None
        return self.apply_payload(session, payload)

    def apply_payload(self, session: TransportSession, payload: dict[str, Any]) -> RealtimeEvent:
        event = decode_event(payload)
        self.apply(session, event)
        return event

    def apply(self, session: TransportSession, event: RealtimeEvent) -> None:
        kind = event.kind
        if kind is EventKind.UNKNOWN:
            return
        if kind is EventKind.ERROR:
            append_message(session, ROLE_ERROR, _error_text(event.payload, MSG_UNKNOWN_REALTIME_ERROR))
            session.status = STATUS_ERROR
        elif kind is EventKind.SERVER_STATUS:
            status = event.payload.get("status")
            if isinstance(status, str):
                session.status = status
        elif kind is EventKind.SESSION_CREATED:
            session.status = STATUS_READY
        elif kind is EventKind.TEXT_DELTA:
            self._apply_text_delta(session, event)
        elif kind is EventKind.AUDIO_DELTA:
            self._apply_audio_delta(event)
        elif kind in (EventKind.TEXT_DONE, EventKind.RESPONSE_DONE):
            self._finish_response(session, event)
        elif kind is EventKind.RESPONSE_ERROR:
            self._fail_response(session, event)
        elif kind is EventKind.TRANSCRIPTION_DELTA:
            self._apply_transcription_delta(session, event)
        elif kind is EventKind.TRANSCRIPTION_DONE:
            self._finish_transcription(session, event)

    def _ensure_entry(self, session: TransportSession, event: RealtimeEvent) -> ResponseEntry | None:
        if event.response_id is None:
            return None
        entry = session.active_responses.get(event.response_id)
        if entry is None:
            message = append_message(session, session.assistant_role)
            entry = ResponseEntry(message=message, client_message_id=event.client_message_id)
            session.active_responses[event.response_id] = entry
        elif entry.client_message_id is None and event.client_message_id is not None:
            entry.client_message_id = event.client_message_id
        return entry

    def _apply_text_delta(self, session: TransportSession, event: RealtimeEvent) -> None:
        text = extract_delta_text(event.payload)
        if not text:
            return
        entry = self._ensure_entry(session, event)
        if entry is not None:
            entry.message.text += text

    def _apply_audio_delta(self, event: RealtimeEvent) -> None:
        chunk = event.payload.get("delta")
        if self._audio_sink is None or not isinstance(chunk, str) or not chunk:
            return
        try:
            pcm = base64.b64decode(chunk, validate=True)
        except binascii.Error:
            logger.warning("dropping undecodable audio delta response_id=%s", event.response_id)
            return
        self._audio_sink.append(pcm)

    def _finish_response(self, session: TransportSession, event: RealtimeEvent) -> None:
        # Terminal events resolve an existing entry; they never open a new message.
        entry = session.active_responses.pop(event.response_id, None) if event.response_id else None
        client_message_id = entry.client_message_id if entry is not None else None
        if client_message_id is None:
            client_message_id = event.client_message_id

        if entry is not None and event.kind is EventKind.RESPONSE_DONE:
            final_text = extract_completed_text(event.payload)
            if final_text:
                entry.message.text = final_text

        elapsed = complete_turn(session, client_message_id, self._clock())
        if elapsed is not None:
            logger.debug("turn completed transport=%s latency_ms=%.2f", session.id, elapsed)
        session.status = STATUS_READY

    def _fail_response(self, session: TransportSession, event: RealtimeEvent) -> None:
        append_message(session, ROLE_ERROR, _error_text(event.payload, MSG_RESPONSE_FAILED))
        entry = session.active_responses.pop(event.response_id, None) if event.response_id else None
        client_message_id = entry.client_message_id if entry is not None else event.client_message_id
        if client_message_id is not None:
            session.pending_turns.pop(client_message_id, None)

    def _apply_transcription_delta(self, session: TransportSession, event: RealtimeEvent) -> None:
        text = extract_delta_text(event.payload)
        if not text or event.item_id is None:
            return
        message = session.active_transcripts.get(event.item_id)
        if message is None:
            message = append_message(session, ROLE_USER)
            session.active_transcripts[event.item_id] = message
        message.text += text

    def _finish_transcription(self, session: TransportSession, event: RealtimeEvent) -> None:
        if event.item_id is None:
            return
        message = session.active_transcripts.pop(event.item_id, None)
        transcript = text_from_content(event.payload.get("transcript"))
        if not transcript:
            return
        if message is None:
            append_message(session, ROLE_USER, transcript)
        else:
            message.text = transcript


__all__ = ["EventClassifier"]
