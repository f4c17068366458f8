"""Decoding of provider events into a closed set of kinds.

Events are classified once here; the classifier never re-inspects raw `type`
strings.
"""

from __future__ import annotations

from enum import Enum
from typing import Any
from dataclasses import dataclass


class EventKind(Enum):
    ERROR = "error"
    SERVER_STATUS = "server_status"
    SESSION_CREATED = "session_created"
    TEXT_DELTA = "text_delta"
    AUDIO_DELTA = "audio_delta"
    TEXT_DONE = "text_done"
    RESPONSE_DONE = "response_done"
    RESPONSE_ERROR = "response_error"
    TRANSCRIPTION_DELTA = "transcription_delta"
    TRANSCRIPTION_DONE = "transcription_done"
    UNKNOWN = "unknown"


_KINDS_BY_TYPE: dict[str, EventKind] = {
    "error": EventKind.ERROR,
    "server.status": EventKind.SERVER_STATUS,
    "session.created": EventKind.SESSION_CREATED,
    "response.delta": EventKind.TEXT_DELTA,
    "response.text.delta": EventKind.TEXT_DELTA,
    "response.output_text.delta": EventKind.TEXT_DELTA,
    "response.audio_transcript.delta": EventKind.TEXT_DELTA,
    "response.output_audio_transcript.delta": EventKind.TEXT_DELTA,
    "response.audio.delta": EventKind.AUDIO_DELTA,
    "response.output_audio.delta": EventKind.AUDIO_DELTA,
    "response.text.done": EventKind.TEXT_DONE,
    "response.output_text.done": EventKind.TEXT_DONE,
    "response.audio_transcript.done": EventKind.TEXT_DONE,
    "response.output_audio_transcript.done": EventKind.TEXT_DONE,
    "response.done": EventKind.RESPONSE_DONE,
    "response.completed": EventKind.RESPONSE_DONE,
    "response.error": EventKind.RESPONSE_ERROR,
    "conversation.item.input_audio_transcription.delta": EventKind.TRANSCRIPTION_DELTA,
    "conversation.item.input_audio_transcription.completed": EventKind.TRANSCRIPTION_DONE,
    "conversation.item.input_audio_transcription.done": EventKind.TRANSCRIPTION_DONE,
}


@dataclass(frozen=True, slots=True)
class RealtimeEvent:
    kind: EventKind
    type: str
    payload: dict[str, Any]
    response_id: str | None = None
    client_message_id: str | None = None
    item_id: str | None = None


def _str_or_none(value: Any) -> str | None:
    return value if isinstance(value, str) and value else None


def resolve_response_id(payload: dict[str, Any]) -> str | None:
    response = payload.get("response")
    if isinstance(response, dict):
        rid = _str_or_none(response.get("id"))
        if rid is not None:
            return rid
    for key in ("response_id", "responseId", "item_id"):
        rid = _str_or_none(payload.get(key))
        if rid is not None:
            return rid
    return None


def resolve_client_message_id(payload: dict[str, Any]) -> str | None:
    for holder in (payload.get("response"), payload):
        if not isinstance(holder, dict):
            continue
        metadata = holder.get("metadata")
        if isinstance(metadata, dict):
            cid = _str_or_none(metadata.get("client_message_id"))
            if cid is not None:
                return cid
    return None


def decode_event(payload: dict[str, Any]) -> RealtimeEvent:
    event_type = payload.get("type")
    if not isinstance(event_type, str):
        return RealtimeEvent(kind=EventKind.UNKNOWN, type="", payload=payload)

    kind = _KINDS_BY_TYPE.get(event_type, EventKind.UNKNOWN)
    if kind is EventKind.UNKNOWN:
        return RealtimeEvent(kind=kind, type=event_type, payload=payload)

    return RealtimeEvent(
        kind=kind,
        type=event_type,
        payload=payload,
        response_id=resolve_response_id(payload),
        client_message_id=resolve_client_message_id(payload),
        item_id=_str_or_none(payload.get("item_id")),
    )


__all__ = [
    "EventKind",
    "RealtimeEvent",
    "decode_event",
    "resolve_client_message_id",
    "resolve_response_id",
]
