"""Frame decoding and outbound event builders."""

from __future__ import annotations

from typing import Any

import orjson

from realtime_relay.errors import ProtocolDecodeError
from realtime_relay.config.transport import DEFAULT_SESSION_INSTRUCTIONS


def parse_event_data(data: Any) -> dict[str, Any]:
    if isinstance(data, memoryview):
        data = data.tobytes()
    if not isinstance(data, str | bytes | bytearray):
        raise ProtocolDecodeError(f"unsupported event data type: {type(data).__name__}")
    try:
        payload = orjson.loads(data)
    except orjson.JSONDecodeError as exc:
        raise ProtocolDecodeError("event data is not valid JSON") from exc
    if not isinstance(payload, dict):
        raise ProtocolDecodeError("event data is not a JSON object")
    return payload


def build_response_create_event(text: str, client_message_id: str) -> dict[str, Any]:
    return {
        "type": "response.create",
        "response": {
            "metadata": {"client_message_id": client_message_id},
            "input": [
                {
                    "type": "message",
                    "role": "user",
                    "content": [{"type": "input_text", "text": text}],
                }
            ],
        },
    }


def build_audio_response_create_event(client_message_id: str) -> dict[str, Any]:
    # Audio turns answer the committed input buffer, so no explicit input.
    return {
        "type": "response.create",
        "response": {
            "metadata": {"client_message_id": client_message_id},
            "input": [],
        },
    }


def build_session_update_event(voice: str | None, instructions: str = DEFAULT_SESSION_INSTRUCTIONS) -> dict[str, Any]:
    session: dict[str, Any] = {"type": "realtime", "instructions": instructions}
    if voice:
        session["voice"] = voice
    return {"type": "session.update", "session": session}


def build_audio_append_event(audio_b64: str) -> dict[str, Any]:
    return {"type": "input_audio_buffer.append", "audio": audio_b64}


def build_audio_commit_event() -> dict[str, Any]:
    return {"type": "input_audio_buffer.commit"}


def dump_event(event: dict[str, Any]) -> str:
    return orjson.dumps(event).decode("utf-8")


__all__ = [
    "build_audio_append_event",
    "build_audio_commit_event",
    "build_audio_response_create_event",
    "build_response_create_event",
    "build_session_update_event",
    "dump_event",
    "parse_event_data",
]
