from __future__ import annotations

import base64
import copy

import orjson

from realtime_relay.realtime.audio import PcmBufferSink
from realtime_relay.realtime.context import new_session
from realtime_relay.realtime.classifier import EventClassifier
from realtime_relay.config.transport import ROLE_USER, ROLE_ERROR, TRANSPORT_WS, ROLE_ASSISTANT_WS
from realtime_relay.config.messages import STATUS_ERROR, STATUS_READY, STATUS_WAITING_REPLY


class _Clock:
    def __init__(self, now: float = 0.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


def _delta(response_id: str, delta: str, **extra: object) -> dict:
    return {"type": "response.output_text.delta", "response_id": response_id, "delta": delta, **extra}


def test_response_accumulates_once_and_entry_is_removed() -> None:
    session = new_session(TRANSPORT_WS)
    classifier = EventClassifier()

    for chunk in ("Hel", "lo", " world"):
        classifier.apply_payload(session, _delta("R1", chunk))
    classifier.apply_payload(session, {"type": "response.done", "response": {"id": "R1"}})

    assistant = [m for m in session.messages if m.role == ROLE_ASSISTANT_WS]
    assert [m.text for m in assistant] == ["Hello world"]
    assert "R1" not in session.active_responses
    assert session.status == STATUS_READY


def test_latency_recorded_for_matching_turn() -> None:
    clock = _Clock(1000.0)
    session = new_session(TRANSPORT_WS)
    classifier = EventClassifier(clock=clock)
    session.pending_turns["M1"] = 1000.0
    session.status = STATUS_WAITING_REPLY

    classifier.apply_payload(
        session,
        {
            "type": "response.audio_transcript.delta",
            "response": {"id": "R1", "metadata": {"client_message_id": "M1"}},
            "delta": "hi",
        },
    )
    clock.now = 1250.0
    classifier.apply_payload(session, {"type": "response.done", "response": {"id": "R1"}})

    assert session.latency_samples == [250.0]
    assert session.samples == 1
    assert session.latest_latency_ms == 250.0
    assert session.average_latency_ms == 250.0
    assert "M1" not in session.pending_turns


def test_latency_resolved_from_done_metadata_without_prior_delta() -> None:
    clock = _Clock(10.0)
    session = new_session(TRANSPORT_WS)
    classifier = EventClassifier(clock=clock)
    session.pending_turns["M1"] = 0.0

    classifier.apply_payload(
        session,
        {"type": "response.completed", "response": {"id": "R9", "metadata": {"client_message_id": "M1"}}},
    )

    assert session.latency_samples == [10.0]
    assert session.pending_turns == {}
    assert session.messages == []


def test_text_done_then_response_done_records_single_sample() -> None:
    clock = _Clock(0.0)
    session = new_session(TRANSPORT_WS)
    classifier = EventClassifier(clock=clock)
    session.pending_turns["M1"] = 0.0

    classifier.apply_payload(session, _delta("R1", "ok", response={"id": "R1", "metadata": {"client_message_id": "M1"}}))
    clock.now = 5.0
    classifier.apply_payload(session, {"type": "response.output_text.done", "response_id": "R1"})
    clock.now = 9.0
    classifier.apply_payload(
        session, {"type": "response.done", "response": {"id": "R1", "metadata": {"client_message_id": "M1"}}}
    )

    assert session.latency_samples == [5.0]


def test_completed_text_replaces_accumulated_text() -> None:
    session = new_session(TRANSPORT_WS)
    classifier = EventClassifier()
    classifier.apply_payload(session, _delta("R1", "draft"))
    classifier.apply_payload(
        session,
        {"type": "response.completed", "response": {"id": "R1", "output_text": ["final ", "answer"]}},
    )
    assert session.messages[-1].text == "final answer"


def test_unknown_event_leaves_state_unchanged() -> None:
    session = new_session(TRANSPORT_WS)
    classifier = EventClassifier()
    classifier.apply_payload(session, _delta("R1", "partial"))
    session.pending_turns["M1"] = 1.0
    before = copy.deepcopy(session)

    classifier.apply_payload(session, {"type": "rate_limits.updated", "rate_limits": []})
    classifier.apply_payload(session, {"no_type": True})

    assert session == before


def test_error_event_appends_message_and_sets_status() -> None:
    session = new_session(TRANSPORT_WS)
    classifier = EventClassifier()
    classifier.apply_payload(session, {"type": "error", "error": {"message": "boom"}})
    classifier.apply_payload(session, {"type": "error"})

    assert [(m.role, m.text) for m in session.messages] == [(ROLE_ERROR, "boom"), (ROLE_ERROR, "發生未知的即時錯誤")]
    assert session.status == STATUS_ERROR


def test_server_status_and_session_created() -> None:
    session = new_session(TRANSPORT_WS)
    classifier = EventClassifier()
    classifier.apply_payload(session, {"type": "server.status", "status": "已連線至 OpenAI"})
    assert session.status == "已連線至 OpenAI"
    classifier.apply_payload(session, {"type": "session.created"})
    assert session.status == STATUS_READY


def test_response_error_clears_turn_and_entry() -> None:
    session = new_session(TRANSPORT_WS)
    classifier = EventClassifier()
    session.pending_turns["M1"] = 0.0
    classifier.apply_payload(session, _delta("R1", "x", response={"id": "R1", "metadata": {"client_message_id": "M1"}}))

    classifier.apply_payload(session, {"type": "response.error", "response_id": "R1", "error": {"message": "nope"}})

    assert session.pending_turns == {}
    assert session.active_responses == {}
    assert session.messages[-1].role == ROLE_ERROR
    assert session.latency_samples == []


def test_audio_delta_feeds_sink_without_text() -> None:
    sink = PcmBufferSink()
    session = new_session(TRANSPORT_WS)
    classifier = EventClassifier(audio_sink=sink)
    pcm = b"\x01\x00\x02\x00"

    classifier.apply_payload(session, {"type": "response.audio.delta", "delta": base64.b64encode(pcm).decode()})
    classifier.apply_payload(session, {"type": "response.audio.delta", "delta": "***not base64***"})

    assert sink.data == pcm
    assert sink.duration_s == 2 / 24000
    assert session.messages == []


def test_input_transcription_accumulates_by_item() -> None:
    session = new_session(TRANSPORT_WS)
    classifier = EventClassifier()
    prefix = "conversation.item.input_audio_transcription"
    classifier.apply_payload(session, {"type": f"{prefix}.delta", "item_id": "I1", "delta": "hel"})
    classifier.apply_payload(session, {"type": f"{prefix}.delta", "item_id": "I1", "delta": "lo"})
    assert session.messages[-1].text == "hello"

    classifier.apply_payload(session, {"type": f"{prefix}.completed", "item_id": "I1", "transcript": "Hello."})

    assert [(m.role, m.text) for m in session.messages] == [(ROLE_USER, "Hello.")]
    assert session.active_transcripts == {}


def test_handle_frame_drops_undecodable_frames() -> None:
    session = new_session(TRANSPORT_WS)
    classifier = EventClassifier()
    assert classifier.handle_frame(session, "not json") is None
    assert classifier.handle_frame(session, 12) is None

    event = classifier.handle_frame(session, orjson.dumps({"type": "session.created"}))
    assert event is not None
    assert session.status == STATUS_READY


def test_handle_frame_tolerates_deeply_nested_delta() -> None:
    session = new_session(TRANSPORT_WS)
    session.status = STATUS_WAITING_REPLY
    classifier = EventClassifier()
    frame = '{"type":"response.output_text.delta","response_id":"R1","delta":' + "[" * 600 + '"x"' + "]" * 600 + "}"

    event = classifier.handle_frame(session, frame)

    assert event is not None
    assert session.messages == []
    assert session.active_responses == {}
    assert session.status == STATUS_WAITING_REPLY
