"""Per-transport conversation state mutated by the event classifier."""

from __future__ import annotations

from dataclasses import field, dataclass

from realtime_relay.config.messages import STATUS_IDLE
from realtime_relay.config.transport import TRANSPORT_WS, ROLE_ASSISTANT_WS, ROLE_ASSISTANT_WEBRTC


@dataclass(slots=True)
class Message:
    id: str
    role: str
    text: str = ""


@dataclass(slots=True)
class ResponseEntry:
    message: Message
    client_message_id: str | None = None


@dataclass(slots=True)
class TransportSession:
    id: str
    status: str = STATUS_IDLE
    is_ready: bool = False
    manual_stop: bool = False
    messages: list[Message] = field(default_factory=list)
    # client_message_id -> send timestamp (ms)
    pending_turns: dict[str, float] = field(default_factory=dict)
    active_responses: dict[str, ResponseEntry] = field(default_factory=dict)
    # item_id -> user message being transcribed
    active_transcripts: dict[str, Message] = field(default_factory=dict)
    latency_samples: list[float] = field(default_factory=list)
    latest_latency_ms: float | None = None
    average_latency_ms: float | None = None

    @property
    def assistant_role(self) -> str:
        return ROLE_ASSISTANT_WS if self.id == TRANSPORT_WS else ROLE_ASSISTANT_WEBRTC

    @property
    def samples(self) -> int:
        return len(self.latency_samples)

    def clear_turns(self) -> None:
        self.pending_turns.clear()
        self.active_responses.clear()
        self.active_transcripts.clear()


__all__ = ["Message", "ResponseEntry", "TransportSession"]
