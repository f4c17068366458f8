"""Client transport constants (WebSocket relay and WebRTC data channel)."""

from __future__ import annotations

TRANSPORT_WS = "ws"
TRANSPORT_WEBRTC = "webrtc"

# Message roles in a transport's display log
ROLE_USER = "user"
ROLE_ASSISTANT_WS = "gpt-ws"
ROLE_ASSISTANT_WEBRTC = "gpt-webrtc"
ROLE_ERROR = "error"

DATA_CHANNEL_LABEL = "oai-events"

# ICE gathering is treated as complete after this long, whatever its state.
ICE_GATHERING_TIMEOUT_S = 2.0

# Provider realtime audio is PCM16 mono.
AUDIO_SAMPLE_RATE_HZ = 24000

DEFAULT_SESSION_INSTRUCTIONS = "你是一位即時語音助理，會以語音與文字同步回覆使用者。"

__all__ = [
    "AUDIO_SAMPLE_RATE_HZ",
    "DATA_CHANNEL_LABEL",
    "DEFAULT_SESSION_INSTRUCTIONS",
    "ICE_GATHERING_TIMEOUT_S",
    "ROLE_ASSISTANT_WEBRTC",
    "ROLE_ASSISTANT_WS",
    "ROLE_ERROR",
    "ROLE_USER",
    "TRANSPORT_WEBRTC",
    "TRANSPORT_WS",
]
