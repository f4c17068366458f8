"""Client-side transports: the relay's WebSocket client and the direct WebRTC data channel."""

from .webrtc import WebRTCTransport
from .websocket import WebSocketTransport

__all__ = ["WebRTCTransport", "WebSocketTransport"]
