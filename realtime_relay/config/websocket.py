"""Relay endpoint paths and frame constants."""

from __future__ import annotations

REALTIME_PATH = "/openai/agents/realtime"
WS_ENDPOINT_PATH = f"{REALTIME_PATH}/ws"
EPHEMERAL_TOKEN_PATH = f"{REALTIME_PATH}/ephemeral-token"

# Frame keys and injected frame types
WS_KEY_TYPE = "type"
WS_KEY_STATUS = "status"
WS_KEY_CODE = "code"
WS_KEY_ERROR = "error"
WS_TYPE_ERROR = "error"
WS_TYPE_SERVER_STATUS = "server.status"

# Close codes
WS_CLOSE_NORMAL_CODE = 1000
WS_CLOSE_INTERNAL_ERROR_CODE = 1011

__all__ = [
    "EPHEMERAL_TOKEN_PATH",
    "REALTIME_PATH",
    "WS_CLOSE_INTERNAL_ERROR_CODE",
    "WS_CLOSE_NORMAL_CODE",
    "WS_ENDPOINT_PATH",
    "WS_KEY_CODE",
    "WS_KEY_ERROR",
    "WS_KEY_STATUS",
    "WS_KEY_TYPE",
    "WS_TYPE_ERROR",
    "WS_TYPE_SERVER_STATUS",
]
