"""Configuration module exports (env names, defaults and protocol constants only)."""

from .websocket import WS_ENDPOINT_PATH, EPHEMERAL_TOKEN_PATH

__all__ = [
    "EPHEMERAL_TOKEN_PATH",
    "WS_ENDPOINT_PATH",
]
