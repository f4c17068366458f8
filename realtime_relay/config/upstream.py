"""Upstream provider endpoints and timeouts."""

from __future__ import annotations

ENV_OPENAI_REALTIME_BASE_URL = "OPENAI_REALTIME_BASE_URL"
DEFAULT_OPENAI_REALTIME_BASE_URL = "https://api.openai.com/v1/realtime"

# Appended to the realtime base URL.
UPSTREAM_SESSIONS_SUFFIX = "/sessions"
UPSTREAM_CALLS_SUFFIX = "/calls"

UPSTREAM_BETA_HEADER = "OpenAI-Beta"
UPSTREAM_BETA_VALUE = "realtime=v1"

# Bounded upstream WebSocket handshake, enforced by the relay. 0 leaves it unbounded.
ENV_UPSTREAM_HANDSHAKE_TIMEOUT_S = "UPSTREAM_HANDSHAKE_TIMEOUT_S"
DEFAULT_UPSTREAM_HANDSHAKE_TIMEOUT_S = 10.0

ENV_UPSTREAM_REQUEST_TIMEOUT_S = "UPSTREAM_REQUEST_TIMEOUT_S"
DEFAULT_UPSTREAM_REQUEST_TIMEOUT_S = 30.0

__all__ = [
    "DEFAULT_OPENAI_REALTIME_BASE_URL",
    "DEFAULT_UPSTREAM_HANDSHAKE_TIMEOUT_S",
    "DEFAULT_UPSTREAM_REQUEST_TIMEOUT_S",
    "ENV_OPENAI_REALTIME_BASE_URL",
    "ENV_UPSTREAM_HANDSHAKE_TIMEOUT_S",
    "ENV_UPSTREAM_REQUEST_TIMEOUT_S",
    "UPSTREAM_BETA_HEADER",
    "UPSTREAM_BETA_VALUE",
    "UPSTREAM_CALLS_SUFFIX",
    "UPSTREAM_SESSIONS_SUFFIX",
]
