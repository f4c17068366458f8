"""Environment parsing for runtime settings."""

from __future__ import annotations

import os

from realtime_relay.config.secrets import get_openai_api_key
from realtime_relay.config.server import ENV_HOST, ENV_PORT, DEFAULT_HOST, DEFAULT_PORT
from realtime_relay.state.settings import (
    AppSettings,
    AuthSettings,
    ModelSettings,
    ServerSettings,
    UpstreamSettings,
)
from realtime_relay.config.models import (
    ENV_OPENAI_REALTIME_MODEL,
    ENV_OPENAI_REALTIME_VOICE,
    DEFAULT_OPENAI_REALTIME_MODEL,
    DEFAULT_OPENAI_REALTIME_VOICE,
)
from realtime_relay.config.upstream import (
    ENV_OPENAI_REALTIME_BASE_URL,
    ENV_UPSTREAM_REQUEST_TIMEOUT_S,
    DEFAULT_OPENAI_REALTIME_BASE_URL,
    ENV_UPSTREAM_HANDSHAKE_TIMEOUT_S,
    DEFAULT_UPSTREAM_REQUEST_TIMEOUT_S,
    DEFAULT_UPSTREAM_HANDSHAKE_TIMEOUT_S,
)


def _str_env(name: str, default: str) -> str:
    raw = os.getenv(name)
    if raw is None:
        return default
    v = raw.strip()
    return v if v else default


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return int(raw)
    except ValueError:
        return default


def _float_env(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _load_auth_settings() -> AuthSettings:
    return AuthSettings(api_key=get_openai_api_key())


def _load_model_settings() -> ModelSettings:
    return ModelSettings(
        model=_str_env(ENV_OPENAI_REALTIME_MODEL, DEFAULT_OPENAI_REALTIME_MODEL),
        voice=_str_env(ENV_OPENAI_REALTIME_VOICE, DEFAULT_OPENAI_REALTIME_VOICE),
    )


def _load_upstream_settings() -> UpstreamSettings:
    base_url = _str_env(ENV_OPENAI_REALTIME_BASE_URL, DEFAULT_OPENAI_REALTIME_BASE_URL).rstrip("/")
    handshake_timeout = _float_env(ENV_UPSTREAM_HANDSHAKE_TIMEOUT_S, DEFAULT_UPSTREAM_HANDSHAKE_TIMEOUT_S)
    if handshake_timeout < 0:
        handshake_timeout = DEFAULT_UPSTREAM_HANDSHAKE_TIMEOUT_S
    request_timeout = _float_env(ENV_UPSTREAM_REQUEST_TIMEOUT_S, DEFAULT_UPSTREAM_REQUEST_TIMEOUT_S)
    if request_timeout <= 0:
        request_timeout = DEFAULT_UPSTREAM_REQUEST_TIMEOUT_S

    return UpstreamSettings(
        base_url=base_url,
        handshake_timeout_s=handshake_timeout,
        request_timeout_s=request_timeout,
    )


def _load_server_settings() -> ServerSettings:
    port = _int_env(ENV_PORT, DEFAULT_PORT)
    if not 0 < port < 65536:
        port = DEFAULT_PORT
    return ServerSettings(host=_str_env(ENV_HOST, DEFAULT_HOST), port=port)


def load_settings() -> AppSettings:
    return AppSettings(
        auth=_load_auth_settings(),
        model=_load_model_settings(),
        upstream=_load_upstream_settings(),
        server=_load_server_settings(),
    )


__all__ = ["load_settings"]
