"""Upstream URL and header construction."""

from __future__ import annotations

from urllib.parse import urlencode, urlsplit, urlunsplit

from realtime_relay.config.upstream import (
    UPSTREAM_BETA_VALUE,
    UPSTREAM_BETA_HEADER,
    UPSTREAM_CALLS_SUFFIX,
    UPSTREAM_SESSIONS_SUFFIX,
)

_WS_SCHEMES = {"https": "wss", "http": "ws"}


def realtime_ws_url(base_url: str, *, model: str, voice: str | None = None) -> str:
    """Build the upstream WebSocket URL with model (and voice) as query parameters."""
    parts = urlsplit(base_url)
    scheme = _WS_SCHEMES.get(parts.scheme, parts.scheme)
    params = {"model": model}
    if voice:
        params["voice"] = voice
    query = "&".join(q for q in (parts.query, urlencode(params)) if q)
    return urlunsplit((scheme, parts.netloc, parts.path.rstrip("/"), query, parts.fragment))


def sessions_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}{UPSTREAM_SESSIONS_SUFFIX}"


def calls_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}{UPSTREAM_CALLS_SUFFIX}"


def bearer_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def upstream_headers(api_key: str) -> dict[str, str]:
    headers = bearer_headers(api_key)
    headers[UPSTREAM_BETA_HEADER] = UPSTREAM_BETA_VALUE
    return headers


__all__ = ["bearer_headers", "calls_url", "realtime_ws_url", "sessions_url", "upstream_headers"]
