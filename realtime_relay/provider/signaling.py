"""WebRTC signaling calls made by the client side (token fetch and SDP exchange)."""

from __future__ import annotations

import logging
from typing import Any

import httpx
import orjson

from realtime_relay.config.messages import MSG_TOKEN_MISSING_SECRET
from realtime_relay.errors import UpstreamRejected, UpstreamUnreachable

from .endpoints import calls_url, bearer_headers

logger = logging.getLogger(__name__)

SDP_CONTENT_TYPE = "application/sdp"


def extract_client_secret(data: Any) -> str | None:
    if not isinstance(data, dict):
        return None
    secret = data.get("client_secret")
    if isinstance(secret, dict):
        secret = secret.get("value")
    if isinstance(secret, str) and secret:
        return secret
    value = data.get("value")
    return value if isinstance(value, str) and value else None


async def fetch_ephemeral_token(client: httpx.AsyncClient, url: str) -> str:
    """POST the relay's ephemeral-token route and return the client secret value."""
    try:
        response = await client.post(url)
    except httpx.HTTPError as exc:
        raise UpstreamUnreachable(f"token request failed: {type(exc).__name__}") from exc

    if not response.is_success:
        logger.warning("ephemeral token request rejected status=%s", response.status_code)
        raise UpstreamRejected(status_code=response.status_code, details=response.text)

    try:
        data = orjson.loads(response.content)
    except orjson.JSONDecodeError as exc:
        raise UpstreamUnreachable("token response is not valid JSON") from exc

    token = extract_client_secret(data)
    if token is None:
        raise UpstreamUnreachable(MSG_TOKEN_MISSING_SECRET)
    return token


async def exchange_sdp(client: httpx.AsyncClient, base_url: str, *, token: str, offer_sdp: str) -> str:
    """Send the local offer to the provider and return the raw answer SDP."""
    try:
        response = await client.post(
            calls_url(base_url),
            content=offer_sdp.encode("utf-8"),
            headers={**bearer_headers(token), "Content-Type": SDP_CONTENT_TYPE},
        )
    except httpx.HTTPError as exc:
        raise UpstreamUnreachable(f"SDP exchange failed: {type(exc).__name__}") from exc

    if not response.is_success:
        logger.warning("SDP exchange rejected status=%s", response.status_code)
        raise UpstreamRejected(status_code=response.status_code, details=response.text)

    answer = response.text
    if not answer.strip():
        raise UpstreamUnreachable("SDP answer is empty")
    return answer


__all__ = ["SDP_CONTENT_TYPE", "exchange_sdp", "extract_client_secret", "fetch_ephemeral_token"]
