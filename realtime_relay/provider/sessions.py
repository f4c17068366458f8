"""Ephemeral session credential issuance against the provider's REST API."""

from __future__ import annotations

import logging
from typing import Any
from dataclasses import dataclass

import httpx
import orjson

from realtime_relay.config.messages import MSG_MISSING_API_KEY
from realtime_relay.state.settings import AuthSettings, ModelSettings
from realtime_relay.errors import UpstreamRejected, ConfigurationError, UpstreamUnreachable

from .endpoints import sessions_url, bearer_headers

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class EphemeralCredential:
    value: str
    expires_at: int | float | None = None

    def to_payload(self) -> dict[str, Any]:
        return {"value": self.value, "expires_at": self.expires_at}


@dataclass(frozen=True, slots=True)
class EphemeralSession:
    id: str | None
    credential: EphemeralCredential

    def to_payload(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "client_secret": self.credential.to_payload(),
            "expires_at": self.credential.expires_at,
        }


def _expiry(raw: Any) -> int | float | None:
    if isinstance(raw, bool) or not isinstance(raw, int | float):
        return None
    return raw


def parse_session_payload(data: Any) -> EphemeralSession:
    """Accept both the `/sessions` shape (nested client_secret) and the top-level `value` shape."""
    if not isinstance(data, dict):
        raise UpstreamUnreachable("session response is not a JSON object")

    session_id = data.get("id")
    if not isinstance(session_id, str):
        session_id = None

    secret = data.get("client_secret")
    if isinstance(secret, dict) and isinstance(secret.get("value"), str) and secret["value"]:
        credential = EphemeralCredential(value=secret["value"], expires_at=_expiry(secret.get("expires_at")))
    elif isinstance(data.get("value"), str) and data["value"]:
        credential = EphemeralCredential(value=data["value"], expires_at=_expiry(data.get("expires_at")))
    else:
        raise UpstreamUnreachable("session response is missing a client secret")

    return EphemeralSession(id=session_id, credential=credential)


class SessionCredentialIssuer:
    """Exchanges the server-held API key for a short-lived client credential."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        *,
        auth: AuthSettings,
        model: ModelSettings,
        base_url: str,
    ) -> None:
        self._client = client
        self._auth = auth
        self._model = model
        self._url = sessions_url(base_url)

    async def create_ephemeral_session(self) -> EphemeralSession:
        if not self._auth.configured:
            raise ConfigurationError(MSG_MISSING_API_KEY)

        body = {"model": self._model.model, "voice": self._model.voice}
        try:
            response = await self._client.post(
                self._url,
                content=orjson.dumps(body),
                headers={**bearer_headers(self._auth.api_key), "Content-Type": "application/json"},
            )
        except httpx.HTTPError as exc:
            raise UpstreamUnreachable(f"session request failed: {type(exc).__name__}") from exc

        if not response.is_success:
            raise UpstreamRejected(status_code=response.status_code, details=response.text)

        try:
            data = orjson.loads(response.content)
        except orjson.JSONDecodeError as exc:
            raise UpstreamUnreachable("session response is not valid JSON") from exc

        session = parse_session_payload(data)
        logger.info("ephemeral session issued id=%s expires_at=%s", session.id, session.credential.expires_at)
        return session


__all__ = [
    "EphemeralCredential",
    "EphemeralSession",
    "SessionCredentialIssuer",
    "parse_session_payload",
]
