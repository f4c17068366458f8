"""Runtime dependency construction (HTTP client, credential issuer, relay registry)."""

from __future__ import annotations

import logging

import httpx

from realtime_relay.state import RuntimeDeps
from realtime_relay.state.settings import AppSettings
from realtime_relay.handlers.connections import RelayRegistry
from realtime_relay.provider.sessions import SessionCredentialIssuer
from realtime_relay.provider.websocket import UpstreamConnector, connect_upstream

from .settings_loader import load_settings

logger = logging.getLogger(__name__)


async def build_runtime_deps(
    settings: AppSettings | None = None,
    *,
    http_transport: httpx.AsyncBaseTransport | None = None,
    connector: UpstreamConnector | None = None,
) -> RuntimeDeps:
    if settings is None:
        settings = load_settings()

    if not settings.auth.configured:
        logger.warning("OPENAI_API_KEY is not set; relay and ephemeral token requests will be refused")

    http_client = httpx.AsyncClient(
        timeout=httpx.Timeout(settings.upstream.request_timeout_s),
        transport=http_transport,
    )
    issuer = SessionCredentialIssuer(
        http_client,
        auth=settings.auth,
        model=settings.model,
        base_url=settings.upstream.base_url,
    )

    return RuntimeDeps(
        settings=settings,
        issuer=issuer,
        relays=RelayRegistry(),
        connector=connector or connect_upstream,
        _http_client=http_client,
    )


__all__ = ["RuntimeDeps", "build_runtime_deps"]
