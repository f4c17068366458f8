"""Typed runtime state objects for dependency wiring."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

logger = logging.getLogger(__name__)

if TYPE_CHECKING:
    import httpx

    from realtime_relay.state.settings import AppSettings
    from realtime_relay.provider.sessions import SessionCredentialIssuer
    from realtime_relay.handlers.connections import RelayRegistry
    from realtime_relay.provider.websocket import UpstreamConnector


@dataclass(slots=True)
class RuntimeDeps:
    settings: AppSettings
    issuer: SessionCredentialIssuer
    relays: RelayRegistry
    connector: UpstreamConnector
    _http_client: httpx.AsyncClient

    async def shutdown(self) -> None:
        try:
            await self._http_client.aclose()
        except Exception:
            logger.exception("runtime shutdown failed")


__all__ = ["RuntimeDeps"]
