"""FastAPI server for the realtime relay."""

from __future__ import annotations

import logging
from typing import Any
from contextlib import asynccontextmanager
from collections.abc import Callable, Awaitable

from fastapi import FastAPI, Request, WebSocket
from fastapi.responses import ORJSONResponse

from realtime_relay.state import RuntimeDeps
from realtime_relay.runtime.logging import configure_logging
from realtime_relay.handlers.ephemeral import issue_ephemeral_token
from realtime_relay.runtime.dependencies import build_runtime_deps
from realtime_relay.handlers.websocket.relay import handle_relay_connection
from realtime_relay.config.websocket import WS_ENDPOINT_PATH, EPHEMERAL_TOKEN_PATH

logger = logging.getLogger(__name__)

configure_logging()

DepsFactory = Callable[[], Awaitable[RuntimeDeps]]


def _runtime_deps(app: FastAPI) -> RuntimeDeps:
    runtime_deps = getattr(app.state, "runtime_deps", None)
    if runtime_deps is None:
        raise RuntimeError("Runtime dependencies are not initialized")
    return runtime_deps


def create_app(deps_factory: DepsFactory = build_runtime_deps) -> FastAPI:
    @asynccontextmanager
    async def _lifespan(app: FastAPI):
        app.state.runtime_deps = await deps_factory()
        logger.info("runtime: ready")
        try:
            yield
        finally:
            deps = getattr(app.state, "runtime_deps", None)
            if deps is not None:
                await deps.shutdown()

    app = FastAPI(default_response_class=ORJSONResponse, lifespan=_lifespan)

    def _health() -> dict[str, Any]:
        deps = _runtime_deps(app)
        return {
            "status": "ok",
            "api_key_configured": deps.settings.auth.configured,
            "active_relays": deps.relays.get_active_count(),
        }

    @app.get("/")
    async def root() -> dict[str, Any]:
        return _health()

    @app.get("/health")
    async def health() -> dict[str, Any]:
        return _health()

    @app.post(EPHEMERAL_TOKEN_PATH)
    async def ephemeral_token(request: Request) -> ORJSONResponse:
        return await issue_ephemeral_token(_runtime_deps(request.app))

    @app.websocket(WS_ENDPOINT_PATH)
    async def websocket_endpoint(websocket: WebSocket) -> None:
        await handle_relay_connection(websocket, _runtime_deps(websocket.app))

    return app


app = create_app()

__all__ = ["app", "create_app"]
