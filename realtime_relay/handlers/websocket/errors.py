"""Send helpers for frames the relay injects into the client stream."""

from __future__ import annotations

import logging
from typing import Any

import orjson
from fastapi import WebSocket, WebSocketDisconnect

from realtime_relay.config.websocket import (
    WS_KEY_CODE,
    WS_KEY_TYPE,
    WS_KEY_ERROR,
    WS_KEY_STATUS,
    WS_TYPE_ERROR,
    WS_TYPE_SERVER_STATUS,
)

logger = logging.getLogger(__name__)


def build_error_frame(message: str) -> dict[str, Any]:
    return {WS_KEY_TYPE: WS_TYPE_ERROR, WS_KEY_ERROR: {"message": message}}


def build_status_frame(status: str, *, code: int | None = None) -> dict[str, Any]:
    frame: dict[str, Any] = {WS_KEY_TYPE: WS_TYPE_SERVER_STATUS, WS_KEY_STATUS: status}
    if code is not None:
        frame[WS_KEY_CODE] = code
    return frame


async def safe_send_text(ws: WebSocket, text: str) -> bool:
    try:
        await ws.send_text(text)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def safe_send_bytes(ws: WebSocket, data: bytes) -> bool:
    try:
        await ws.send_bytes(data)
    except WebSocketDisconnect:
        return False
    except Exception:
        logger.debug("WebSocket send failed", exc_info=True)
        return False
    return True


async def send_error_frame(ws: WebSocket, message: str) -> bool:
    return await safe_send_text(ws, orjson.dumps(build_error_frame(message)).decode("utf-8"))


async def send_status_frame(ws: WebSocket, status: str, *, code: int | None = None) -> bool:
    return await safe_send_text(ws, orjson.dumps(build_status_frame(status, code=code)).decode("utf-8"))


__all__ = [
    "build_error_frame",
    "build_status_frame",
    "safe_send_bytes",
    "safe_send_text",
    "send_error_frame",
    "send_status_frame",
]
