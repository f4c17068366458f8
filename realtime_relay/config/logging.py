"""Logging configuration."""

from __future__ import annotations

import os

LOG_LEVEL: str = (os.getenv("LOG_LEVEL") or "INFO").strip().upper()
LOG_FORMAT: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"

ENV_SHOW_THIRD_PARTY_LOGS = "SHOW_THIRD_PARTY_LOGS"

# Quieted to WARNING unless SHOW_THIRD_PARTY_LOGS is set.
NOISY_LOGGERS: tuple[str, ...] = ("websockets", "httpx", "httpcore", "aioice", "aiortc")

__all__ = ["ENV_SHOW_THIRD_PARTY_LOGS", "LOG_FORMAT", "LOG_LEVEL", "NOISY_LOGGERS"]
