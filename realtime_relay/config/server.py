"""HTTP server bind configuration (env names and defaults only)."""

from __future__ import annotations

ENV_HOST = "HOST"
DEFAULT_HOST = "0.0.0.0"

ENV_PORT = "PORT"
DEFAULT_PORT = 3000

__all__ = ["DEFAULT_HOST", "DEFAULT_PORT", "ENV_HOST", "ENV_PORT"]
