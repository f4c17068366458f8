"""Command line entry point: serve the relay with uvicorn."""

from __future__ import annotations

import click
import uvicorn

from realtime_relay.config.logging import LOG_LEVEL
from realtime_relay.runtime.settings_loader import load_settings


@click.command()
@click.option("--host", default=None, help="Bind host (default: from HOST or 0.0.0.0).")
@click.option("--port", default=None, type=int, help="Bind port (default: from PORT or 3000).")
@click.option("--reload", is_flag=True, default=False, help="Enable auto-reload for development.")
def main(host: str | None, port: int | None, reload: bool) -> None:
    """Start the realtime relay and ephemeral-token server."""
    settings = load_settings()
    uvicorn.run(
        "realtime_relay.server:app",
        host=host or settings.server.host,
        port=port or settings.server.port,
        reload=reload,
        log_level=LOG_LEVEL.lower(),
    )


__all__ = ["main"]


if __name__ == "__main__":
    main()
