from __future__ import annotations

from typing import Any

import pytest

from realtime_relay.provider import websocket as provider_websocket


@pytest.mark.asyncio
async def test_connect_upstream_leaves_timeout_to_relay(monkeypatch: pytest.MonkeyPatch) -> None:
    calls: list[tuple[str, dict[str, Any]]] = []
    connection = object()

    async def _fake_connect(url: str, **kwargs: Any) -> object:
        calls.append((url, kwargs))
        return connection

    monkeypatch.setattr(provider_websocket.websockets, "connect", _fake_connect)

    result = await provider_websocket.connect_upstream("wss://up.test/v1/realtime", {"Authorization": "Bearer k"})

    assert result is connection
    assert calls == [
        (
            "wss://up.test/v1/realtime",
            {"additional_headers": {"Authorization": "Bearer k"}, "open_timeout": None, "max_size": None},
        )
    ]
