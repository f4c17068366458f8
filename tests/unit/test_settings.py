from __future__ import annotations

import logging

import pytest

from realtime_relay.runtime.logging import configure_logging
from realtime_relay.runtime.settings_loader import load_settings

_ENV = (
    "OPENAI_API_KEY",
    "OPENAI_REALTIME_MODEL",
    "OPENAI_REALTIME_VOICE",
    "OPENAI_REALTIME_BASE_URL",
    "UPSTREAM_HANDSHAKE_TIMEOUT_S",
    "UPSTREAM_REQUEST_TIMEOUT_S",
    "HOST",
    "PORT",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    settings = load_settings()
    assert settings.auth.api_key == ""
    assert not settings.auth.configured
    assert settings.model.model == "gpt-4o-realtime-preview-2024-12-17"
    assert settings.model.voice == "verse"
    assert settings.upstream.base_url == "https://api.openai.com/v1/realtime"
    assert settings.upstream.handshake_timeout_s == 10.0
    assert settings.server.port == 3000


def test_overrides_and_malformed_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("OPENAI_API_KEY", "  sk-live  ")
    monkeypatch.setenv("OPENAI_REALTIME_VOICE", "alloy")
    monkeypatch.setenv("OPENAI_REALTIME_BASE_URL", "http://localhost:9000/realtime/")
    monkeypatch.setenv("UPSTREAM_HANDSHAKE_TIMEOUT_S", "0")
    monkeypatch.setenv("UPSTREAM_REQUEST_TIMEOUT_S", "soon")
    monkeypatch.setenv("PORT", "99999")

    settings = load_settings()

    assert settings.auth.api_key == "sk-live"
    assert settings.model.voice == "alloy"
    assert settings.upstream.base_url == "http://localhost:9000/realtime"
    assert settings.upstream.handshake_timeout_s == 0.0
    assert settings.upstream.request_timeout_s == 30.0
    assert settings.server.port == 3000


def test_configure_logging_quiets_third_party(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("SHOW_THIRD_PARTY_LOGS", raising=False)
    configure_logging()
    assert logging.getLogger("websockets").level == logging.WARNING
    assert logging.getLogger("aiortc").level == logging.WARNING
