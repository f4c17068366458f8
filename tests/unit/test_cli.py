from __future__ import annotations

from typing import Any

import pytest
from click.testing import CliRunner

from realtime_relay import cli


@pytest.fixture
def served(monkeypatch: pytest.MonkeyPatch) -> list[dict[str, Any]]:
    calls: list[dict[str, Any]] = []

    def _fake_run(app: str, **kwargs: Any) -> None:
        calls.append({"app": app, **kwargs})

    monkeypatch.setattr(cli.uvicorn, "run", _fake_run)
    monkeypatch.delenv("HOST", raising=False)
    monkeypatch.delenv("PORT", raising=False)
    return calls


def test_defaults_come_from_settings(served: list[dict[str, Any]]) -> None:
    result = CliRunner().invoke(cli.main, [])

    assert result.exit_code == 0, result.output
    assert served == [
        {
            "app": "realtime_relay.server:app",
            "host": "0.0.0.0",
            "port": 3000,
            "reload": False,
            "log_level": served[0]["log_level"],
        }
    ]


def test_options_override_environment(served: list[dict[str, Any]], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "4000")

    result = CliRunner().invoke(cli.main, ["--host", "127.0.0.1", "--port", "5050", "--reload"])

    assert result.exit_code == 0, result.output
    assert served[0]["host"] == "127.0.0.1"
    assert served[0]["port"] == 5050
    assert served[0]["reload"] is True


def test_port_env_is_used_without_option(served: list[dict[str, Any]], monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("PORT", "4000")

    result = CliRunner().invoke(cli.main, [])

    assert result.exit_code == 0, result.output
    assert served[0]["port"] == 4000
