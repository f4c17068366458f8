"""Runtime settings (dataclasses only)."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class AuthSettings:
    api_key: str

    @property
    def configured(self) -> bool:
        return bool(self.api_key)


@dataclass(frozen=True, slots=True)
class ModelSettings:
    model: str
    voice: str


@dataclass(frozen=True, slots=True)
class UpstreamSettings:
    base_url: str
    handshake_timeout_s: float
    request_timeout_s: float


@dataclass(frozen=True, slots=True)
class ServerSettings:
    host: str
    port: int


@dataclass(frozen=True, slots=True)
class AppSettings:
    auth: AuthSettings
    model: ModelSettings
    upstream: UpstreamSettings
    server: ServerSettings


__all__ = [
    "AppSettings",
    "AuthSettings",
    "ModelSettings",
    "ServerSettings",
    "UpstreamSettings",
]
