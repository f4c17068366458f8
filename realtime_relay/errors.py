"""Shared error types for the realtime relay."""

from __future__ import annotations

from dataclasses import dataclass


class RelayError(Exception):
    """Base class for relay failures handled at a boundary."""


# Not frozen: contextlib assigns __traceback__ when re-raising through a context manager.
@dataclass(eq=False)
class ConfigurationError(RelayError):
    """Raised before any I/O when required server configuration is missing."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class UpstreamRejected(RelayError):
    """Raised when the provider answers with a non-success HTTP status."""

    status_code: int
    details: str

    def __str__(self) -> str:
        return f"upstream rejected with status {self.status_code}: {self.details}"


@dataclass(eq=False)
class UpstreamUnreachable(RelayError):
    """Raised on network failure or a malformed provider response."""

    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(eq=False)
class ProtocolDecodeError(RelayError):
    """Raised when a frame cannot be decoded into a structured event."""

    message: str

    def __str__(self) -> str:
        return self.message


__all__ = [
    "ConfigurationError",
    "ProtocolDecodeError",
    "RelayError",
    "UpstreamRejected",
    "UpstreamUnreachable",
]
