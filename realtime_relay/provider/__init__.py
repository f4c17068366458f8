"""Provider-facing HTTP and WebSocket clients."""

from .sessions import EphemeralSession, EphemeralCredential, SessionCredentialIssuer

__all__ = ["EphemeralCredential", "EphemeralSession", "SessionCredentialIssuer"]
