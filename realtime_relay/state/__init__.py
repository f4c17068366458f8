from .runtime import RuntimeDeps
from .settings import AppSettings
from .transport import Message, ResponseEntry, TransportSession

__all__ = ["AppSettings", "Message", "ResponseEntry", "RuntimeDeps", "TransportSession"]
