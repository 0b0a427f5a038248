"""Connection and session handlers."""

from .session import ChatSessionController, Observer
from .connection import (
    Connector,
    ConnectionEvent,
    IdentitySource,
    ConnectionManager,
    ConnectionListener,
    open_websocket,
)

__all__ = [
    "ChatSessionController",
    "ConnectionEvent",
    "ConnectionListener",
    "ConnectionManager",
    "Connector",
    "IdentitySource",
    "Observer",
    "open_websocket",
]
