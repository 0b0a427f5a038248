"""Centralized state types for the chat client.

This module re-exports the state definitions from their respective modules,
providing a single import point.
"""

from .log import ChatMessage, MessageLog
from .connection import CloseReason, Connection, ConnectionState
from .identity import FileStore, MemoryStore, KeyValueStore, IdentityProvider, generate_session_id

__all__ = [
    "ChatMessage",
    "CloseReason",
    "Connection",
    "ConnectionState",
    "FileStore",
    "IdentityProvider",
    "KeyValueStore",
    "MemoryStore",
    "MessageLog",
    "generate_session_id",
]
