"""Centralized exception classes for the chat client.

Organization:
    - base.py: ChatClientError root class
    - transport.py: connection-level failures
    - protocol.py: malformed server frames
    - classify.py: exception-to-close-reason mapping

Both TransportError and ProtocolViolation end the current connection the
same way; the distinction only matters for diagnostics.
"""

from .base import ChatClientError
from .classify import classify_close
from .protocol import ProtocolViolation
from .transport import TransportError

__all__ = [
    "ChatClientError",
    "ProtocolViolation",
    "TransportError",
    "classify_close",
]
