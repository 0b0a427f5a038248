"""Malformed server frames."""

from __future__ import annotations

from .base import ChatClientError


class ProtocolViolation(ChatClientError):
    """Raised when a server frame does not parse to `{response, done}`."""

    def __init__(self, message: str, *, raw: str | bytes | None = None):
        super().__init__(message)
        self.raw = raw


__all__ = ["ProtocolViolation"]
