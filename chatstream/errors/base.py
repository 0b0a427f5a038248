"""Base error class shared by the chat client."""

from __future__ import annotations


class ChatClientError(Exception):
    """Base class for all chat client errors."""


__all__ = ["ChatClientError"]
