"""Shared helper functions for the chat client."""

from .ws import with_user_id

__all__ = ["with_user_id"]
