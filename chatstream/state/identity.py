"""Stable session identity backed by a small key-value store.

The identity is advisory: it lets the server correlate reconnects from the
same client, nothing more. Any storage failure is logged and the provider
falls back to a fresh token for that call.
"""

from __future__ import annotations

import json
import uuid
import logging
from pathlib import Path
from typing import Protocol

from ..config.identity import (
    CHAT_IDENTITY_KEY,
    CHAT_IDENTITY_PATH,
    CHAT_IDENTITY_PREFIX,
    CHAT_IDENTITY_SUFFIX_LEN,
)

logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...


class MemoryStore:
    """Process-local store; identity lasts as long as the object."""

    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class FileStore:
    """JSON object on disk, rewritten on every set()."""

    def __init__(self, path: str | Path | None = None) -> None:
        self.path = Path(path) if path is not None else CHAT_IDENTITY_PATH

    def get(self, key: str) -> str | None:
        value = self._load().get(key)
        return value if isinstance(value, str) else None

    def set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def _load(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        data = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(data, dict):
            raise ValueError(f"identity file {self.path} does not hold a JSON object")
        return data


def generate_session_id() -> str:
    """Return a new `user-xxxxxxxxx` token."""
    return f"{CHAT_IDENTITY_PREFIX}{uuid.uuid4().hex[:CHAT_IDENTITY_SUFFIX_LEN]}"


class IdentityProvider:
    """Return the stored session identity, creating it on first use."""

    def __init__(self, store: KeyValueStore | None = None, key: str = CHAT_IDENTITY_KEY) -> None:
        self.store = store if store is not None else FileStore()
        self.key = key

    def get_or_create_id(self) -> str:
        try:
            existing = self.store.get(self.key)
        except (OSError, ValueError) as exc:
            logger.warning("Identity store unreadable (%s); using a throwaway id", exc)
            return generate_session_id()
        if existing:
            return existing

        session_id = generate_session_id()
        try:
            self.store.set(self.key, session_id)
        except (OSError, ValueError) as exc:
            logger.warning("Identity store unwritable (%s); id will not persist", exc)
            return session_id
        logger.info("Created session identity %s", session_id)
        return session_id


__all__ = [
    "FileStore",
    "IdentityProvider",
    "KeyValueStore",
    "MemoryStore",
    "generate_session_id",
]
