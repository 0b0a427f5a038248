"""Session identity storage configuration."""

import os
from pathlib import Path


CHAT_IDENTITY_PATH = Path(
    os.getenv("CHAT_IDENTITY_PATH", str(Path.home() / ".chatstream" / "identity.json"))
).expanduser()
CHAT_IDENTITY_KEY = os.getenv("CHAT_IDENTITY_KEY", "userId")
CHAT_IDENTITY_PREFIX = "user-"
CHAT_IDENTITY_SUFFIX_LEN = 9


__all__ = [
    "CHAT_IDENTITY_PATH",
    "CHAT_IDENTITY_KEY",
    "CHAT_IDENTITY_PREFIX",
    "CHAT_IDENTITY_SUFFIX_LEN",
]
