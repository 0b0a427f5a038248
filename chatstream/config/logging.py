"""Client logging configuration values."""

import os


CHAT_LOG_LEVEL = (os.getenv("CHAT_LOG_LEVEL", "INFO") or "INFO").upper()
CHAT_LOG_FORMAT = os.getenv(
    "CHAT_LOG_FORMAT",
    "%(levelname)s %(asctime)s [%(name)s:%(lineno)d] session=%(session_id)s conn=%(connection_id)s %(message)s",
)
CHAT_LOG_DATEFMT = os.getenv("CHAT_LOG_DATEFMT", "%H:%M:%S")


__all__ = [
    "CHAT_LOG_LEVEL",
    "CHAT_LOG_FORMAT",
    "CHAT_LOG_DATEFMT",
]
