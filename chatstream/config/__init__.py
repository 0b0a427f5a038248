"""Aggregator of configuration modules.

This module re-exports the config API from smaller modules:
- websocket: server endpoint, model name and reconnect policy
- identity: where and how the session identity is stored
- logging: log level and format
"""

from .websocket import (
    CHAT_MODEL,
    CHAT_SERVER_URL,
    CHAT_USER_ID_PARAM,
    CHAT_RECONNECT_DELAY_S,
    WS_CLOSE_CLIENT_REQUEST_CODE,
)
from .identity import (
    CHAT_IDENTITY_KEY,
    CHAT_IDENTITY_PATH,
    CHAT_IDENTITY_PREFIX,
    CHAT_IDENTITY_SUFFIX_LEN,
)
from .logging import CHAT_LOG_LEVEL, CHAT_LOG_FORMAT, CHAT_LOG_DATEFMT

__all__ = [
    # websocket
    "CHAT_MODEL",
    "CHAT_SERVER_URL",
    "CHAT_USER_ID_PARAM",
    "CHAT_RECONNECT_DELAY_S",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
    # identity
    "CHAT_IDENTITY_KEY",
    "CHAT_IDENTITY_PATH",
    "CHAT_IDENTITY_PREFIX",
    "CHAT_IDENTITY_SUFFIX_LEN",
    # logging
    "CHAT_LOG_LEVEL",
    "CHAT_LOG_FORMAT",
    "CHAT_LOG_DATEFMT",
]
