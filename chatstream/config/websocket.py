"""WebSocket client configuration values.

Connection:
    CHAT_SERVER_URL: Endpoint of the model server. The session identity is
        appended as a query parameter when the connection is opened.

    CHAT_USER_ID_PARAM: Name of the query parameter carrying the identity.

Reconnection:
    CHAT_RECONNECT_DELAY_S: Fixed delay before reopening a closed connection.
        The delay does not grow between attempts.

Request:
    CHAT_MODEL: Model name sent with every prompt.
"""

from __future__ import annotations

import os

# ============================================================================
# Connection
# ============================================================================

CHAT_SERVER_URL = os.getenv("CHAT_SERVER_URL", "ws://localhost:3000")
CHAT_USER_ID_PARAM = os.getenv("CHAT_USER_ID_PARAM", "userId")

# ============================================================================
# Reconnection
# ============================================================================

CHAT_RECONNECT_DELAY_S = float(os.getenv("CHAT_RECONNECT_DELAY_S", "10"))

# ============================================================================
# Request
# ============================================================================

CHAT_MODEL = os.getenv("CHAT_MODEL", "gemma:2b")

# Normal closure code used when the client stops a connection itself
WS_CLOSE_CLIENT_REQUEST_CODE = 1000

__all__ = [
    "CHAT_SERVER_URL",
    "CHAT_USER_ID_PARAM",
    "CHAT_RECONNECT_DELAY_S",
    "CHAT_MODEL",
    "WS_CLOSE_CLIENT_REQUEST_CODE",
]
