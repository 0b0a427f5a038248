"""Connection state for the single live transport.

ConnectionState:
    DISCONNECTED -> CONNECTING -> OPEN -> CLOSED, and CLOSED -> CONNECTING
    again when a reconnect fires.

CloseReason:
    Why a connection reached CLOSED. ERROR and COMPLETE are implicit
    closures that auto-reconnect; USER is an explicit stop that leaves the
    reconnect decision to the caller.

Connection:
    Handle returned by ConnectionManager.connect(). It owns the socket and
    the receive task for exactly one transport connection; once the manager
    moves on to a newer handle, events tagged with this one are stale.
"""

from __future__ import annotations

import asyncio
import enum
from typing import Any
from dataclasses import field, dataclass


class ConnectionState(str, enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class CloseReason(str, enum.Enum):
    ERROR = "error"
    COMPLETE = "complete"
    USER = "user"

    @property
    def auto_reconnect(self) -> bool:
        return self is not CloseReason.USER


@dataclass
class Connection:
    """One transport connection and the resources tied to it.

    Attributes:
        connection_id: Short identifier used to tag frames and log lines.
        url: Full target URL including the session identity parameter.
        state: Current lifecycle state of this particular connection.
        close_reason: Set once the connection reaches CLOSED.
        close_detail: Diagnostic text for the closure (error message, close code).
        ws: The open websocket, None until the handshake completes.
        task: Background task that opens the socket and pumps frames.
    """

    connection_id: str
    url: str
    state: ConnectionState = ConnectionState.CONNECTING
    close_reason: CloseReason | None = None
    close_detail: str | None = None
    ws: Any = None
    task: asyncio.Task | None = field(default=None, repr=False)

    @property
    def is_open(self) -> bool:
        return self.state is ConnectionState.OPEN

    @property
    def is_live(self) -> bool:
        """Return True while connecting or open."""
        return self.state in (ConnectionState.CONNECTING, ConnectionState.OPEN)

    def mark_closed(self, reason: CloseReason, detail: str | None = None) -> None:
        self.state = ConnectionState.CLOSED
        self.close_reason = reason
        self.close_detail = detail


__all__ = ["CloseReason", "Connection", "ConnectionState"]
