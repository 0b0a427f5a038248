"""Lifecycle of the single streaming WebSocket connection.

The manager owns at most one live transport at a time. Each call to
connect() creates a fresh Connection handle, tears down the previous one,
and cancels any pending reconnect timer. A background task per connection
opens the socket and pumps frames; everything it observes goes through
_dispatch(), the only place that changes connection state.

    DISCONNECTED --connect()--> CONNECTING --open--> OPEN
    OPEN --error | complete--> CLOSED(ERROR | COMPLETE) --delay--> CONNECTING
    OPEN --close()--> CLOSED(USER)

Implicit closures (errors, server completion, failed handshakes) schedule a
reconnect after a fixed delay. close() never does; the caller decides.

Usage:
    manager = ConnectionManager(endpoint, IdentityProvider())
    manager.set_listener(controller)
    connection = manager.connect()
    ...
    await manager.send(connection, ChatRequest(model, prompt))
    ...
    await manager.shutdown()
"""

from __future__ import annotations

import enum
import asyncio
import logging
import contextlib
import itertools
from typing import Any, Protocol
from collections.abc import Awaitable, Callable, Coroutine

import websockets
from websockets.exceptions import ConnectionClosed, WebSocketException

from ..config.websocket import CHAT_RECONNECT_DELAY_S, WS_CLOSE_CLIENT_REQUEST_CODE
from ..errors import ProtocolViolation, TransportError, classify_close
from ..helpers.ws import with_user_id
from ..logging import log_context
from ..messages import ChatRequest, Frame, encode_request, parse_frame
from ..state.connection import CloseReason, Connection, ConnectionState

logger = logging.getLogger(__name__)

Connector = Callable[[str], Awaitable[Any]]

_CONNECT_ERRORS: tuple[type[BaseException], ...] = (
    OSError,
    asyncio.TimeoutError,
    WebSocketException,
)
_RECV_ERRORS: tuple[type[BaseException], ...] = (
    ConnectionClosed,
    OSError,
)


class IdentitySource(Protocol):
    def get_or_create_id(self) -> str: ...


class ConnectionListener(Protocol):
    def on_open(self, connection: Connection) -> None: ...

    def on_frame(self, connection: Connection, frame: Frame) -> None: ...

    def on_closed(self, connection: Connection, reason: CloseReason) -> None: ...


class ConnectionEvent(str, enum.Enum):
    OPEN = "open"
    FRAME = "frame"
    ERROR = "error"
    COMPLETE = "complete"


async def open_websocket(url: str) -> Any:
    """Default connector: open a websockets client connection."""
    return await websockets.connect(url, max_queue=None)


class ConnectionManager:
    """Owns one logical streaming connection and its reconnect timer."""

    def __init__(
        self,
        endpoint: str,
        identity: IdentitySource,
        *,
        reconnect_delay_s: float | None = None,
        connector: Connector | None = None,
        listener: ConnectionListener | None = None,
    ):
        """Initialize the manager.

        Args:
            endpoint: Server URL without the identity parameter.
            identity: Provider of the session identity attached to every connection.
            reconnect_delay_s: Fixed delay before reopening after an implicit close.
            connector: Coroutine factory that opens a socket for a URL.
            listener: Receiver of open/frame/closed notifications.
        """
        self.endpoint = endpoint
        self.identity = identity
        self.reconnect_delay_s = float(
            CHAT_RECONNECT_DELAY_S if reconnect_delay_s is None else reconnect_delay_s
        )
        self._connector = connector or open_websocket
        self._listener = listener
        self._ids = itertools.count(1)
        self._current: Connection | None = None
        self._reconnect_task: asyncio.Task | None = None
        self._background: set[asyncio.Task] = set()
        self._stopped = False

    # ------------------------------------------------------------------
    # Read access
    # ------------------------------------------------------------------

    @property
    def current(self) -> Connection | None:
        return self._current

    @property
    def state(self) -> ConnectionState:
        if self._current is None:
            return ConnectionState.DISCONNECTED
        return self._current.state

    @property
    def close_reason(self) -> CloseReason | None:
        if self._current is None:
            return None
        return self._current.close_reason

    @property
    def reconnect_pending(self) -> bool:
        return self._reconnect_task is not None and not self._reconnect_task.done()

    def set_listener(self, listener: ConnectionListener) -> None:
        self._listener = listener

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def connect(self) -> Connection:
        """Start a new connection and return its handle immediately.

        Failures are reported later as an ERROR event on the handle; this
        method does not raise for network problems.
        """
        self._stopped = False
        self._cancel_reconnect()

        previous = self._current
        connection = Connection(connection_id=f"c{next(self._ids)}", url=self._target_url())
        self._current = connection
        if previous is not None and previous.is_live:
            previous.mark_closed(CloseReason.USER, "superseded by a new connection")
            self._spawn(self._teardown(previous))

        logger.info("Connecting %s to %s", connection.connection_id, connection.url)
        connection.task = asyncio.get_running_loop().create_task(
            self._pump(connection),
            name=f"chatstream-pump-{connection.connection_id}",
        )
        return connection

    async def send(self, connection: Connection, request: ChatRequest) -> bool:
        """Send a request on `connection`; return False if it is not open."""
        if connection is not self._current or not connection.is_open:
            logger.warning(
                "Dropping request; connection %s is %s",
                connection.connection_id,
                connection.state.value,
            )
            return False
        try:
            await connection.ws.send(encode_request(request))
        except _RECV_ERRORS as exc:
            self._dispatch(connection, ConnectionEvent.ERROR, error=TransportError.from_exception(exc))
            await self._teardown(connection)
            return False
        logger.debug("Sent prompt on %s (model=%s chars=%d)", connection.connection_id, request.model, len(request.prompt))
        return True

    async def close(self) -> bool:
        """Stop the current connection without scheduling a reconnect.

        The handle is invalidated before any awaiting, so frames that are
        still in flight are dropped. Returns False if nothing was live.
        """
        connection = self._current
        if connection is None or not connection.is_live:
            return False
        connection.mark_closed(CloseReason.USER, "closed by client")
        logger.info("Closing %s at client request", connection.connection_id)
        await self._teardown(connection)
        return True

    def schedule_reconnect(self, delay_s: float | None = None) -> None:
        """Replace any pending reconnect timer with a single new one."""
        if self._stopped:
            return
        self._cancel_reconnect()
        delay = self.reconnect_delay_s if delay_s is None else float(delay_s)
        logger.info("Reconnecting in %.1fs", delay)
        self._reconnect_task = asyncio.get_running_loop().create_task(
            self._reconnect_after(delay),
            name="chatstream-reconnect",
        )

    async def shutdown(self) -> None:
        """Cancel the reconnect timer and close everything for process exit."""
        self._stopped = True
        self._cancel_reconnect()
        await self.close()
        if self._background:
            await asyncio.gather(*self._background, return_exceptions=True)

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------

    def _dispatch(
        self,
        connection: Connection,
        event: ConnectionEvent,
        *,
        frame: Frame | None = None,
        error: BaseException | None = None,
    ) -> None:
        if connection is not self._current:
            logger.debug("Dropping %s event from stale connection %s", event.value, connection.connection_id)
            return

        if event is ConnectionEvent.OPEN:
            if connection.state is not ConnectionState.CONNECTING:
                return
            connection.state = ConnectionState.OPEN
            logger.info("Connection %s open", connection.connection_id)
            if self._listener is not None:
                self._listener.on_open(connection)
            return

        if event is ConnectionEvent.FRAME:
            if not connection.is_open or frame is None:
                logger.debug("Dropping frame on %s connection %s", connection.state.value, connection.connection_id)
                return
            if self._listener is not None:
                self._listener.on_frame(connection, frame)
            return

        if not connection.is_live:
            return
        reason = CloseReason.ERROR if event is ConnectionEvent.ERROR else CloseReason.COMPLETE
        connection.mark_closed(reason, str(error) if error is not None else None)
        if reason is CloseReason.ERROR:
            logger.warning("Connection %s failed: %s", connection.connection_id, connection.close_detail)
        else:
            logger.info("Connection %s closed by server", connection.connection_id)
        try:
            if self._listener is not None:
                self._listener.on_closed(connection, reason)
        finally:
            if reason.auto_reconnect:
                self.schedule_reconnect()

    # ------------------------------------------------------------------
    # Background tasks
    # ------------------------------------------------------------------

    async def _pump(self, connection: Connection) -> None:
        """Open the socket for `connection` and feed its frames to _dispatch."""
        with log_context(connection_id=connection.connection_id):
            try:
                ws = await self._connector(connection.url)
            except _CONNECT_ERRORS as exc:
                self._dispatch(connection, ConnectionEvent.ERROR, error=TransportError.from_exception(exc))
                return

            if connection.state is not ConnectionState.CONNECTING:
                # closed or superseded during the handshake
                await _close_socket(ws)
                return
            connection.ws = ws

            failure: BaseException | None = None
            try:
                self._dispatch(connection, ConnectionEvent.OPEN)
                async for raw in ws:
                    frame = parse_frame(raw, connection_id=connection.connection_id)
                    self._dispatch(connection, ConnectionEvent.FRAME, frame=frame)
            except ProtocolViolation as exc:
                failure = exc
                await _close_socket(ws)
            except _RECV_ERRORS as exc:
                failure = exc
            except Exception as exc:
                logger.exception("Receive loop for %s failed", connection.connection_id)
                failure = exc
                await _close_socket(ws)

            if classify_close(failure) is CloseReason.COMPLETE:
                self._dispatch(connection, ConnectionEvent.COMPLETE)
            elif isinstance(failure, ProtocolViolation):
                self._dispatch(connection, ConnectionEvent.ERROR, error=failure)
            else:
                self._dispatch(connection, ConnectionEvent.ERROR, error=TransportError.from_exception(failure))

    async def _reconnect_after(self, delay_s: float) -> None:
        await asyncio.sleep(delay_s)
        self._reconnect_task = None
        self.connect()

    async def _teardown(self, connection: Connection) -> None:
        task = connection.task
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task
        if connection.ws is not None:
            await _close_socket(connection.ws)

    def _cancel_reconnect(self) -> None:
        task = self._reconnect_task
        self._reconnect_task = None
        if task is not None and not task.done() and task is not asyncio.current_task():
            task.cancel()

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._background.add(task)
        task.add_done_callback(self._background.discard)

    def _target_url(self) -> str:
        user_id = self.identity.get_or_create_id()
        try:
            return with_user_id(self.endpoint, user_id)
        except ValueError as exc:
            # the connector will fail on it and report through _dispatch
            logger.warning("%s", exc)
            return self.endpoint


async def _close_socket(ws: Any) -> None:
    """Best-effort normal closure of a websocket."""
    with contextlib.suppress(Exception):
        await ws.close(code=WS_CLOSE_CLIENT_REQUEST_CODE)


__all__ = [
    "ConnectionEvent",
    "ConnectionListener",
    "ConnectionManager",
    "Connector",
    "IdentitySource",
    "open_websocket",
]
