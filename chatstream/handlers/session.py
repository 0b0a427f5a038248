"""Chat session controller.

Ties the message log, the stream assembler and the connection manager
together. The controller owns the receiving flag: it is set when a prompt
goes out and cleared when the response completes, the connection closes,
or the user cancels. Prompts submitted while it is set are dropped.

A UI binds to the controller through `messages`, `receiving`,
`connection_state` and `subscribe()`; every mutation notifies subscribers.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from ..config.websocket import CHAT_MODEL
from ..messages import ChatRequest, Frame
from ..state.connection import CloseReason, Connection, ConnectionState
from ..state.log import ChatMessage, MessageLog
from ..stream import StreamAssembler
from .connection import ConnectionManager

logger = logging.getLogger(__name__)

Observer = Callable[["ChatSessionController"], None]


class ChatSessionController:
    """Top-level orchestrator for one chat session."""

    def __init__(self, manager: ConnectionManager, *, model: str = CHAT_MODEL) -> None:
        self.manager = manager
        self.model = model
        self.log = MessageLog()
        self.assembler = StreamAssembler(self.log)
        self._receiving = False
        self._observers: list[Observer] = []
        manager.set_listener(self)

    # ------------------------------------------------------------------
    # Read access for the UI layer
    # ------------------------------------------------------------------

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return self.log.messages

    @property
    def receiving(self) -> bool:
        return self._receiving

    @property
    def connection_state(self) -> ConnectionState:
        return self.manager.state

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Call `observer(controller)` after every change; returns an unsubscribe function."""
        self._observers.append(observer)

        def _unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return _unsubscribe

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def start(self) -> Connection:
        return self.manager.connect()

    async def submit(self, prompt: str) -> bool:
        """Send `prompt` unless a response is streaming or the socket is down.

        Returns True when the prompt went out. Rejected prompts leave the log
        untouched and send nothing; a failed send returns False and the
        closure clears the typing indicator and the receiving flag.
        """
        if self._receiving:
            logger.debug("Prompt rejected: still receiving the previous response")
            return False
        text = (prompt or "").strip()
        if not text:
            return False
        connection = self.manager.current
        if connection is None or not connection.is_open:
            logger.info("Prompt rejected: connection is %s", self.manager.state.value)
            return False

        self.log.append_user(text)
        self.log.add_typing_indicator()
        self._receiving = True
        self._notify()
        return await self.manager.send(connection, ChatRequest(model=self.model, prompt=text))

    async def cancel(self) -> bool:
        """Stop the current response and reconnect after the usual delay.

        Safe to call repeatedly; returns False when there was nothing to stop.
        """
        if not await self.manager.close():
            return False
        self._receiving = False
        self.assembler.remove_typing_indicator()
        self.assembler.abandon()
        self.manager.schedule_reconnect()
        self._notify()
        return True

    async def shutdown(self) -> None:
        await self.manager.shutdown()
        self._receiving = False
        self._notify()

    # ------------------------------------------------------------------
    # Connection listener
    # ------------------------------------------------------------------

    def on_open(self, connection: Connection) -> None:
        self.assembler.bind(connection.connection_id)
        self._notify()

    def on_frame(self, connection: Connection, frame: Frame) -> None:
        result = self.assembler.fold(frame)
        if result.ignored:
            return
        if result.completed:
            self._receiving = False
            if result.finalized_index is not None:
                logger.debug("Response complete at index %d", result.finalized_index)
        self._notify()

    def on_closed(self, connection: Connection, reason: CloseReason) -> None:
        # an in-flight generation cannot finish once its transport is gone
        self._receiving = False
        self.assembler.remove_typing_indicator()
        finalized = self.assembler.abandon()
        if finalized is not None:
            logger.info("Kept partial response at index %d after %s close", finalized, reason.value)
        self._notify()

    def _notify(self) -> None:
        for observer in list(self._observers):
            try:
                observer(self)
            except Exception:
                logger.exception("Session observer %r failed", observer)


__all__ = ["ChatSessionController", "Observer"]
