"""Fold streamed server frames into the message log.

The assembler owns the stream cursor: the index of the assistant message
currently receiving tokens, or None. `cursor == i` holds exactly when
`log[i].is_partial`. Frames are folded strictly in arrival order and there
is no buffering beyond the log itself.

Per frame:
    1. Drop the typing indicator if one is showing.
    2. done=True: append any trailing text, finalize the partial message,
       reset the cursor.
    3. done=False: empty text changes nothing; otherwise start a new partial
       message or grow the current one.

Frames tagged with a connection other than the bound one are ignored.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..messages import Frame
from ..state.log import MessageLog

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FoldResult:
    """Outcome of folding one frame.

    Attributes:
        ignored: The frame came from a stale connection and was dropped.
        completed: The frame ended the response (done=True).
        finalized_index: Index of the message finalized by this frame, if any.
    """

    ignored: bool = False
    completed: bool = False
    finalized_index: int | None = None


class StreamAssembler:
    def __init__(self, log: MessageLog) -> None:
        self.log = log
        self._cursor: int | None = None
        self._connection_id: str | None = None

    @property
    def cursor(self) -> int | None:
        return self._cursor

    @property
    def connection_id(self) -> str | None:
        return self._connection_id

    def bind(self, connection_id: str | None) -> None:
        """Accept frames only from `connection_id` from now on."""
        self._connection_id = connection_id

    def fold(self, frame: Frame) -> FoldResult:
        if frame.connection_id is not None and frame.connection_id != self._connection_id:
            logger.debug(
                "Ignoring frame from stale connection %s (active=%s)",
                frame.connection_id,
                self._connection_id,
            )
            return FoldResult(ignored=True)

        self.remove_typing_indicator()

        if frame.done:
            if frame.text:
                self._grow(frame.text)
            finalized = self.abandon()
            return FoldResult(completed=True, finalized_index=finalized)

        if frame.text:
            self._grow(frame.text)
        return FoldResult()

    def remove_typing_indicator(self) -> None:
        removed = self.log.remove_typing_indicator()
        if removed is not None and self._cursor is not None and self._cursor > removed:
            self._cursor -= 1

    def abandon(self) -> int | None:
        """Finalize the partial message as-is and reset the cursor."""
        index = self._cursor
        if index is None:
            return None
        self.log.finalize(index)
        self._cursor = None
        return index

    def _grow(self, text: str) -> None:
        if self._cursor is None:
            self._cursor = self.log.append_assistant(text, partial=True)
        else:
            self.log.append_text(self._cursor, text)


__all__ = ["FoldResult", "StreamAssembler"]
