"""Map transport exceptions to connection close reasons."""

from __future__ import annotations

from websockets.exceptions import ConnectionClosedOK

from ..state.connection import CloseReason

_CLEAN_CLOSE_ERRORS: tuple[type[BaseException], ...] = (
    ConnectionClosedOK,
    EOFError,
)


def classify_close(exc: BaseException | None) -> CloseReason:
    """Return COMPLETE for a clean end of stream, ERROR for anything else.

    `None` means the receive loop ran out of frames without raising, which
    the websockets client only does after a normal closing handshake.
    """

    if exc is None:
        return CloseReason.COMPLETE
    if isinstance(exc, _CLEAN_CLOSE_ERRORS):
        return CloseReason.COMPLETE
    return CloseReason.ERROR


__all__ = ["classify_close"]
