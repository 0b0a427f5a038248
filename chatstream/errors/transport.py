"""Connection-level failures.

TransportError wraps whatever the socket layer raised (refused connection,
network drop, abnormal close) so the connection manager can record a single
diagnostic string for the closure.
"""

from __future__ import annotations

from .base import ChatClientError


class TransportError(ChatClientError):
    """Raised when the transport fails to open, send, or receive."""

    def __init__(
        self,
        message: str = "transport failure",
        *,
        close_code: int | None = None,
        close_reason: str | None = None,
    ):
        self.close_code = close_code
        self.close_reason = close_reason
        parts = [message]
        if close_code is not None:
            parts.append(f"code={close_code}")
        if close_reason:
            parts.append(f"reason={close_reason}")
        super().__init__(" ".join(parts))

    @classmethod
    def from_exception(cls, exc: BaseException) -> TransportError:
        if isinstance(exc, cls):
            return exc
        rcvd = getattr(exc, "rcvd", None)
        return cls(
            f"{type(exc).__name__}: {exc}" if str(exc) else type(exc).__name__,
            close_code=getattr(rcvd, "code", None),
            close_reason=getattr(rcvd, "reason", None) or None,
        )


__all__ = ["TransportError"]
