"""Session and connection ids on every log line.

`log_context()` binds the ids for the duration of a block (the CLI binds the
session identity, each connection pump binds its connection id) and the
record factory installed by `configure_logging()` copies them onto each
LogRecord as `session_id` and `connection_id`.
"""

from __future__ import annotations

import logging
import contextlib
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import Token, ContextVar

_SESSION_ID: ContextVar[str] = ContextVar("session_id", default="-")
_CONNECTION_ID: ContextVar[str] = ContextVar("connection_id", default="-")


@contextmanager
def log_context(
    *,
    session_id: str | None = None,
    connection_id: str | None = None,
) -> Iterator[None]:
    """Bind the given ids for log records emitted within the block.

    Ids left as None keep whatever an enclosing block bound.
    """
    bound: list[tuple[ContextVar[str], Token[str]]] = []
    for var, value in ((_SESSION_ID, session_id), (_CONNECTION_ID, connection_id)):
        if value is not None:
            bound.append((var, var.set(value)))
    try:
        yield
    finally:
        for var, token in reversed(bound):
            var.reset(token)


def install_log_context() -> None:
    """Install a LogRecord factory that injects context fields."""
    if getattr(install_log_context, "_installed", False):
        return

    old_factory = logging.getLogRecordFactory()

    def record_factory(*args, **kwargs):
        record = old_factory(*args, **kwargs)
        record.session_id = _SESSION_ID.get()
        record.connection_id = _CONNECTION_ID.get()
        return record

    logging.setLogRecordFactory(record_factory)
    install_log_context._installed = True  # type: ignore[attr-defined]


def configure_logging(level: str | None = None) -> None:
    """Initialize root logging configuration once per process."""
    from chatstream.config.logging import CHAT_LOG_LEVEL, CHAT_LOG_FORMAT, CHAT_LOG_DATEFMT  # noqa: PLC0415

    resolved_level = (level or CHAT_LOG_LEVEL).upper()
    install_log_context()
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(level=resolved_level, format=CHAT_LOG_FORMAT, datefmt=CHAT_LOG_DATEFMT)
    else:
        root_logger.setLevel(resolved_level)
        for handler in root_logger.handlers:
            with contextlib.suppress(Exception):
                handler.setLevel(resolved_level)
                handler.setFormatter(logging.Formatter(CHAT_LOG_FORMAT, datefmt=CHAT_LOG_DATEFMT))

    logging.getLogger("chatstream").setLevel(resolved_level)
    # websockets logs every frame at DEBUG
    if resolved_level != "DEBUG":
        logging.getLogger("websockets").setLevel(logging.INFO)


__all__ = [
    "install_log_context",
    "log_context",
    "configure_logging",
]
