"""Incremental terminal renderer for the message log.

Subscribed to a ChatSessionController, it prints only what changed since
the previous notification: new assistant text as it streams, a line break
when a response is finalized, and connection state changes.
"""

from __future__ import annotations

import sys
from typing import TextIO
from dataclasses import field, dataclass

from .helpers.fmt import dim, magenta
from .handlers.session import ChatSessionController
from .state.connection import ConnectionState


@dataclass
class TerminalRenderer:
    out: TextIO = field(default_factory=lambda: sys.stdout)
    show_state: bool = True
    _printed: list[int] = field(default_factory=list)
    _closed: set[int] = field(default_factory=set)
    _last_state: ConnectionState | None = None

    def __call__(self, controller: ChatSessionController) -> None:
        self._render_state(controller.connection_state)
        # ordinal among assistant replies stays stable when the indicator is removed
        replies = [m for m in controller.messages if not m.is_user and not m.is_typing_indicator]
        for ordinal, message in enumerate(replies):
            if ordinal in self._closed:
                continue
            if ordinal == len(self._printed):
                self._printed.append(0)
                self.out.write(f"\n{magenta('assistant >')} ")
            delta = message.text[self._printed[ordinal]:]
            if delta:
                self.out.write(delta)
                self._printed[ordinal] = len(message.text)
            if not message.is_partial:
                self.out.write("\n\n")
                self._closed.add(ordinal)
        self.out.flush()

    def _render_state(self, state: ConnectionState) -> None:
        if not self.show_state or state is self._last_state:
            return
        self._last_state = state
        if state is ConnectionState.OPEN:
            self.out.write(dim("[connected]\n"))
        elif state is ConnectionState.CLOSED:
            self.out.write(dim("[disconnected]\n"))


__all__ = ["TerminalRenderer"]
