"""Ordered chat message log.

The log is append-only with two exceptions: the single partial assistant
message grows in place, and the single typing indicator can be removed.
The indicator position is kept as an index so removal never scans.
"""

from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True)
class ChatMessage:
    """Read-only view of one log entry."""

    text: str
    is_user: bool
    is_partial: bool = False
    is_typing_indicator: bool = False


class MessageLog:
    """Message storage enforcing the partial/typing-indicator invariants."""

    def __init__(self) -> None:
        self._messages: list[ChatMessage] = []
        self._typing_index: int | None = None

    def __len__(self) -> int:
        return len(self._messages)

    def __getitem__(self, index: int) -> ChatMessage:
        return self._messages[index]

    def __iter__(self):
        return iter(self._messages)

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def typing_index(self) -> int | None:
        return self._typing_index

    @property
    def partial_index(self) -> int | None:
        for index, message in enumerate(self._messages):
            if message.is_partial:
                return index
        return None

    def append_user(self, text: str) -> int:
        return self._append(ChatMessage(text=text, is_user=True))

    def append_assistant(self, text: str, *, partial: bool) -> int:
        if partial and self.partial_index is not None:
            raise ValueError("a partial message is already streaming")
        return self._append(ChatMessage(text=text, is_user=False, is_partial=partial))

    def add_typing_indicator(self) -> int:
        """Append the typing indicator, or return the existing one's index."""
        if self._typing_index is not None:
            return self._typing_index
        self._typing_index = self._append(ChatMessage(text="", is_user=False, is_typing_indicator=True))
        return self._typing_index

    def remove_typing_indicator(self) -> int | None:
        """Remove the typing indicator and return the index it occupied."""
        index = self._typing_index
        if index is None:
            return None
        del self._messages[index]
        self._typing_index = None
        return index

    def append_text(self, index: int, text: str) -> None:
        message = self._messages[index]
        if not message.is_partial:
            raise ValueError(f"message {index} is final and cannot grow")
        self._messages[index] = replace(message, text=message.text + text)

    def finalize(self, index: int) -> None:
        message = self._messages[index]
        if message.is_partial:
            self._messages[index] = replace(message, is_partial=False)

    def _append(self, message: ChatMessage) -> int:
        self._messages.append(message)
        return len(self._messages) - 1


__all__ = ["ChatMessage", "MessageLog"]
