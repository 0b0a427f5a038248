"""Unit tests for the incremental terminal renderer."""

from __future__ import annotations

import io
from types import SimpleNamespace

from chatstream.render import TerminalRenderer
from chatstream.state import ChatMessage, ConnectionState


def _view(*messages: ChatMessage, state: ConnectionState = ConnectionState.OPEN) -> SimpleNamespace:
    return SimpleNamespace(messages=tuple(messages), connection_state=state)


def _user(text: str) -> ChatMessage:
    return ChatMessage(text=text, is_user=True)


def _reply(text: str, partial: bool) -> ChatMessage:
    return ChatMessage(text=text, is_user=False, is_partial=partial)


def test_streaming_reply_prints_only_new_text() -> None:
    out = io.StringIO()
    render = TerminalRenderer(out=out, show_state=False)
    typing = ChatMessage(text="", is_user=False, is_typing_indicator=True)

    render(_view(_user("hi"), typing))
    render(_view(_user("hi"), _reply("Hel", True)))
    render(_view(_user("hi"), _reply("Hello", True)))
    render(_view(_user("hi"), _reply("Hello", False)))
    render(_view(_user("hi"), _reply("Hello", False)))

    assert out.getvalue() == "\nassistant > Hello\n\n"


def test_each_reply_gets_its_own_header() -> None:
    out = io.StringIO()
    render = TerminalRenderer(out=out, show_state=False)

    render(_view(_user("a"), _reply("one", False)))
    render(_view(_user("a"), _reply("one", False), _user("b"), _reply("two", False)))

    assert out.getvalue().count("assistant >") == 2
    assert out.getvalue().endswith("two\n\n")


def test_connection_changes_are_announced_once() -> None:
    out = io.StringIO()
    render = TerminalRenderer(out=out)

    render(_view(state=ConnectionState.OPEN))
    render(_view(state=ConnectionState.OPEN))
    render(_view(state=ConnectionState.CLOSED))

    assert out.getvalue() == "[connected]\n[disconnected]\n"
