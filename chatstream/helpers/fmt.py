"""Terminal formatting helpers for the interactive client."""

from __future__ import annotations

import sys

# ANSI color codes (disabled if not a tty)
_USE_COLOR = sys.stdout.isatty()


def _c(code: str, text: str) -> str:
    """Wrap text in ANSI color codes if output is a tty."""
    if not _USE_COLOR:
        return text
    return f"\033[{code}m{text}\033[0m"


def dim(text: str) -> str:
    return _c("2", text)


def bold(text: str) -> str:
    return _c("1", text)


def cyan(text: str) -> str:
    return _c("36", text)


def yellow(text: str) -> str:
    return _c("33", text)


def magenta(text: str) -> str:
    return _c("35", text)


def section_header(title: str, width: int = 60) -> str:
    """Create a prominent section header."""
    padding = width - len(title) - 4
    left = padding // 2
    right = padding - left
    return bold(f"{'─' * left}[ {title} ]{'─' * right}")


__all__ = ["bold", "cyan", "dim", "magenta", "section_header", "yellow"]
