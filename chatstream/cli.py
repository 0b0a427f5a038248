"""Interactive terminal client.

Reads prompts from stdin and streams the model's replies to stdout through
a ChatSessionController. Lines starting with `/` are commands:

    /stop   cancel the response that is streaming
    /help   list commands
    /quit   exit
"""

from __future__ import annotations

import asyncio
import logging
import argparse
import contextlib
from dataclasses import dataclass

from .config import CHAT_MODEL, CHAT_SERVER_URL, CHAT_IDENTITY_PATH, CHAT_RECONNECT_DELAY_S
from .handlers import ChatSessionController, ConnectionManager
from .helpers.fmt import dim, yellow, section_header
from .logging import configure_logging, log_context
from .render import TerminalRenderer
from .state import FileStore, IdentityProvider

logger = logging.getLogger(__name__)

HELP_TEXT = (
    "  /stop  cancel the current response\n"
    "  /help  show this list\n"
    "  /quit  exit"
)


class InputClosedError(RuntimeError):
    """Raised when stdin closes (EOF or Ctrl+C)."""


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Streaming chat client")
    parser.add_argument(
        "--server",
        default=CHAT_SERVER_URL,
        help=f"WebSocket server URL (default env CHAT_SERVER_URL or {CHAT_SERVER_URL})",
    )
    parser.add_argument(
        "--model",
        default=CHAT_MODEL,
        help=f"Model name sent with each prompt (default: {CHAT_MODEL})",
    )
    parser.add_argument(
        "--reconnect-delay",
        dest="reconnect_delay",
        type=float,
        default=CHAT_RECONNECT_DELAY_S,
        help=f"Seconds to wait before reconnecting (default: {CHAT_RECONNECT_DELAY_S})",
    )
    parser.add_argument(
        "--identity-file",
        dest="identity_file",
        default=str(CHAT_IDENTITY_PATH),
        help=f"Where the session identity is kept (default: {CHAT_IDENTITY_PATH})",
    )
    parser.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        help="Log level override (default env CHAT_LOG_LEVEL or INFO)",
    )
    return parser.parse_args(argv)


@dataclass(slots=True)
class InteractiveRunner:
    """Reads stdin lines and forwards them to the controller."""

    controller: ChatSessionController

    async def run(self) -> None:
        while True:
            try:
                line = (await _ainput("")).strip()
            except InputClosedError as exc:
                logger.debug("%s", exc)
                return
            if not line:
                continue
            if line.startswith("/"):
                if await self._dispatch_command(line[1:].strip().lower()):
                    return
                continue
            await self._submit(line)

    async def _dispatch_command(self, command: str) -> bool:
        """Run a slash command; return True when the session should end."""
        if command in {"quit", "exit", "q"}:
            return True
        if command == "stop":
            if not await self.controller.cancel():
                print(dim("nothing to stop"))
            return False
        if command == "help":
            print(HELP_TEXT)
            return False
        print(yellow(f"unknown command /{command}; try /help"))
        return False

    async def _submit(self, line: str) -> None:
        if self.controller.receiving:
            print(yellow("still receiving; wait for the reply or /stop it"))
            return
        if not await self.controller.submit(line):
            print(yellow(f"not sent: connection is {self.controller.connection_state.value}"))


async def _ainput(prompt: str) -> str:
    """Async wrapper around input() that runs in an executor."""
    loop = asyncio.get_running_loop()
    try:
        return await loop.run_in_executor(None, lambda: input(prompt))
    except EOFError as exc:
        raise InputClosedError("stdin closed") from exc
    except KeyboardInterrupt as exc:
        raise InputClosedError("keyboard interrupt") from exc


async def _run(args: argparse.Namespace) -> None:
    identity = IdentityProvider(FileStore(args.identity_file))
    session_id = identity.get_or_create_id()
    manager = ConnectionManager(args.server, identity, reconnect_delay_s=args.reconnect_delay)
    controller = ChatSessionController(manager, model=args.model)
    controller.subscribe(TerminalRenderer())

    print(f"\n{section_header('CHAT')}")
    print(dim(f"  server: {args.server}"))
    print(dim(f"  model: {args.model}"))
    print(dim(f"  session: {session_id}"))
    print(HELP_TEXT)

    with log_context(session_id=session_id):
        controller.start()
        try:
            await InteractiveRunner(controller).run()
        finally:
            await controller.shutdown()


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    configure_logging(args.log_level)
    with contextlib.suppress(KeyboardInterrupt):
        asyncio.run(_run(args))


if __name__ == "__main__":
    main()
