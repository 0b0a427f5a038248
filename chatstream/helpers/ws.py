"""WebSocket URL helpers.

Normalizes the configured endpoint so callers can pass `localhost:3000`,
`http://host` or a full `ws://` URL, then attaches the session identity as
a query parameter.
"""

from __future__ import annotations

from urllib.parse import urlsplit, parse_qsl, urlencode, urlunsplit

from ..config.websocket import CHAT_USER_ID_PARAM

_HTTP_TO_WS = {"http": "ws", "https": "wss"}
_KNOWN_SCHEMES = frozenset({"ws", "wss", *_HTTP_TO_WS})


def _split_endpoint(url: str) -> tuple[str, str, str, str, str]:
    """Parse a WebSocket URL and fill in a missing scheme."""
    parts = urlsplit(url)
    # "localhost:3000/chat" parses as scheme "localhost" with no host
    if not parts.netloc and parts.scheme not in _KNOWN_SCHEMES and parts.path:
        parts = urlsplit(f"ws://{url}")

    scheme = _HTTP_TO_WS.get(parts.scheme, parts.scheme)
    return scheme, parts.netloc, parts.path or "", parts.query, parts.fragment


def with_user_id(url: str, user_id: str, *, param: str = CHAT_USER_ID_PARAM) -> str:
    """Return `url` with `?<param>=<user_id>`, replacing any previous value."""
    scheme, netloc, path, query, fragment = _split_endpoint(url)
    if not netloc:
        raise ValueError(f"Invalid WebSocket URL '{url}'. Expected format ws(s)://host[:port][/path]")

    query_items = [(key, value) for key, value in parse_qsl(query, keep_blank_values=True) if key != param]
    query_items.append((param, user_id))
    encoded_query = urlencode(query_items, doseq=True)

    return urlunsplit((scheme, netloc, path, encoded_query, fragment))


__all__ = ["with_user_id"]
