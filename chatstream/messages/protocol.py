"""Wire codec for the chat protocol.

Client -> server: `{"model": str, "prompt": str}`
Server -> client: `{"response": str | null, "done": bool}`

A server frame may omit `response` (read as null) or `done` (read as
false). Anything else that does not fit the shape is a ProtocolViolation.
"""

from __future__ import annotations

import json
from typing import Any
from dataclasses import dataclass

from ..errors import ProtocolViolation


@dataclass(frozen=True)
class ChatRequest:
    model: str
    prompt: str

    def to_payload(self) -> dict[str, str]:
        return {"model": self.model, "prompt": self.prompt}


@dataclass(frozen=True)
class Frame:
    """One server frame, tagged with the connection it arrived on."""

    response: str | None
    done: bool
    connection_id: str | None = None

    @property
    def text(self) -> str:
        return self.response or ""


def encode_request(request: ChatRequest) -> str:
    return json.dumps(request.to_payload(), ensure_ascii=False)


def decode_request(raw: str | bytes) -> ChatRequest:
    """Parse a client frame; the inverse of encode_request."""
    data = _load_object(raw)
    model = data.get("model")
    prompt = data.get("prompt")
    if not isinstance(model, str) or not isinstance(prompt, str):
        raise ProtocolViolation("Request needs string 'model' and 'prompt'.", raw=raw)
    return ChatRequest(model=model, prompt=prompt)


def encode_frame(response: str | None, done: bool) -> str:
    return json.dumps({"response": response, "done": done}, ensure_ascii=False)


def parse_frame(raw: str | bytes, *, connection_id: str | None = None) -> Frame:
    data = _load_object(raw)

    response = data.get("response")
    if response is not None and not isinstance(response, str):
        raise ProtocolViolation("'response' must be a string or null.", raw=raw)

    done = data.get("done", False)
    if not isinstance(done, bool):
        raise ProtocolViolation("'done' must be a boolean.", raw=raw)

    return Frame(response=response, done=done, connection_id=connection_id)


def _load_object(raw: str | bytes) -> dict[str, Any]:
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise ProtocolViolation("Frame is not valid UTF-8.", raw=raw) from exc
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ProtocolViolation(f"Invalid JSON frame: {raw!r}", raw=raw) from exc
    if not isinstance(data, dict):
        raise ProtocolViolation("Frame must be a JSON object.", raw=raw)
    return data


__all__ = [
    "ChatRequest",
    "Frame",
    "decode_request",
    "encode_frame",
    "encode_request",
    "parse_frame",
]
