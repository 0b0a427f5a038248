"""Chat protocol messages and their JSON encoding."""

from .protocol import ChatRequest, Frame, decode_request, encode_frame, encode_request, parse_frame

__all__ = [
    "ChatRequest",
    "Frame",
    "decode_request",
    "encode_frame",
    "encode_request",
    "parse_frame",
]
