"""Streaming response assembly."""

from .assembler import FoldResult, StreamAssembler

__all__ = ["FoldResult", "StreamAssembler"]
