"""Shared fakes and servers for the chatstream tests."""

from .fakes import FakeConnector, FakeSocket, RecordingListener, StaticIdentity, settle
from .server import MockModelServer, wait_until

__all__ = [
    "FakeConnector",
    "FakeSocket",
    "MockModelServer",
    "RecordingListener",
    "StaticIdentity",
    "settle",
    "wait_until",
]
