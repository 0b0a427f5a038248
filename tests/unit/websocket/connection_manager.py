"""Unit tests for the connection manager state machine."""

from __future__ import annotations

import asyncio

from websockets.exceptions import ConnectionClosedError

from chatstream.handlers import ConnectionManager
from chatstream.messages import ChatRequest
from chatstream.state import CloseReason, ConnectionState
from tests.helpers import FakeConnector, RecordingListener, StaticIdentity, settle, wait_until


def _manager(connector: FakeConnector, delay: float = 10.0) -> tuple[ConnectionManager, RecordingListener]:
    listener = RecordingListener()
    manager = ConnectionManager(
        "ws://chat.local:3000",
        StaticIdentity("user-abc123xyz"),
        reconnect_delay_s=delay,
        connector=connector,
        listener=listener,
    )
    return manager, listener


def test_connect_returns_handle_before_socket_opens() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, listener = _manager(connector)

        connection = manager.connect()
        assert connection.state is ConnectionState.CONNECTING
        assert manager.state is ConnectionState.CONNECTING
        assert connection.url == "ws://chat.local:3000?userId=user-abc123xyz"

        await settle()
        assert connection.is_open
        assert listener.events == [("open", "c1", None)]
        await manager.shutdown()

    asyncio.run(_run())


def test_starts_disconnected() -> None:
    manager, _ = _manager(FakeConnector())

    assert manager.state is ConnectionState.DISCONNECTED
    assert manager.current is None
    assert not manager.reconnect_pending


def test_frames_are_tagged_with_their_connection() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, listener = _manager(connector)
        manager.connect()
        await settle()

        connector.last.push("Hel")
        connector.last.push(None, done=True)
        await settle()

        frames = [payload for kind, _, payload in listener.events if kind == "frame"]
        assert [(f.response, f.done, f.connection_id) for f in frames] == [
            ("Hel", False, "c1"),
            (None, True, "c1"),
        ]
        await manager.shutdown()

    asyncio.run(_run())


def test_server_completion_closes_and_schedules_reconnect() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, listener = _manager(connector)
        connection = manager.connect()
        await settle()

        connector.last.finish()
        await settle()

        assert connection.state is ConnectionState.CLOSED
        assert connection.close_reason is CloseReason.COMPLETE
        assert listener.events[-1] == ("closed", "c1", CloseReason.COMPLETE)
        assert manager.reconnect_pending
        await manager.shutdown()

    asyncio.run(_run())


def test_transport_error_closes_with_error_reason() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, listener = _manager(connector)
        connection = manager.connect()
        await settle()

        connector.last.fail(ConnectionResetError("peer reset"))
        await settle()

        assert manager.close_reason is CloseReason.ERROR
        assert "ConnectionResetError" in (connection.close_detail or "")
        assert listener.kinds() == ["open", "closed"]
        assert manager.reconnect_pending
        await manager.shutdown()

    asyncio.run(_run())


def test_abnormal_websocket_close_is_an_error() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, _ = _manager(connector)
        manager.connect()
        await settle()

        connector.last.fail(ConnectionClosedError(None, None))
        await settle()

        assert manager.close_reason is CloseReason.ERROR
        await manager.shutdown()

    asyncio.run(_run())


def test_protocol_violation_terminates_connection() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, listener = _manager(connector)
        connection = manager.connect()
        await settle()

        connector.last.push_raw("not json at all")
        await settle()

        assert connection.close_reason is CloseReason.ERROR
        assert "Invalid JSON" in (connection.close_detail or "")
        assert connector.last.close_calls == [1000]
        assert "frame" not in listener.kinds()
        assert manager.reconnect_pending
        await manager.shutdown()

    asyncio.run(_run())


def test_failed_handshake_is_reported_as_event_not_exception() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        connector.error = ConnectionRefusedError("refused")
        manager, listener = _manager(connector)

        connection = manager.connect()
        await settle()

        assert connection.close_reason is CloseReason.ERROR
        assert listener.events == [("closed", "c1", CloseReason.ERROR)]
        assert manager.reconnect_pending
        await manager.shutdown()

    asyncio.run(_run())


def test_reconnect_fires_after_delay_with_same_identity() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, listener = _manager(connector, delay=0.02)
        manager.connect()
        await settle()
        connector.last.finish()

        await wait_until(lambda: manager.current is not None and manager.current.connection_id == "c2")
        await wait_until(lambda: manager.state is ConnectionState.OPEN)

        assert len(connector.urls) == 2
        assert connector.urls[0] == connector.urls[1]
        assert not manager.reconnect_pending
        assert listener.kinds() == ["open", "closed", "open"]
        await manager.shutdown()

    asyncio.run(_run())


def test_user_close_does_not_schedule_reconnect() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, listener = _manager(connector)
        connection = manager.connect()
        await settle()

        assert await manager.close()

        assert connection.close_reason is CloseReason.USER
        assert connector.last.close_calls == [1000]
        assert not manager.reconnect_pending
        assert "closed" not in listener.kinds()
        assert not await manager.close()

    asyncio.run(_run())


def test_frames_after_close_are_dropped() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, listener = _manager(connector)
        manager.connect()
        await settle()
        socket = connector.last

        await manager.close()
        socket.push("late")
        await settle()

        assert "frame" not in listener.kinds()

    asyncio.run(_run())


def test_connect_cancels_pending_reconnect_timer() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, _ = _manager(connector, delay=0.05)
        manager.connect()
        await settle()
        connector.last.finish()
        await settle()
        assert manager.reconnect_pending

        manager.connect()
        assert not manager.reconnect_pending
        await asyncio.sleep(0.1)

        assert len(connector.urls) == 2
        await manager.shutdown()

    asyncio.run(_run())


def test_only_one_reconnect_timer_at_a_time() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, _ = _manager(connector, delay=0.02)

        manager.schedule_reconnect()
        manager.schedule_reconnect()
        manager.schedule_reconnect()
        await asyncio.sleep(0.08)

        assert len(connector.urls) == 1
        await manager.shutdown()

    asyncio.run(_run())


def test_new_connection_tears_down_the_previous_one() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, listener = _manager(connector)
        first = manager.connect()
        await settle()
        old_socket = connector.last

        second = manager.connect()
        await settle()
        old_socket.push("stale")
        await settle()

        assert first.close_reason is CloseReason.USER
        assert old_socket.close_calls == [1000]
        assert second.is_open
        assert "frame" not in listener.kinds()
        await manager.shutdown()

    asyncio.run(_run())


def test_send_writes_encoded_request_on_open_connection() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, _ = _manager(connector)
        connection = manager.connect()
        await settle()

        assert await manager.send(connection, ChatRequest(model="gemma:2b", prompt="hi"))
        assert connector.last.sent_payloads == [{"model": "gemma:2b", "prompt": "hi"}]
        await manager.shutdown()

    asyncio.run(_run())


def test_send_on_connection_that_is_not_open_is_refused() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, _ = _manager(connector)
        connection = manager.connect()

        assert not await manager.send(connection, ChatRequest(model="m", prompt="too early"))
        await settle()
        await manager.close()
        assert not await manager.send(connection, ChatRequest(model="m", prompt="too late"))
        assert connector.last.sent == []

    asyncio.run(_run())


def test_send_failure_closes_connection_as_error() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, listener = _manager(connector)
        connection = manager.connect()
        await settle()
        connector.last.send_error = BrokenPipeError("pipe")

        assert not await manager.send(connection, ChatRequest(model="m", prompt="hi"))
        assert connection.close_reason is CloseReason.ERROR
        assert listener.kinds() == ["open", "closed"]
        assert manager.reconnect_pending
        await manager.shutdown()

    asyncio.run(_run())


def test_shutdown_cancels_reconnect_and_blocks_new_timers() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        manager, _ = _manager(connector, delay=0.01)
        manager.connect()
        await settle()
        connector.last.finish()
        await settle()

        await manager.shutdown()
        manager.schedule_reconnect()
        await asyncio.sleep(0.05)

        assert not manager.reconnect_pending
        assert len(connector.urls) == 1

    asyncio.run(_run())


class _ExplodingListener(RecordingListener):
    def on_frame(self, connection, frame) -> None:
        super().on_frame(connection, frame)
        raise RuntimeError("listener bug")


def test_listener_failure_ends_connection_and_schedules_reconnect() -> None:
    async def _run() -> None:
        connector = FakeConnector()
        listener = _ExplodingListener()
        manager = ConnectionManager(
            "ws://chat.local:3000",
            StaticIdentity(),
            connector=connector,
            listener=listener,
        )
        connection = manager.connect()
        await settle()

        connector.last.push("Hel")
        await settle()

        assert connection.state is ConnectionState.CLOSED
        assert connection.close_reason is CloseReason.ERROR
        assert "listener bug" in (connection.close_detail or "")
        assert connector.last.close_calls == [1000]
        assert listener.kinds() == ["open", "frame", "closed"]
        assert manager.reconnect_pending
        assert connection.task is not None and connection.task.done()
        assert connection.task.exception() is None
        await manager.shutdown()

    asyncio.run(_run())
