"""Tests for SocketIoSession."""

import asyncio
from collections.abc import Iterator
from typing import Any
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
import socketio

from delivery_tracking.adapters.config import AppConfig
from delivery_tracking.adapters.realtime import SocketIoSession
from delivery_tracking.domain.models import ConnectionState, ConnectionStatus

ASYNC_CLIENT = "delivery_tracking.adapters.realtime.socketio_session.socketio.AsyncClient"


def make_client() -> MagicMock:
    """Create a mock AsyncClient that remembers handlers registered with on()."""
    client = MagicMock()
    client.handlers = {}

    def on(event: str, handler: Any = None, namespace: str | None = None) -> None:
        client.handlers[(namespace, event)] = handler

    client.on.side_effect = on
    client.connect = AsyncMock()
    client.emit = AsyncMock()
    client.shutdown = AsyncMock()
    client.sleep = AsyncMock()
    client.get_sid.return_value = "sid-1"
    return client


@pytest.fixture
def client() -> MagicMock:
    """Create the mock Socket.IO client."""
    return make_client()


@pytest.fixture
def factory(client: MagicMock) -> Iterator[MagicMock]:
    """Patch AsyncClient so sessions use the mock client."""
    with patch(ASYNC_CLIENT, return_value=client) as mock_factory:
        yield mock_factory


def make_session(**kwargs: Any) -> SocketIoSession:
    """Create a session on the tracking namespace."""
    return SocketIoSession("http://backend", "/tracking", auth_token="tok", **kwargs)


async def fire(client: MagicMock, event: str, *args: Any) -> None:
    """Invoke the handler the session registered for a namespace event."""
    await client.handlers[("/tracking", event)](*args)


def test_when_reconnection_unbounded_then_construction_fails(factory: MagicMock) -> None:
    """Given zero reconnection attempts, when creating a session, then ValueError is raised."""
    with pytest.raises(ValueError, match="reconnection_attempts"):
        make_session(reconnection_attempts=0)


def test_client_uses_bounded_fixed_delay_reconnection(factory: MagicMock) -> None:
    """Given reconnection settings, when creating a session, then the client gets a fixed bounded policy."""
    make_session(reconnection_attempts=4, reconnection_delay_seconds=2.5)

    kwargs = factory.call_args.kwargs
    assert kwargs["reconnection"] is True
    assert kwargs["reconnection_attempts"] == 4
    assert kwargs["reconnection_delay"] == 2.5
    assert kwargs["reconnection_delay_max"] == 2.5
    assert kwargs["randomization_factor"] == 0


def test_from_config_uses_derived_websocket_url(factory: MagicMock) -> None:
    """Given an API URL ending in /api, when creating from config, then /api is stripped."""
    config = AppConfig.for_testing(api_url="http://backend/api", socket_transports="websocket")

    session = SocketIoSession.from_config(config, "/orders")

    assert session.namespace == "/orders"
    assert session._base_url == "http://backend"
    assert session._transports == ["websocket"]


@pytest.mark.asyncio
async def test_open_connects_in_background(factory: MagicMock, client: MagicMock) -> None:
    """Given a new session, when opened, then it is CONNECTING and connects with retry."""
    session = make_session()

    await session.open()
    assert session.state.status is ConnectionStatus.CONNECTING
    await asyncio.sleep(0)

    client.connect.assert_awaited_once()
    args, kwargs = client.connect.call_args
    assert args == ("http://backend",)
    assert kwargs["namespaces"] == ["/tracking"]
    assert kwargs["auth"] == {"token": "tok"}
    assert kwargs["transports"] == ["websocket", "polling"]
    assert kwargs["retry"] is True


@pytest.mark.asyncio
async def test_open_twice_connects_once(factory: MagicMock, client: MagicMock) -> None:
    """Given a session that is connecting, when opened again, then no second connect starts."""
    gate = asyncio.Event()

    async def hang(*args: Any, **kwargs: Any) -> None:
        await gate.wait()

    client.connect.side_effect = hang
    session = make_session()

    await session.open()
    await session.open()
    await asyncio.sleep(0)

    assert client.connect.await_count == 1
    await session.close()


@pytest.mark.asyncio
async def test_connect_event_runs_hooks_in_order(factory: MagicMock, client: MagicMock) -> None:
    """Given connect hooks, when the namespace connects, then state is CONNECTED and hooks run in order."""
    session = make_session()
    calls: list[str] = []
    states: list[ConnectionState] = []

    async def first() -> None:
        calls.append("first")

    async def second() -> None:
        calls.append("second")

    session.add_connect_hook(first)
    session.add_connect_hook(second)
    session.add_state_listener(states.append)

    await fire(client, "connect")

    assert calls == ["first", "second"]
    assert session.is_connected
    assert session.state.session_id == "sid-1"
    assert states[-1].status is ConnectionStatus.CONNECTED


@pytest.mark.asyncio
async def test_failing_connect_hook_does_not_stop_later_hooks(
    factory: MagicMock, client: MagicMock
) -> None:
    """Given a failing connect hook, when connecting, then later hooks still run."""
    session = make_session()
    calls: list[str] = []

    async def broken() -> None:
        raise RuntimeError("boom")

    async def healthy() -> None:
        calls.append("healthy")

    session.add_connect_hook(broken)
    session.add_connect_hook(healthy)

    await fire(client, "connect")

    assert calls == ["healthy"]


@pytest.mark.asyncio
async def test_disconnect_event_runs_disconnect_hooks(
    factory: MagicMock, client: MagicMock
) -> None:
    """Given a connected session, when disconnected, then state and hooks follow."""
    session = make_session()
    hook = MagicMock()
    session.add_disconnect_hook(hook)
    await fire(client, "connect")

    await fire(client, "disconnect", "transport close")

    assert session.state == ConnectionState(status=ConnectionStatus.DISCONNECTED)
    hook.assert_called_once_with()


@pytest.mark.asyncio
async def test_connect_error_enters_error_state(factory: MagicMock, client: MagicMock) -> None:
    """Given an error hook, when a connect error arrives, then state is ERROR and the hook gets the reason."""
    session = make_session()
    hook = MagicMock()
    session.add_error_hook(hook)

    await fire(client, "connect_error", {"message": "unauthorized"})

    assert session.state.status is ConnectionStatus.ERROR
    assert session.state.last_error == "unauthorized"
    hook.assert_called_once_with("unauthorized")


@pytest.mark.asyncio
async def test_exhausted_initial_connect_enters_error_state(
    factory: MagicMock, client: MagicMock
) -> None:
    """Given a server that never answers, when retries run out, then state is ERROR."""
    client.connect.side_effect = socketio.exceptions.ConnectionError("Connection refused")
    session = make_session()

    await session.open()
    await asyncio.sleep(0)

    assert session.state.status is ConnectionStatus.ERROR
    assert session.state.last_error == "Connection refused"


@pytest.mark.asyncio
async def test_emit_when_disconnected_returns_false(factory: MagicMock, client: MagicMock) -> None:
    """Given a disconnected session, when emitting, then nothing is sent."""
    session = make_session()

    assert await session.emit("subscribeToOrder", "A") is False
    client.emit.assert_not_awaited()


@pytest.mark.asyncio
async def test_emit_when_connected_sends_on_namespace(
    factory: MagicMock, client: MagicMock
) -> None:
    """Given a connected session, when emitting, then the event is sent on the namespace."""
    session = make_session()
    await fire(client, "connect")

    assert await session.emit("subscribeToOrder", "A") is True
    client.emit.assert_awaited_once_with(
        "subscribeToOrder", "A", namespace="/tracking", callback=None
    )


@pytest.mark.asyncio
async def test_emit_transport_errors_are_contained(factory: MagicMock, client: MagicMock) -> None:
    """Given transport failures, when emitting, then False is returned and nothing is raised."""
    session = make_session()
    await fire(client, "connect")

    client.emit.side_effect = socketio.exceptions.BadNamespaceError("/tracking")
    assert await session.emit("subscribeToOrder", "A") is False
    assert session.is_connected

    client.emit.side_effect = RuntimeError("socket closed")
    assert await session.emit("subscribeToOrder", "A") is False
    assert session.state.status is ConnectionStatus.ERROR


@pytest.mark.asyncio
async def test_request_delivers_first_ack_argument(factory: MagicMock, client: MagicMock) -> None:
    """Given a connected session, when the server acknowledges, then on_ack gets the response."""
    session = make_session()
    await fire(client, "connect")
    acks: list[Any] = []

    await session.request("getOrderTracking", "A", acks.append)
    callback = client.emit.call_args.kwargs["callback"]
    callback({"data": None})
    callback()

    assert acks == [{"data": None}, None]


@pytest.mark.asyncio
async def test_handlers_for_same_event_are_multiplexed(
    factory: MagicMock, client: MagicMock
) -> None:
    """Given two handlers for an event, when it arrives, then both run even if the first fails."""
    session = make_session()
    received: list[Any] = []

    def broken(payload: Any) -> None:
        raise ValueError("bad payload")

    async def healthy(payload: Any) -> None:
        received.append(payload)

    session.on("driverLocation", broken)
    session.on("driverLocation", healthy)

    await fire(client, "driverLocation", {"orderId": "A"})

    assert received == [{"orderId": "A"}]
    registered = [c for c in client.on.call_args_list if c.args[0] == "driverLocation"]
    assert len(registered) == 1


@pytest.mark.asyncio
async def test_close_runs_close_hooks_and_shuts_down_once(
    factory: MagicMock, client: MagicMock
) -> None:
    """Given a connected session, when closed twice, then hooks and shutdown run once."""
    session = make_session()
    hook = AsyncMock()
    session.add_close_hook(hook)
    await fire(client, "connect")

    await session.close()
    await session.close()
    await session.open()

    hook.assert_awaited_once()
    client.shutdown.assert_awaited_once()
    client.connect.assert_not_awaited()
    assert session.state.status is ConnectionStatus.DISCONNECTED
    assert session.is_closed


@pytest.mark.asyncio
async def test_close_cancels_pending_connect(factory: MagicMock, client: MagicMock) -> None:
    """Given a connect still retrying, when closed, then the connect task is cancelled."""
    gate = asyncio.Event()

    async def hang(*args: Any, **kwargs: Any) -> None:
        await gate.wait()

    client.connect.side_effect = hang
    hook = AsyncMock()
    session = make_session()
    session.add_close_hook(hook)

    await session.open()
    await asyncio.sleep(0)
    await session.close()

    hook.assert_not_awaited()
    assert session._connect_task is not None
    assert session._connect_task.cancelled()
    assert session.state.status is ConnectionStatus.DISCONNECTED


@pytest.mark.asyncio
async def test_close_flushes_leave_emits_before_shutdown(
    factory: MagicMock, client: MagicMock
) -> None:
    """Given a close hook that emits a leave, when closed, then the loop yields before shutdown."""
    session = make_session()

    async def leave_rooms() -> None:
        await session.emit("unsubscribeFromOrder", "A")

    session.add_close_hook(leave_rooms)
    await fire(client, "connect")

    await session.close()

    calls = [name for name, _, _ in client.mock_calls if name in ("emit", "sleep", "shutdown")]
    assert calls == ["emit", "sleep", "shutdown"]
    client.emit.assert_awaited_once_with(
        "unsubscribeFromOrder", "A", namespace="/tracking", callback=None
    )
