"""Tests for OrderTrackingService."""

import asyncio

import pytest

from delivery_tracking.application.order_tracking_service import (
    CONNECTION_ERROR_MESSAGE,
    OrderTrackingService,
)
from tests.test_room_membership_tracker import FakeRealtimeSession
from tests.test_tracking_fetcher import MockTrackingRepository, settle
from tests.test_tracking_reconciler import make_snapshot, snapshot_payload


def make_service(
    repository: MockTrackingRepository,
) -> tuple[OrderTrackingService, FakeRealtimeSession]:
    """Create a tracking service on a disconnected fake session."""
    session = FakeRealtimeSession()
    return OrderTrackingService(session, repository, fallback_seconds=0.05), session


@pytest.mark.asyncio
async def test_start_fetches_over_rest_and_opens_session() -> None:
    """Given a new service, when started, then REST is fetched and the session is opened."""
    repo = MockTrackingRepository(make_snapshot())
    service, session = make_service(repo)

    await service.start("A")
    snapshot = await service.wait_for_snapshot(timeout=1)

    assert snapshot is not None
    assert snapshot.order_id == "A"
    assert session.open_calls == 1
    assert service.rooms.pending_ids == {"A"}
    await service.close()


@pytest.mark.asyncio
async def test_on_connect_rooms_are_joined_before_snapshot_is_requested() -> None:
    """Given a started service, when the session connects, then subscribe precedes the request."""
    gate = asyncio.Event()
    repo = MockTrackingRepository(make_snapshot(), gate=gate)
    service, session = make_service(repo)
    await service.start("A")

    await session.simulate_connect()

    assert session.emitted == [("subscribeToOrder", "A"), ("getOrderTracking", "A")]
    await service.close()
    gate.set()
    await settle()


@pytest.mark.asyncio
async def test_on_reconnect_rooms_are_replayed_and_snapshot_refetched() -> None:
    """Given a connected service, when the socket reconnects, then subscribe and request repeat."""
    repo = MockTrackingRepository(make_snapshot())
    service, session = make_service(repo)
    await service.start("A")
    await session.simulate_connect()
    session.simulate_disconnect()
    session.emitted.clear()

    await session.simulate_connect()

    assert session.emitted == [("subscribeToOrder", "A"), ("getOrderTracking", "A")]
    await service.close()


@pytest.mark.asyncio
async def test_pushes_update_tracking_data() -> None:
    """Given a snapshot, when status and location pushes arrive, then the service exposes them."""
    repo = MockTrackingRepository(make_snapshot())
    service, session = make_service(repo)
    await service.start("A")
    await service.wait_for_snapshot(timeout=1)
    await session.simulate_connect()

    await session.push("orderStatusUpdate", {"orderId": "A", "status": "IN_TRANSIT"})
    await session.push(
        "driverLocation", {"orderId": "A", "driverId": "d1", "latitude": 3.0, "longitude": 4.0}
    )

    assert service.tracking_data is not None
    assert service.tracking_data.status == "IN_TRANSIT"
    assert service.driver_location is not None
    assert service.driver_location.latitude == 3.0
    await service.close()


@pytest.mark.asyncio
async def test_connection_error_without_snapshot_falls_back_to_rest() -> None:
    """Given no snapshot yet, when the socket reports a connection error, then REST is retried."""
    gate = asyncio.Event()
    repo = MockTrackingRepository(make_snapshot(), gate=gate)
    service, session = make_service(repo)
    await service.start("A")
    await settle()

    session.simulate_error("websocket error")
    await settle()

    assert repo.calls == ["A", "A"]
    gate.set()
    await settle()
    await service.close()


@pytest.mark.asyncio
async def test_server_error_event_records_connection_error() -> None:
    """Given a started service, when the server emits an error, then a connection error is shown."""
    repo = MockTrackingRepository(make_snapshot())
    service, session = make_service(repo)
    await service.start("A")

    await session.push("error", {"message": "unauthorized"})

    assert service.error == CONNECTION_ERROR_MESSAGE
    await service.close()


@pytest.mark.asyncio
async def test_tracking_another_order_leaves_previous_room() -> None:
    """Given order A is tracked, when switching to B, then A's room is left and B's joined."""
    repo = MockTrackingRepository(make_snapshot())
    service, session = make_service(repo)
    await service.start("A")
    await session.simulate_connect()
    session.emitted.clear()

    await service.track("B")

    assert ("unsubscribeFromOrder", "A") in session.emitted
    assert ("subscribeToOrder", "B") in session.emitted
    assert service.order_id == "B"
    await service.close()


@pytest.mark.asyncio
async def test_close_unsubscribes_and_discards_late_pushes() -> None:
    """Given a tracked order, when closed, then the room is left and later pushes are ignored."""
    repo = MockTrackingRepository(make_snapshot())
    service, session = make_service(repo)
    await service.start("A")
    await service.wait_for_snapshot(timeout=1)
    await session.simulate_connect()

    await service.close()
    await service.close()
    await session.push("orderTracking", {"data": snapshot_payload(status="DELIVERED")})

    assert session.emitted_events("unsubscribeFromOrder") == ["A"]
    assert session.closed is True
    assert service.tracking_data is None


@pytest.mark.asyncio
async def test_repeated_connection_errors_fall_back_to_rest_once() -> None:
    """Given a slow backend and a failing socket, when reconnect attempts keep failing, then REST is retried once."""
    gate = asyncio.Event()
    repo = MockTrackingRepository(make_snapshot(), gate=gate)
    service, session = make_service(repo)
    await service.start("A")

    for _ in range(3):
        session.simulate_error("websocket error")
    await asyncio.sleep(0.2)

    assert repo.calls == ["A", "A"]
    gate.set()
    await settle()
    await service.close()


@pytest.mark.asyncio
async def test_track_after_close_is_ignored() -> None:
    """Given a closed service, when tracking an order, then nothing is fetched or joined."""
    repo = MockTrackingRepository(make_snapshot())
    service, session = make_service(repo)
    await service.close()

    await service.track("A")
    await settle()

    assert service.order_id is None
    assert repo.calls == []
    assert service.rooms.pending_ids == set()
    assert service.tracking_data is None
