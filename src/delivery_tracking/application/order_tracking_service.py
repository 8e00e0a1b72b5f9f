"""Live tracking of a single order."""

import logging
from typing import Any

from delivery_tracking.application import socket_events
from delivery_tracking.application.room_membership import RoomMembershipTracker
from delivery_tracking.application.tracking_fetcher import TrackingFetcher
from delivery_tracking.application.tracking_reconciler import TrackingReconciler, TrackingState
from delivery_tracking.domain.contracts.realtime_session import RealtimeSessionProtocol
from delivery_tracking.domain.models.connection_state import ConnectionState
from delivery_tracking.domain.models.driver_location import DriverLocation
from delivery_tracking.domain.models.tracking_snapshot import TrackingSnapshot
from delivery_tracking.domain.ports.tracking_repository import TrackingRepository

logger = logging.getLogger(__name__)

CONNECTION_ERROR_MESSAGE = "Connection error"


class OrderTrackingService:
    """Keeps the tracking snapshot and driver location of one order up to date.

    Wires the tracking namespace session to a room tracker, a reconciler for
    pushes and a fetcher for the initial snapshot.
    """

    def __init__(
        self,
        session: RealtimeSessionProtocol,
        repository: TrackingRepository,
        fallback_seconds: float = 3.0,
    ) -> None:
        """Initialize the service. Nothing is fetched until start() or track().

        Args:
            session: Session bound to the tracking namespace.
            repository: REST source of tracking snapshots.
            fallback_seconds: Delay before retrying REST when no snapshot arrived.
        """
        self._session = session
        self._reconciler = TrackingReconciler()
        self._reconciler.register(session)
        # Registered before the fetch hook so room replay runs first on connect
        self.rooms = RoomMembershipTracker(
            session,
            socket_events.SUBSCRIBE_TO_ORDER,
            socket_events.UNSUBSCRIBE_FROM_ORDER,
        )
        self._fetcher = TrackingFetcher(repository, session, self._reconciler, fallback_seconds)
        session.add_connect_hook(self._on_connected)
        session.add_error_hook(self._on_connection_error)
        session.on(socket_events.SERVER_ERROR, self._on_server_error)
        self._closed = False

    @property
    def order_id(self) -> str | None:
        """The order currently tracked."""
        return self._reconciler.observed_order_id

    @property
    def state(self) -> TrackingState:
        """Full tracking state."""
        return self._reconciler.state

    @property
    def tracking_data(self) -> TrackingSnapshot | None:
        """Current snapshot, None until loaded."""
        return self._reconciler.snapshot

    @property
    def driver_location(self) -> DriverLocation | None:
        """Latest driver location."""
        return self._reconciler.driver_location

    @property
    def error(self) -> str | None:
        """Message for the last failure, None when healthy."""
        return self._reconciler.error

    @property
    def is_connected(self) -> bool:
        """True while the tracking socket is connected."""
        return self._session.is_connected

    @property
    def connection_state(self) -> ConnectionState:
        """Connection state of the tracking socket."""
        return self._session.state

    def add_listener(self, listener: Any) -> None:
        """Register a listener for tracking state changes."""
        self._reconciler.add_listener(listener)

    async def start(self, order_id: str) -> None:
        """Track an order and open the socket."""
        await self.track(order_id)
        await self._session.open()

    async def track(self, order_id: str) -> None:
        """Switch tracking to another order. Ignored once the service is closed."""
        if self._closed:
            logger.warning(f"Ignoring track({order_id}) on closed tracking service")
            return
        previous = self._reconciler.observed_order_id
        if previous == order_id:
            return
        self._reconciler.observe(order_id)
        if previous is not None:
            await self.rooms.leave(previous)
        await self.rooms.join(order_id)
        logger.info(f"Tracking order {order_id}")
        await self._fetcher.fetch_initial(order_id)

    async def refresh(self) -> None:
        """Re-fetch the current snapshot."""
        await self._fetcher.refresh()

    async def wait_for_snapshot(self, timeout: float | None = None) -> TrackingSnapshot | None:
        """Wait for the first snapshot of the tracked order."""
        return await self._reconciler.wait_for_snapshot(timeout)

    async def close(self) -> None:
        """Stop tracking and close the socket. Calling it again is a no-op."""
        if self._closed:
            return
        self._closed = True
        self._fetcher.cancel()
        await self._session.close()
        self._reconciler.observe(None)
        logger.info("Order tracking closed")

    async def _on_connected(self) -> None:
        self._reconciler.set_error(None)
        order_id = self._reconciler.observed_order_id
        if order_id is not None:
            await self._fetcher.request_via_socket(order_id)

    def _on_connection_error(self, reason: str) -> None:
        order_id = self._reconciler.observed_order_id
        if order_id is None or self._closed:
            return
        if self._reconciler.snapshot is None:
            logger.info(f"Tracking socket unavailable ({reason}), fetching {order_id} over REST")
            self._fetcher.fallback_to_rest(order_id)

    def _on_server_error(self, payload: Any) -> None:
        logger.error(f"Tracking socket reported an error: {payload}")
        self._reconciler.set_error(CONNECTION_ERROR_MESSAGE)
