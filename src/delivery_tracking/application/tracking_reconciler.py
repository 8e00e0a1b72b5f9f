"""Merges tracking snapshots and push events into one observable state."""

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from delivery_tracking.application import socket_events
from delivery_tracking.domain.contracts.realtime_session import RealtimeSessionProtocol
from delivery_tracking.domain.models.driver_location import DriverLocation
from delivery_tracking.domain.models.push_events import (
    DriverArrivedPush,
    DriverLocationPush,
    TrackingResyncPush,
    TrackingStatusPush,
)
from delivery_tracking.domain.models.tracking_snapshot import TrackingSnapshot

logger = logging.getLogger(__name__)


@dataclass
class TrackingState:
    """What the client currently knows about the observed order."""

    snapshot: TrackingSnapshot | None = None
    driver_location: DriverLocation | None = None
    error: str | None = None
    last_arrival: DriverArrivedPush | None = None


class TrackingReconciler:
    """Applies snapshots and pushes for the currently observed order.

    Status pushes merge only the status field. Location pushes and resyncs
    replace their record wholesale. Pushes for any other order are dropped.
    """

    def __init__(self) -> None:
        """Initialize with no observed order."""
        self.observed_order_id: str | None = None
        self._state = TrackingState()
        self._snapshot_ready = asyncio.Event()
        self._listeners: list[Callable[[TrackingState], None]] = []

    @property
    def state(self) -> TrackingState:
        """Current tracking state."""
        return self._state

    @property
    def snapshot(self) -> TrackingSnapshot | None:
        """Current snapshot, None until one arrived."""
        return self._state.snapshot

    @property
    def driver_location(self) -> DriverLocation | None:
        """Latest driver location sample."""
        return self._state.driver_location

    @property
    def error(self) -> str | None:
        """Last fetch error shown to the user."""
        return self._state.error

    def observe(self, order_id: str | None) -> None:
        """Switch the observed order. State is reset when the id changes."""
        if order_id == self.observed_order_id:
            return
        self.observed_order_id = order_id
        self._state = TrackingState()
        self._snapshot_ready.clear()
        self._notify()

    def add_listener(self, listener: Callable[[TrackingState], None]) -> None:
        """Register a listener called after every state change."""
        self._listeners.append(listener)

    def register(self, session: RealtimeSessionProtocol) -> None:
        """Subscribe the push handlers on the tracking namespace."""
        session.on(socket_events.ORDER_STATUS_UPDATE, self.handle_status_update)
        session.on(socket_events.DRIVER_LOCATION, self.handle_driver_location)
        session.on(socket_events.ORDER_TRACKING, self.handle_resync)
        session.on(socket_events.DRIVER_ARRIVED, self.handle_driver_arrived)

    async def wait_for_snapshot(self, timeout: float | None = None) -> TrackingSnapshot | None:
        """Wait until a snapshot for the observed order is available.

        Returns:
            The snapshot, or None if the timeout expired first.
        """
        try:
            await asyncio.wait_for(self._snapshot_ready.wait(), timeout)
        except TimeoutError:
            return None
        return self._state.snapshot

    # ------------------------------------------------------------------
    # Fetch results
    # ------------------------------------------------------------------

    def apply_snapshot(self, order_id: str, snapshot: TrackingSnapshot) -> bool:
        """Replace the snapshot with a fetch result.

        Returns:
            False if the result belongs to an order no longer observed.
        """
        if order_id != self.observed_order_id:
            logger.debug(f"Discarding snapshot for {order_id}, observing {self.observed_order_id}")
            return False
        self._set_snapshot(snapshot)
        return True

    def set_error(self, message: str | None) -> None:
        """Record (or clear) the error shown to the user."""
        if self._state.error == message:
            return
        self._state.error = message
        self._notify()

    # ------------------------------------------------------------------
    # Push handlers
    # ------------------------------------------------------------------

    def handle_status_update(self, payload: Any) -> None:
        """orderStatusUpdate: merge the status into the snapshot."""
        push = self._parse(TrackingStatusPush, payload, socket_events.ORDER_STATUS_UPDATE)
        if push is None or not self._is_observed(push.order_id):
            return
        if self._state.snapshot is None:
            logger.debug(f"Status {push.status} for {push.order_id} arrived before a snapshot")
            return
        self._state.snapshot = self._state.snapshot.with_status(push.status)
        logger.info(f"Order {push.order_id} status: {push.status}")
        self._notify()

    def handle_driver_location(self, payload: Any) -> None:
        """driverLocation: replace the location sample and the driver's position."""
        push = self._parse(DriverLocationPush, payload, socket_events.DRIVER_LOCATION)
        if push is None or not self._is_observed(push.order_id):
            return
        location = push.to_location()
        self._state.driver_location = location
        if self._state.snapshot is not None:
            self._state.snapshot = self._state.snapshot.with_driver_position(
                location.to_position()
            )
        self._notify()

    def handle_resync(self, payload: Any) -> None:
        """orderTracking: the server pushed a whole new snapshot."""
        if self.observed_order_id is None:
            return
        push = self._parse(TrackingResyncPush, payload, socket_events.ORDER_TRACKING)
        if push is None or push.data is None:
            return
        self._set_snapshot(push.data)

    def handle_driver_arrived(self, payload: Any) -> None:
        """driverArrived: informational, the snapshot is left untouched."""
        push = self._parse(DriverArrivedPush, payload, socket_events.DRIVER_ARRIVED)
        if push is None or not self._is_observed(push.order_id):
            return
        logger.info(f"Driver arrived for order {push.order_id} at {push.location}")
        self._state.last_arrival = push
        self._notify()

    # ------------------------------------------------------------------

    def _set_snapshot(self, snapshot: TrackingSnapshot) -> None:
        self._state.snapshot = snapshot
        self._state.error = None
        location = DriverLocation.from_snapshot(snapshot)
        if location is not None:
            self._state.driver_location = location
        self._snapshot_ready.set()
        self._notify()

    def _is_observed(self, order_id: str) -> bool:
        if order_id != self.observed_order_id:
            logger.debug(f"Dropping push for {order_id}, observing {self.observed_order_id}")
            return False
        return True

    def _parse(self, model: Any, payload: Any, event: str) -> Any:
        try:
            return model.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed '{event}' payload: {e}")
            return None

    def _notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self._state)
            except Exception as e:
                logger.error(f"Tracking state listener failed: {e}", exc_info=True)
