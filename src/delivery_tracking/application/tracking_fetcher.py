"""Fetches the initial tracking snapshot over REST and the socket in parallel."""

import asyncio
import logging
from typing import Any

from pydantic import ValidationError

from delivery_tracking.application import socket_events
from delivery_tracking.application.tracking_reconciler import TrackingReconciler
from delivery_tracking.domain.contracts.realtime_session import RealtimeSessionProtocol
from delivery_tracking.domain.errors import ApiError
from delivery_tracking.domain.models.push_events import TrackingResyncPush
from delivery_tracking.domain.ports.tracking_repository import TrackingRepository

logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Session expired. Please log in again."
FETCH_FAILED_MESSAGE = "Failed to load order tracking"


def describe_fetch_error(error: Exception) -> str:
    """Map a failed tracking fetch to the message shown to the user."""
    if isinstance(error, ApiError):
        if error.is_auth_error:
            return SESSION_EXPIRED_MESSAGE
        if error.message:
            return error.message
    return FETCH_FAILED_MESSAGE


class TrackingFetcher:
    """Races a REST fetch against a socket request for the first snapshot.

    Whichever answer arrives first fills the snapshot and a later one
    overwrites it. If nothing has arrived when the fallback timer fires, the
    REST fetch is issued once more.
    """

    def __init__(
        self,
        repository: TrackingRepository,
        session: RealtimeSessionProtocol,
        reconciler: TrackingReconciler,
        fallback_seconds: float = 3.0,
    ) -> None:
        """Initialize the fetcher.

        Args:
            repository: REST source of tracking snapshots.
            session: Tracking namespace session used for ack requests.
            reconciler: Receives snapshots and errors.
            fallback_seconds: Delay before the REST fetch is retried when no
                snapshot arrived.
        """
        self._repository = repository
        self._session = session
        self._reconciler = reconciler
        self._fallback_seconds = fallback_seconds
        self._timer: asyncio.TimerHandle | None = None
        self._tasks: set[asyncio.Task] = set()
        self._active = True
        self._fallback_used = False

    @property
    def has_pending_fallback(self) -> bool:
        """True while the fallback timer is armed."""
        return self._timer is not None

    async def fetch_initial(self, order_id: str) -> None:
        """Start both fetch paths for an order and arm the fallback timer."""
        self._active = True
        self._cancel_timer()
        self._fallback_used = False
        self._spawn_rest(order_id)

        loop = asyncio.get_running_loop()
        self._timer = loop.call_later(self._fallback_seconds, self._on_fallback_timer, order_id)

        if self._session.is_connected:
            await self.request_via_socket(order_id)

    async def request_via_socket(self, order_id: str) -> bool:
        """Ask the server for the snapshot, delivered through the acknowledgment."""

        def on_ack(response: Any) -> None:
            self._on_socket_response(order_id, response)

        return await self._session.request(socket_events.GET_ORDER_TRACKING, order_id, on_ack)

    async def fetch_via_rest(self, order_id: str) -> None:
        """Fetch the snapshot over REST, recording a user-facing error on failure."""
        try:
            snapshot = await self._repository.get_tracking(order_id)
        except ApiError as e:
            if self._is_current(order_id):
                logger.warning(f"REST tracking fetch for {order_id} failed: {e}")
                self._reconciler.set_error(describe_fetch_error(e))
            return
        except Exception as e:
            if self._is_current(order_id):
                logger.error(f"Unexpected error fetching tracking for {order_id}: {e}", exc_info=True)
                self._reconciler.set_error(describe_fetch_error(e))
            return

        if self._is_current(order_id):
            self._reconciler.apply_snapshot(order_id, snapshot)
            logger.debug(f"Snapshot for {order_id} loaded over REST")

    def fallback_to_rest(self, order_id: str) -> bool:
        """Start the fallback REST fetch in the background.

        Only one fallback runs per fetch_initial(), whether it comes from the
        timer or from socket errors.

        Returns:
            False if the fallback was already used.
        """
        if self._fallback_used:
            logger.debug(f"Fallback fetch for {order_id} already issued")
            return False
        self._fallback_used = True
        self._spawn_rest(order_id)
        return True

    async def refresh(self) -> None:
        """Re-fetch the observed order: socket when connected, REST otherwise."""
        order_id = self._reconciler.observed_order_id
        if order_id is None:
            return
        if self._session.is_connected and await self.request_via_socket(order_id):
            return
        await self.fetch_via_rest(order_id)

    def cancel(self) -> None:
        """Stop the fallback timer and discard results still in flight."""
        self._active = False
        self._cancel_timer()

    def _spawn_rest(self, order_id: str) -> None:
        task = asyncio.create_task(self.fetch_via_rest(order_id), name=f"tracking-rest:{order_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _on_fallback_timer(self, order_id: str) -> None:
        self._timer = None
        if not self._is_current(order_id) or self._reconciler.snapshot is not None:
            return
        if self.fallback_to_rest(order_id):
            logger.info(f"No snapshot for {order_id} after {self._fallback_seconds}s, retried REST")

    def _on_socket_response(self, order_id: str, response: Any) -> None:
        if not self._is_current(order_id):
            return
        try:
            push = TrackingResyncPush.model_validate(response or {})
        except ValidationError as e:
            logger.warning(f"Ignoring malformed tracking ack for {order_id}: {e}")
            return
        if push.data is None:
            logger.debug(f"Tracking ack for {order_id} carried no data")
            return
        self._reconciler.apply_snapshot(order_id, push.data)
        logger.debug(f"Snapshot for {order_id} loaded over socket")

    def _is_current(self, order_id: str) -> bool:
        return self._active and self._reconciler.observed_order_id == order_id

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
