"""Orders namespace channel: per-order rooms and status pushes."""

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Any

from pydantic import ValidationError

from delivery_tracking.application import socket_events
from delivery_tracking.application.room_membership import RoomMembershipTracker
from delivery_tracking.domain.contracts.realtime_session import RealtimeSessionProtocol
from delivery_tracking.domain.contracts.room_membership import RoomMembershipProtocol
from delivery_tracking.domain.models.connection_state import ConnectionState
from delivery_tracking.domain.models.order_summary import OrderStatusUpdate

logger = logging.getLogger(__name__)

StatusListener = Callable[[OrderStatusUpdate], Awaitable[None] | None]


class OrdersChannel(RoomMembershipProtocol):
    """Wraps the orders namespace session with room tracking.

    Rooms are held for two owners, the order list (join/leave) and the
    focused order (focus). A room is only left once neither holds it.

    Status pushes are handed to a single listener that can be swapped at any
    time; the current listener is looked up when the push arrives.
    """

    def __init__(self, session: RealtimeSessionProtocol) -> None:
        """Initialize the channel and register the status push handler."""
        self._session = session
        self.rooms = RoomMembershipTracker(
            session, socket_events.JOIN_ORDER, socket_events.LEAVE_ORDER
        )
        self._status_listener: StatusListener | None = None
        self._focused_order_id: str | None = None
        self._listed_ids: set[str] = set()
        session.on(socket_events.ORDER_STATUS_UPDATE, self._on_status_update)

    @property
    def is_connected(self) -> bool:
        """True while the orders socket is connected."""
        return self._session.is_connected

    @property
    def connection_state(self) -> ConnectionState:
        """Connection state of the orders socket."""
        return self._session.state

    @property
    def focused_order_id(self) -> str | None:
        """Order the user is currently looking at, if any."""
        return self._focused_order_id

    def set_status_listener(self, listener: StatusListener | None) -> None:
        """Replace the listener that receives status pushes."""
        self._status_listener = listener

    async def focus(self, order_id: str | None) -> None:
        """Follow a single order, leaving the room of the previously focused one."""
        previous = self._focused_order_id
        if previous == order_id:
            return
        self._focused_order_id = order_id
        if previous is not None and previous not in self._listed_ids:
            await self.rooms.leave(previous)
        if order_id is not None:
            await self.rooms.join(order_id)

    async def join(self, order_id: str) -> None:
        """Join the room of a listed order."""
        self._listed_ids.add(order_id)
        await self.rooms.join(order_id)

    async def leave(self, order_id: str) -> None:
        """Release a listed order's room, keeping it while the order is focused."""
        self._listed_ids.discard(order_id)
        if order_id == self._focused_order_id:
            logger.debug(f"Keeping room {order_id} joined for the focused order")
            return
        await self.rooms.leave(order_id)

    async def open(self) -> None:
        """Open the orders socket."""
        await self._session.open()

    async def close(self) -> None:
        """Close the orders socket, leaving all rooms first."""
        await self._session.close()
        self._focused_order_id = None
        self._listed_ids.clear()

    async def _on_status_update(self, payload: Any) -> None:
        try:
            update = OrderStatusUpdate.model_validate(payload)
        except ValidationError as e:
            logger.warning(f"Ignoring malformed status update: {e}")
            return

        listener = self._status_listener
        if listener is None:
            logger.debug(f"No listener for status update of {update.order_id}")
            return
        result = listener(update)
        if inspect.isawaitable(result):
            await result
