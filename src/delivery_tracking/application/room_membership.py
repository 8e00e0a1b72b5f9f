"""Room membership tracking for one realtime session."""

import logging

from delivery_tracking.domain.contracts.realtime_session import RealtimeSessionProtocol
from delivery_tracking.domain.contracts.room_membership import RoomMembershipProtocol
from delivery_tracking.domain.models.room_membership import MembershipStatus

logger = logging.getLogger(__name__)


class RoomMembershipTracker(RoomMembershipProtocol):
    """Tracks which order rooms this client belongs to and replays them on reconnect.

    Joins requested while disconnected are kept as PENDING and sent on the next
    connect. Every (re)connect emits exactly one join per known order id.
    """

    def __init__(
        self, session: RealtimeSessionProtocol, join_event: str, leave_event: str
    ) -> None:
        """Initialize the tracker and hook it into the session lifecycle.

        Args:
            session: The realtime session the rooms live on.
            join_event: Event emitted to join a room (e.g. "subscribeToOrder").
            leave_event: Event emitted to leave a room (e.g. "unsubscribeFromOrder").
        """
        self._session = session
        self._join_event = join_event
        self._leave_event = leave_event
        self._memberships: dict[str, MembershipStatus] = {}
        session.add_connect_hook(self.reconcile_on_reconnect)
        session.add_close_hook(self.leave_all)

    def status_of(self, order_id: str) -> MembershipStatus | None:
        """Return the membership status of an order, None if not a member."""
        return self._memberships.get(order_id)

    @property
    def joined_ids(self) -> set[str]:
        """Order ids whose join has been sent on the current connection."""
        return {k for k, v in self._memberships.items() if v is MembershipStatus.JOINED}

    @property
    def pending_ids(self) -> set[str]:
        """Order ids waiting for the next connect."""
        return {k for k, v in self._memberships.items() if v is MembershipStatus.PENDING}

    async def join(self, order_id: str) -> None:
        """Join an order room, or queue the join until the session connects."""
        if order_id in self._memberships:
            return

        if self._session.is_connected:
            # Marked before the emit so a concurrent join for the same id is a no-op
            self._memberships[order_id] = MembershipStatus.JOINED
            await self._session.emit(self._join_event, order_id)
            logger.debug(f"Joined room {order_id}")
        else:
            self._memberships[order_id] = MembershipStatus.PENDING
            logger.debug(f"Queued join for room {order_id} until connected")

    async def leave(self, order_id: str) -> None:
        """Leave an order room. Only rooms joined on a live connection emit a leave."""
        status = self._memberships.pop(order_id, None)
        if status is MembershipStatus.JOINED and self._session.is_connected:
            await self._session.emit(self._leave_event, order_id)
            logger.debug(f"Left room {order_id}")

    async def reconcile_on_reconnect(self) -> None:
        """Re-send joins after a (re)connect and promote pending joins."""
        joined = sorted(self.joined_ids)
        pending = sorted(self.pending_ids)

        for order_id in joined:
            if self._memberships.get(order_id) is MembershipStatus.JOINED:
                await self._session.emit(self._join_event, order_id)

        for order_id in pending:
            # Skip ids that were left while an earlier emit was in flight
            if self._memberships.get(order_id) is not MembershipStatus.PENDING:
                continue
            self._memberships[order_id] = MembershipStatus.JOINED
            await self._session.emit(self._join_event, order_id)

        if joined or pending:
            logger.info(f"Re-joined {len(joined)} room(s), promoted {len(pending)} pending join(s)")

    async def leave_all(self) -> None:
        """Leave every room and forget all memberships."""
        for order_id in list(self._memberships):
            await self.leave(order_id)
        self._memberships.clear()
