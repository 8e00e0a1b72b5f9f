"""Keeps room membership in line with the set of active orders."""

import logging
from collections.abc import Iterable

from delivery_tracking.domain.contracts.room_membership import RoomMembershipProtocol
from delivery_tracking.domain.models.room_membership import MembershipDelta

logger = logging.getLogger(__name__)


class ListMembershipSynchronizer:
    """Joins rooms of orders that became active and leaves rooms of those that did not."""

    def __init__(self, rooms: RoomMembershipProtocol) -> None:
        """Initialize the synchronizer.

        Args:
            rooms: Membership tracker of the orders namespace.
        """
        self._rooms = rooms
        self._previous: frozenset[str] = frozenset()

    @property
    def previous(self) -> frozenset[str]:
        """The active id set from the last sync."""
        return self._previous

    async def sync(self, current_active_ids: Iterable[str]) -> MembershipDelta:
        """Apply the difference between the last and the current active set.

        Args:
            current_active_ids: Ids of orders that are currently active.

        Returns:
            The ids joined and left by this call.
        """
        current = frozenset(current_active_ids)
        previous = self._previous
        delta = MembershipDelta(
            to_join=tuple(sorted(current - previous)),
            to_leave=tuple(sorted(previous - current)),
        )
        # Stored first so an overlapping sync diffs against this one
        self._previous = current

        for order_id in delta.to_join:
            await self._rooms.join(order_id)
        for order_id in delta.to_leave:
            await self._rooms.leave(order_id)

        if not delta.is_empty:
            logger.info(
                f"Room sync: joined {len(delta.to_join)}, left {len(delta.to_leave)}, "
                f"active {len(current)}"
            )
        return delta

    async def teardown(self) -> None:
        """Leave every room joined through this synchronizer."""
        previous = self._previous
        self._previous = frozenset()
        for order_id in sorted(previous):
            await self._rooms.leave(order_id)
