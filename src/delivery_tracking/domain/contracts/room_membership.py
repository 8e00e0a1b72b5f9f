"""Protocol for room membership tracking."""

from typing import Protocol


class RoomMembershipProtocol(Protocol):
    """Protocol for joining and leaving per-order rooms."""

    async def join(self, entity_id: str) -> None:
        """Join the room of an order, queueing the join while disconnected.

        Args:
            entity_id: The order identifier.
        """
        ...

    async def leave(self, entity_id: str) -> None:
        """Leave the room of an order.

        Args:
            entity_id: The order identifier.
        """
        ...
