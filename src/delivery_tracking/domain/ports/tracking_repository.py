"""Tracking repository port."""

from typing import Protocol

from delivery_tracking.domain.models.tracking_snapshot import TrackingSnapshot


class TrackingRepository(Protocol):
    """Port for fetching an order's tracking snapshot over REST."""

    async def get_tracking(self, order_id: str) -> TrackingSnapshot:
        """Get the current tracking snapshot for an order.

        Raises:
            ApiError: If the backend call fails.
        """
        ...
