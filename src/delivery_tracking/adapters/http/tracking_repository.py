"""REST tracking repository."""

import logging
from urllib.parse import quote

from pydantic import ValidationError

from delivery_tracking.adapters.http.backend_client import BackendHttpClient
from delivery_tracking.domain.errors import ApiError
from delivery_tracking.domain.models.tracking_snapshot import TrackingSnapshot
from delivery_tracking.domain.ports.tracking_repository import TrackingRepository

logger = logging.getLogger(__name__)


class HttpTrackingRepository(TrackingRepository):
    """Reads tracking snapshots from GET /tracking/order/{id}."""

    def __init__(self, client: BackendHttpClient) -> None:
        """Initialize with the backend client."""
        self._client = client

    async def get_tracking(self, order_id: str) -> TrackingSnapshot:
        """Get the current tracking snapshot for an order."""
        body = await self._client.get_json(f"/tracking/order/{quote(order_id, safe='')}")
        try:
            return TrackingSnapshot.model_validate(body)
        except ValidationError as e:
            logger.warning(f"Malformed tracking response for {order_id}: {e}")
            raise ApiError(None, "Malformed tracking response") from e
