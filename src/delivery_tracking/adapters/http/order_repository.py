"""REST order repository."""

import logging
from typing import Any
from urllib.parse import quote

from pydantic import ValidationError

from delivery_tracking.adapters.http.backend_client import BackendHttpClient
from delivery_tracking.domain.errors import ApiError
from delivery_tracking.domain.models.order_summary import OrderDetail, OrderSummary
from delivery_tracking.domain.ports.order_repository import OrderRepository

logger = logging.getLogger(__name__)


def _unwrap_list(body: Any) -> list[Any]:
    """Accept both the paginated envelope ({data: [...]}) and a bare list."""
    if isinstance(body, dict):
        body = body.get("data")
    if isinstance(body, list):
        return body
    raise ApiError(None, "Malformed order list response")


class HttpOrderRepository(OrderRepository):
    """Reads the current user's orders from /orders."""

    def __init__(self, client: BackendHttpClient) -> None:
        """Initialize with the backend client."""
        self._client = client

    async def list_orders(self, page: int = 1) -> list[OrderSummary]:
        """Get one page of the user's orders."""
        body = await self._client.get_json("/orders", params={"page": page})
        items = _unwrap_list(body)
        try:
            return [OrderSummary.model_validate(item) for item in items]
        except ValidationError as e:
            logger.warning(f"Malformed order in list response: {e}")
            raise ApiError(None, "Malformed order list response") from e

    async def get_order(self, order_id: str) -> OrderDetail:
        """Get the full detail of one order."""
        body = await self._client.get_json(f"/orders/{quote(order_id, safe='')}")
        try:
            return OrderDetail.model_validate(body)
        except ValidationError as e:
            logger.warning(f"Malformed order response for {order_id}: {e}")
            raise ApiError(None, "Malformed order response") from e
