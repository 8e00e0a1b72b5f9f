"""Order repository port."""

from typing import Protocol

from delivery_tracking.domain.models.order_summary import OrderDetail, OrderSummary


class OrderRepository(Protocol):
    """Port for reading the current user's orders."""

    async def list_orders(self, page: int = 1) -> list[OrderSummary]:
        """Get one page of the user's orders."""
        ...

    async def get_order(self, order_id: str) -> OrderDetail:
        """Get the full detail of one order."""
        ...
