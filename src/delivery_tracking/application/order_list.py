"""Client-side state of the user's order list."""

import logging

from delivery_tracking.domain.models.order_summary import OrderStatusUpdate, OrderSummary

logger = logging.getLogger(__name__)


class OrderListState:
    """Holds order summaries keyed by id, preserving list order."""

    def __init__(self) -> None:
        """Initialize an empty list."""
        self._orders: dict[str, OrderSummary] = {}

    @property
    def orders(self) -> list[OrderSummary]:
        """Current summaries in list order."""
        return list(self._orders.values())

    def get(self, order_id: str) -> OrderSummary | None:
        """Return the summary of an order, if listed."""
        return self._orders.get(order_id)

    def replace(self, orders: list[OrderSummary]) -> None:
        """Replace the whole list, e.g. after a REST load."""
        self._orders = {order.id: order for order in orders}

    def upsert(self, order: OrderSummary) -> None:
        """Insert a new order at the top, or replace an existing one in place."""
        if order.id in self._orders:
            self._orders[order.id] = order
        else:
            self._orders = {order.id: order, **self._orders}

    def apply_status_update(self, update: OrderStatusUpdate) -> bool:
        """Merge a pushed status into the matching summary.

        Returns:
            True if a listed order changed status.
        """
        current = self._orders.get(update.order_id)
        if current is None:
            logger.debug(f"Status update for unlisted order {update.order_id} ignored")
            return False
        if current.status == update.status:
            return False
        self._orders[update.order_id] = current.with_status(update.status)
        logger.info(f"Order {update.order_id}: {current.status} -> {update.status}")
        return True

    def active_ids(self) -> set[str]:
        """Ids of orders that are not delivered or cancelled."""
        return {order.id for order in self._orders.values() if order.is_active}
