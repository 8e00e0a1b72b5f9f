"""The user's order list, kept current by status pushes."""

import logging

from delivery_tracking.application.list_membership import ListMembershipSynchronizer
from delivery_tracking.application.order_list import OrderListState
from delivery_tracking.application.orders_channel import OrdersChannel
from delivery_tracking.domain.errors import ApiError
from delivery_tracking.domain.models.order_summary import OrderStatusUpdate, OrderSummary
from delivery_tracking.domain.ports.order_repository import OrderRepository

logger = logging.getLogger(__name__)

LOAD_FAILED_MESSAGE = "Failed to load orders"


class OrdersListService:
    """Loads the order list and keeps one room joined per active order."""

    def __init__(self, channel: OrdersChannel, repository: OrderRepository) -> None:
        """Initialize the service.

        Args:
            channel: Orders namespace channel.
            repository: REST source of the order list.
        """
        self._channel = channel
        self._repository = repository
        self._state = OrderListState()
        self._sync = ListMembershipSynchronizer(channel)
        self.error: str | None = None
        channel.set_status_listener(self.handle_status_update)

    @property
    def orders(self) -> list[OrderSummary]:
        """Current order summaries."""
        return self._state.orders

    @property
    def active_ids(self) -> set[str]:
        """Ids of orders still in progress."""
        return self._state.active_ids()

    @property
    def joined_ids(self) -> frozenset[str]:
        """Ids whose rooms were requested by the last sync."""
        return self._sync.previous

    async def start(self) -> None:
        """Load the list, then open the socket."""
        await self.load()
        await self._channel.open()

    async def load(self, page: int = 1) -> None:
        """Load the list over REST. Failures are recorded in error, not raised."""
        try:
            orders = await self._repository.list_orders(page)
        except ApiError as e:
            logger.warning(f"Loading orders failed: {e}")
            self.error = e.message or LOAD_FAILED_MESSAGE
            return

        self.error = None
        self._state.replace(orders)
        logger.info(f"Loaded {len(orders)} order(s), {len(self._state.active_ids())} active")
        await self._sync.sync(self._state.active_ids())

    async def add_order(self, order: OrderSummary) -> None:
        """Add a newly placed order (or replace a listed one)."""
        self._state.upsert(order)
        await self._sync.sync(self._state.active_ids())

    async def handle_status_update(self, update: OrderStatusUpdate) -> None:
        """Apply a status push and re-sync rooms if the active set changed."""
        if self._state.apply_status_update(update):
            await self._sync.sync(self._state.active_ids())

    async def close(self) -> None:
        """Leave all rooms and close the socket."""
        await self._sync.teardown()
        self._channel.set_status_listener(None)
        await self._channel.close()
