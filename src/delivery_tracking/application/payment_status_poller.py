"""Polls an order until its payment is confirmed."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Awaitable, Callable

from delivery_tracking.domain.contracts.status_poller import StatusPollerProtocol
from delivery_tracking.domain.errors import ApiError
from delivery_tracking.domain.models.order_summary import OrderDetail
from delivery_tracking.domain.ports.order_repository import OrderRepository

logger = logging.getLogger(__name__)


class PaymentStatusPoller(StatusPollerProtocol):
    """Polls GET /orders/{id} until the payment status is PAID."""

    def __init__(
        self,
        repository: OrderRepository,
        order_id: str,
        on_paid: Callable[[OrderDetail], Awaitable[None] | None],
        interval_seconds: float = 5.0,
        max_attempts: int | None = None,
    ) -> None:
        """Initialize the poller.

        Args:
            repository: Order repository used for the detail lookups.
            order_id: The order waiting for payment confirmation.
            on_paid: Called once with the order detail when it is paid.
            interval_seconds: Delay between two checks.
            max_attempts: Give up after this many checks; None polls until stopped.
        """
        self.repository = repository
        self.order_id = order_id
        self.on_paid = on_paid
        self.interval_seconds = interval_seconds
        self.max_attempts = max_attempts
        self.attempts = 0
        self.paid = False
        self._task: asyncio.Task | None = None

    @property
    def is_running(self) -> bool:
        """True while the polling task is alive."""
        return self._task is not None and not self._task.done()

    async def start(self) -> None:
        """Start polling."""
        if self.is_running:
            logger.warning(f"Payment poller for {self.order_id} already running")
            return
        self._task = asyncio.create_task(self._poll_loop())
        logger.info(f"Started payment poller for order {self.order_id}")

    async def stop(self) -> None:
        """Stop polling."""
        if self._task and not self._task.done():
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                logger.info(f"Payment poller for {self.order_id} cancelled")
            logger.info(f"Stopped payment poller for order {self.order_id}")

    async def _poll_loop(self) -> None:
        """Main polling loop."""
        try:
            while self.max_attempts is None or self.attempts < self.max_attempts:
                await asyncio.sleep(self.interval_seconds)
                if await self._check_once():
                    return
            logger.warning(
                f"Payment for order {self.order_id} not confirmed after {self.attempts} checks"
            )
        except asyncio.CancelledError:
            logger.info(f"Payment poller for {self.order_id} cancelled")
            raise

    async def _check_once(self) -> bool:
        """Fetch the order once. Returns True when it is paid."""
        self.attempts += 1
        try:
            detail = await self.repository.get_order(self.order_id)
        except ApiError as e:
            logger.warning(f"Payment status check for {self.order_id} failed: {e}")
            return False

        if not detail.is_paid:
            logger.debug(f"Order {self.order_id} payment status: {detail.payment_status}")
            return False

        self.paid = True
        logger.info(f"Payment confirmed for order {self.order_id}")
        result = self.on_paid(detail)
        if inspect.isawaitable(result):
            await result
        return True
