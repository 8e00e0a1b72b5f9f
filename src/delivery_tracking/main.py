"""Main entry point: watch the user's orders and optionally track one live."""

import argparse
import asyncio
import logging
import sys

import aiohttp

from delivery_tracking.adapters.auth import AuthEvent, AuthEventBus, AuthSession, InMemoryTokenStore
from delivery_tracking.adapters.config import AppConfig
from delivery_tracking.adapters.http import (
    BackendHttpClient,
    HttpOrderRepository,
    HttpTrackingRepository,
)
from delivery_tracking.adapters.realtime import SocketIoSession
from delivery_tracking.application import (
    OrdersChannel,
    OrdersListService,
    OrderTrackingService,
    PaymentStatusPoller,
    TrackingState,
)
from delivery_tracking.domain.models import (
    ConnectionState,
    OrderDetail,
    is_trackable,
    status_progress,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
    stream=sys.stderr,
)

logger = logging.getLogger(__name__)


def _log_connection(name: str):
    def listener(state: ConnectionState) -> None:
        suffix = f" ({state.last_error})" if state.last_error else ""
        logger.info(f"[{name}] connection {state.status.value}{suffix}")

    return listener


def _log_tracking(state: TrackingState) -> None:
    snapshot = state.snapshot
    if snapshot is None:
        if state.error:
            logger.warning(f"[tracking] {state.error}")
        return
    driver = snapshot.driver.name if snapshot.driver else "no driver yet"
    map_hint = " (driver on the way)" if is_trackable(snapshot.status) else ""
    location = state.driver_location
    position = f" at {location.latitude:.5f},{location.longitude:.5f}" if location else ""
    logger.info(
        f"[tracking] {snapshot.order_id}: {snapshot.status} "
        f"step {status_progress(snapshot.status)}{map_hint}, {driver}{position}"
    )


async def run(config: AppConfig, order_id: str | None, watch_payment: bool) -> None:
    """Wire everything up and run until cancelled."""
    token_store = InMemoryTokenStore(config.access_token, config.refresh_token)
    auth_events = AuthEventBus()
    auth_session = AuthSession(token_store, auth_events)
    stop = asyncio.Event()
    auth_events.subscribe(AuthEvent.SESSION_EXPIRED, stop.set)

    if not auth_session.is_authenticated:
        logger.warning("No ACCESS_TOKEN configured, backend calls will likely be rejected")

    async with aiohttp.ClientSession() as http_session:
        client = BackendHttpClient(http_session, config, token_store, auth_events)
        order_repo = HttpOrderRepository(client)
        tracking_repo = HttpTrackingRepository(client)
        token = token_store.get_access_token()

        orders_session = SocketIoSession.from_config(config, config.orders_namespace, token)
        orders_session.add_state_listener(_log_connection("orders"))
        orders = OrdersListService(OrdersChannel(orders_session), order_repo)

        tracking: OrderTrackingService | None = None
        poller: PaymentStatusPoller | None = None
        if order_id:
            tracking_session = SocketIoSession.from_config(
                config, config.tracking_namespace, token
            )
            tracking_session.add_state_listener(_log_connection("tracking"))
            tracking = OrderTrackingService(
                tracking_session, tracking_repo, config.tracking_fallback_seconds
            )
            tracking.add_listener(_log_tracking)

            if watch_payment:

                def on_paid(detail: OrderDetail) -> None:
                    logger.info(f"[payment] order {detail.id} paid ({detail.payment_method})")

                poller = PaymentStatusPoller(
                    order_repo, order_id, on_paid, config.payment_poll_interval_seconds
                )

        try:
            await orders.start()
            if orders.error:
                logger.error(f"[orders] {orders.error}")
            else:
                logger.info(
                    f"[orders] {len(orders.orders)} order(s), {len(orders.active_ids)} active"
                )
            if tracking is not None and order_id:
                await tracking.start(order_id)
            if poller is not None:
                await poller.start()

            await stop.wait()
            logger.info("Session expired, shutting down")
        finally:
            if poller is not None:
                await poller.stop()
            if tracking is not None:
                await tracking.close()
            await orders.close()
            auth_session.close()


def main() -> None:
    """Application entry point."""
    parser = argparse.ArgumentParser(
        description="Watch your delivery orders and track one of them live.",
    )
    parser.add_argument("order_id", nargs="?", help="Order to track live (optional)")
    parser.add_argument(
        "--watch-payment",
        action="store_true",
        help="Also poll the order until its payment is confirmed",
    )
    args = parser.parse_args()

    config = AppConfig()
    logging.getLogger().setLevel(config.log_level)

    try:
        asyncio.run(run(config, args.order_id, args.watch_payment))
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()
