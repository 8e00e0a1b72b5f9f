"""Application layer - tracking and order list use cases."""

from delivery_tracking.application.list_membership import ListMembershipSynchronizer
from delivery_tracking.application.order_list import OrderListState
from delivery_tracking.application.order_tracking_service import OrderTrackingService
from delivery_tracking.application.orders_channel import OrdersChannel
from delivery_tracking.application.orders_list_service import OrdersListService
from delivery_tracking.application.payment_status_poller import PaymentStatusPoller
from delivery_tracking.application.room_membership import RoomMembershipTracker
from delivery_tracking.application.tracking_fetcher import TrackingFetcher
from delivery_tracking.application.tracking_reconciler import TrackingReconciler, TrackingState

__all__ = [
    "ListMembershipSynchronizer",
    "OrderListState",
    "OrderTrackingService",
    "OrdersChannel",
    "OrdersListService",
    "PaymentStatusPoller",
    "RoomMembershipTracker",
    "TrackingFetcher",
    "TrackingReconciler",
    "TrackingState",
]
