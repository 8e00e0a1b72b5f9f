"""Domain models for order tracking."""

from delivery_tracking.domain.models.connection_state import ConnectionState, ConnectionStatus
from delivery_tracking.domain.models.driver_location import DriverLocation
from delivery_tracking.domain.models.error_details import ErrorDetails
from delivery_tracking.domain.models.order_summary import (
    PROGRESS_STEPS,
    TERMINAL_STATUSES,
    TRACKABLE_STATUSES,
    OrderDetail,
    OrderStatusUpdate,
    OrderSummary,
    is_terminal,
    is_trackable,
    status_progress,
)
from delivery_tracking.domain.models.push_events import (
    DriverArrivedPush,
    DriverLocationPush,
    TrackingResyncPush,
    TrackingStatusPush,
)
from delivery_tracking.domain.models.room_membership import MembershipDelta, MembershipStatus
from delivery_tracking.domain.models.tracking_snapshot import (
    DeliveryAddress,
    DriverInfo,
    DriverPosition,
    RestaurantSummary,
    TrackingSnapshot,
)

__all__ = [
    "PROGRESS_STEPS",
    "TERMINAL_STATUSES",
    "TRACKABLE_STATUSES",
    "ConnectionState",
    "ConnectionStatus",
    "DeliveryAddress",
    "DriverArrivedPush",
    "DriverInfo",
    "DriverLocation",
    "DriverLocationPush",
    "DriverPosition",
    "ErrorDetails",
    "MembershipDelta",
    "MembershipStatus",
    "OrderDetail",
    "OrderStatusUpdate",
    "OrderSummary",
    "RestaurantSummary",
    "TrackingResyncPush",
    "TrackingSnapshot",
    "TrackingStatusPush",
    "is_terminal",
    "is_trackable",
    "status_progress",
]
