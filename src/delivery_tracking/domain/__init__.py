"""Domain layer - order tracking models, ports and contracts."""

from delivery_tracking.domain.errors import ApiError
from delivery_tracking.domain.models import (
    ConnectionState,
    ConnectionStatus,
    DriverLocation,
    MembershipStatus,
    OrderSummary,
    TrackingSnapshot,
)
from delivery_tracking.domain.ports import (
    OrderRepository,
    TokenStore,
    TrackingRepository,
)

__all__ = [
    "ApiError",
    "ConnectionState",
    "ConnectionStatus",
    "DriverLocation",
    "MembershipStatus",
    "OrderRepository",
    "OrderSummary",
    "TokenStore",
    "TrackingRepository",
    "TrackingSnapshot",
]
