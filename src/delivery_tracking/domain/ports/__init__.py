"""Ports (interfaces) for the ports-and-adapters architecture."""

from delivery_tracking.domain.ports.order_repository import OrderRepository
from delivery_tracking.domain.ports.token_store import TokenStore
from delivery_tracking.domain.ports.tracking_repository import TrackingRepository

__all__ = [
    "OrderRepository",
    "TokenStore",
    "TrackingRepository",
]
