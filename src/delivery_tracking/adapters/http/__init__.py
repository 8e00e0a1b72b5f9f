"""REST adapters."""

from delivery_tracking.adapters.http.backend_client import BackendHttpClient
from delivery_tracking.adapters.http.order_repository import HttpOrderRepository
from delivery_tracking.adapters.http.tracking_repository import HttpTrackingRepository

__all__ = ["BackendHttpClient", "HttpOrderRepository", "HttpTrackingRepository"]
