"""Order domain models for list and detail contexts."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel

from delivery_tracking.domain.models.tracking_snapshot import (
    WIRE_MODEL_CONFIG,
    RestaurantSummary,
)

TERMINAL_STATUSES = frozenset({"DELIVERED", "CANCELLED"})

# Statuses during which a driver is on the way and a map view makes sense
TRACKABLE_STATUSES = frozenset({"PICKED_UP", "IN_TRANSIT", "OUT_FOR_DELIVERY"})

PROGRESS_STEPS = (
    "CONFIRMED",
    "PREPARING",
    "READY",
    "PICKED_UP",
    "IN_TRANSIT",
    "DELIVERED",
)


def is_terminal(status: str) -> bool:
    """Return True if no further status changes are expected."""
    return status in TERMINAL_STATUSES


def is_trackable(status: str) -> bool:
    """Return True if the order is out with a driver."""
    return status in TRACKABLE_STATUSES


def status_progress(status: str) -> int:
    """Return the index of status in the progress steps, 0 when unknown."""
    try:
        return PROGRESS_STEPS.index(status)
    except ValueError:
        return 0


class OrderSummary(BaseModel):
    """An order as shown in the order list."""

    model_config = WIRE_MODEL_CONFIG

    id: str
    status: str
    order_number: int | None = None
    total: float | None = None
    payment_method: str | None = None
    created_at: datetime | None = None
    restaurant: RestaurantSummary | None = None

    @property
    def is_active(self) -> bool:
        """Return True while the order can still change status."""
        return not is_terminal(self.status)

    def with_status(self, status: str) -> "OrderSummary":
        """Return a copy with only the status changed."""
        return self.model_copy(update={"status": status})


class OrderDetail(BaseModel):
    """Full order detail, used for payment status polling."""

    model_config = WIRE_MODEL_CONFIG

    id: str
    status: str
    payment_status: str | None = None
    payment_method: str | None = None
    total: float | None = None

    @property
    def is_paid(self) -> bool:
        """Return True once the backend confirmed the payment."""
        return self.payment_status == "PAID"


class OrderStatusUpdate(BaseModel):
    """Status change pushed on the orders namespace."""

    model_config = WIRE_MODEL_CONFIG

    order_id: str
    status: str
    order: dict[str, Any] | None = None
