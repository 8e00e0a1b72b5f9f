"""Tracking snapshot domain models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

WIRE_MODEL_CONFIG = ConfigDict(
    frozen=True,
    alias_generator=to_camel,
    populate_by_name=True,
    extra="ignore",
)


class DriverPosition(BaseModel):
    """Last known position of a driver as embedded in a snapshot."""

    model_config = WIRE_MODEL_CONFIG

    latitude: float
    longitude: float
    last_update: datetime | None = None


class DriverInfo(BaseModel):
    """Driver assigned to an order."""

    model_config = WIRE_MODEL_CONFIG

    id: str
    name: str
    phone: str | None = None
    vehicle_type: str | None = None
    vehicle_plate: str | None = None
    location: DriverPosition | None = None


class RestaurantSummary(BaseModel):
    """Restaurant preparing the order."""

    model_config = WIRE_MODEL_CONFIG

    id: str
    name: str
    address: str | None = None


class DeliveryAddress(BaseModel):
    """Address the order is delivered to."""

    model_config = WIRE_MODEL_CONFIG

    street: str
    number: str
    complement: str | None = None
    neighborhood: str | None = None
    city: str | None = None
    state: str | None = None


class TrackingSnapshot(BaseModel):
    """Materialized client-side view of one order's tracking state.

    Missing sub-records (no driver yet, no address) are None, which callers
    render as a degraded view rather than an error.
    """

    model_config = WIRE_MODEL_CONFIG

    order_id: str
    status: str
    driver: DriverInfo | None = None
    restaurant: RestaurantSummary | None = None
    delivery_address: DeliveryAddress | None = None
    estimated_delivery: datetime | None = None

    def with_status(self, status: str) -> "TrackingSnapshot":
        """Return a copy with only the status changed."""
        return self.model_copy(update={"status": status})

    def with_driver_position(self, position: DriverPosition) -> "TrackingSnapshot":
        """Return a copy whose driver location is replaced by position.

        Snapshots without a driver are returned unchanged.
        """
        if self.driver is None:
            return self
        driver = self.driver.model_copy(update={"location": position})
        return self.model_copy(update={"driver": driver})
