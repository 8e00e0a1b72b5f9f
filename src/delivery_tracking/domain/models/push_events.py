"""Push event payloads received on the tracking namespace."""

from pydantic import BaseModel

from delivery_tracking.domain.models.driver_location import DriverLocation
from delivery_tracking.domain.models.tracking_snapshot import (
    WIRE_MODEL_CONFIG,
    TrackingSnapshot,
)


class DriverLocationPush(DriverLocation):
    """driverLocation event: a location sample for one order."""

    order_id: str

    def to_location(self) -> DriverLocation:
        """Strip the routing id, keeping only the location sample."""
        return DriverLocation.model_validate(self.model_dump(exclude={"order_id"}))


class TrackingStatusPush(BaseModel):
    """orderStatusUpdate event on the tracking namespace."""

    model_config = WIRE_MODEL_CONFIG

    order_id: str
    status: str


class TrackingResyncPush(BaseModel):
    """orderTracking event: the server replaces the whole snapshot."""

    model_config = WIRE_MODEL_CONFIG

    data: TrackingSnapshot | None = None


class DriverArrivedPush(BaseModel):
    """driverArrived event. Informational only."""

    model_config = WIRE_MODEL_CONFIG

    order_id: str
    location: str | None = None
