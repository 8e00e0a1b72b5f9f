"""Driver location domain model."""

from datetime import datetime

from pydantic import BaseModel

from delivery_tracking.domain.models.tracking_snapshot import (
    WIRE_MODEL_CONFIG,
    DriverPosition,
    TrackingSnapshot,
)


class DriverLocation(BaseModel):
    """Point-in-time location sample of a driver.

    Always replaced as a whole; samples are never merged.
    """

    model_config = WIRE_MODEL_CONFIG

    driver_id: str
    latitude: float
    longitude: float
    heading: float | None = None
    speed: float | None = None
    timestamp: datetime | None = None

    @classmethod
    def from_snapshot(cls, snapshot: TrackingSnapshot) -> "DriverLocation | None":
        """Derive the driver location embedded in a snapshot, if any."""
        driver = snapshot.driver
        if driver is None or driver.location is None:
            return None
        return cls(
            driver_id=driver.id,
            latitude=driver.location.latitude,
            longitude=driver.location.longitude,
            timestamp=driver.location.last_update,
        )

    def to_position(self) -> DriverPosition:
        """Convert to the position record embedded in snapshots."""
        return DriverPosition(
            latitude=self.latitude,
            longitude=self.longitude,
            last_update=self.timestamp,
        )
