"""Room membership domain models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class MembershipStatus(Enum):
    """Subscription status of one order room."""

    PENDING = "PENDING"  # Requested while the socket was not connected
    JOINED = "JOINED"


class MembershipDelta(BaseModel):
    """Result of synchronizing room membership with a set of order ids.

    Contains the ids that were joined and left, both sorted.
    """

    model_config = ConfigDict(frozen=True)

    to_join: tuple[str, ...] = ()
    to_leave: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        """Return True if nothing changed."""
        return not self.to_join and not self.to_leave
