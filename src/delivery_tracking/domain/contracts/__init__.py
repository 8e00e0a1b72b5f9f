"""Domain contracts (protocols) implemented by application and adapter components."""

from delivery_tracking.domain.contracts.realtime_session import (
    AckCallback,
    AsyncHook,
    EventHandler,
    RealtimeSessionProtocol,
)
from delivery_tracking.domain.contracts.room_membership import RoomMembershipProtocol
from delivery_tracking.domain.contracts.status_poller import StatusPollerProtocol

__all__ = [
    "AckCallback",
    "AsyncHook",
    "EventHandler",
    "RealtimeSessionProtocol",
    "RoomMembershipProtocol",
    "StatusPollerProtocol",
]
