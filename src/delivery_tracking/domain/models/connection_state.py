"""Connection state domain model."""

from dataclasses import dataclass
from enum import Enum


class ConnectionStatus(Enum):
    """Lifecycle status of a realtime session."""

    DISCONNECTED = "DISCONNECTED"
    CONNECTING = "CONNECTING"
    CONNECTED = "CONNECTED"
    ERROR = "ERROR"


@dataclass(frozen=True)
class ConnectionState:
    """Point-in-time view of one namespace connection.

    session_id is assigned by the server on connect and changes on every reconnect.
    """

    status: ConnectionStatus = ConnectionStatus.DISCONNECTED
    session_id: str | None = None
    last_error: str | None = None

    @property
    def is_connected(self) -> bool:
        """Return True when the session is connected."""
        return self.status is ConnectionStatus.CONNECTED
