"""Protocol for a realtime (socket) session bound to one namespace."""

from collections.abc import Awaitable, Callable
from typing import Any, Protocol

from delivery_tracking.domain.models.connection_state import ConnectionState

EventHandler = Callable[[Any], Awaitable[None] | None]
AsyncHook = Callable[[], Awaitable[None]]
AckCallback = Callable[[Any], None]


class RealtimeSessionProtocol(Protocol):
    """One persistent socket connection to a namespace.

    Connection problems are reported through state and hooks, never raised.
    """

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        ...

    @property
    def is_connected(self) -> bool:
        """True while the namespace is connected."""
        ...

    async def open(self) -> None:
        """Start connecting. Returns without waiting for the handshake."""
        ...

    async def close(self) -> None:
        """Run close hooks and terminate the socket. Idempotent."""
        ...

    def on(self, event: str, handler: EventHandler) -> None:
        """Register a handler for a server-to-client event.

        Args:
            event: The event name.
            handler: Called with the event payload; may be sync or async.
        """
        ...

    def add_connect_hook(self, hook: AsyncHook) -> None:
        """Register a hook awaited on every (re)connect, in registration order."""
        ...

    def add_close_hook(self, hook: AsyncHook) -> None:
        """Register a hook awaited by close() while still connected."""
        ...

    def add_disconnect_hook(self, hook: Callable[[], None]) -> None:
        """Register a hook called on every disconnect."""
        ...

    def add_error_hook(self, hook: Callable[[str], None]) -> None:
        """Register a hook called with the reason of every connection error."""
        ...

    def add_state_listener(self, listener: Callable[[ConnectionState], None]) -> None:
        """Register a listener called on every connection state change."""
        ...

    async def emit(self, event: str, payload: Any = None) -> bool:
        """Send a fire-and-forget event.

        Returns:
            True if the event was handed to the transport, False otherwise.
        """
        ...

    async def request(self, event: str, payload: Any, on_ack: AckCallback) -> bool:
        """Send an event whose acknowledgment is delivered to on_ack.

        The acknowledgment may never arrive (e.g. on disconnect).

        Returns:
            True if the event was handed to the transport, False otherwise.
        """
        ...
