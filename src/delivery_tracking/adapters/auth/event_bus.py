"""In-process bus for authentication events."""

import logging
from collections.abc import Callable
from enum import Enum

logger = logging.getLogger(__name__)


class AuthEvent(Enum):
    """Authentication events published by the HTTP layer."""

    SESSION_EXPIRED = "SESSION_EXPIRED"


class AuthEventBus:
    """Delivers auth events to subscribers, isolating their failures."""

    def __init__(self) -> None:
        """Initialize with no subscribers."""
        self._subscribers: dict[AuthEvent, list[Callable[[], None]]] = {}

    def subscribe(self, event: AuthEvent, callback: Callable[[], None]) -> None:
        """Register a callback for an event."""
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: AuthEvent, callback: Callable[[], None]) -> None:
        """Remove a callback. Unknown callbacks are ignored."""
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def publish(self, event: AuthEvent) -> None:
        """Call every subscriber of an event."""
        callbacks = list(self._subscribers.get(event, []))
        logger.info(f"Publishing auth event {event.value} to {len(callbacks)} subscriber(s)")
        for callback in callbacks:
            try:
                callback()
            except Exception as e:
                logger.error(f"Auth event subscriber failed for {event.value}: {e}", exc_info=True)
