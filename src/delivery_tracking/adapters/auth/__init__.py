"""Authentication adapters."""

from delivery_tracking.adapters.auth.auth_session import AuthSession
from delivery_tracking.adapters.auth.event_bus import AuthEvent, AuthEventBus
from delivery_tracking.adapters.auth.memory_token_store import InMemoryTokenStore

__all__ = ["AuthEvent", "AuthEventBus", "AuthSession", "InMemoryTokenStore"]
