"""Signed-in state of the current user."""

import logging
from typing import Any

from delivery_tracking.adapters.auth.event_bus import AuthEvent, AuthEventBus
from delivery_tracking.domain.ports.token_store import TokenStore

logger = logging.getLogger(__name__)


class AuthSession:
    """Tracks whether a user is signed in and signs them out when the session expires."""

    def __init__(self, token_store: TokenStore, auth_events: AuthEventBus) -> None:
        """Initialize and subscribe to session expiry.

        Args:
            token_store: Where credentials are kept.
            auth_events: Bus on which the HTTP layer reports expiry.
        """
        self._token_store = token_store
        self._auth_events = auth_events
        self.user: dict[str, Any] | None = None
        auth_events.subscribe(AuthEvent.SESSION_EXPIRED, self._on_session_expired)

    @property
    def is_authenticated(self) -> bool:
        """True while an access token is present."""
        return self._token_store.get_access_token() is not None

    def sign_in(
        self, access_token: str, refresh_token: str | None, user: dict[str, Any] | None = None
    ) -> None:
        """Store credentials obtained from a login or refresh."""
        self._token_store.store(access_token, refresh_token)
        self.user = user

    def sign_out(self) -> None:
        """Forget credentials and the current user."""
        self._token_store.clear()
        self.user = None

    def close(self) -> None:
        """Stop listening for session expiry."""
        self._auth_events.unsubscribe(AuthEvent.SESSION_EXPIRED, self._on_session_expired)

    def _on_session_expired(self) -> None:
        logger.warning("Session expired, signing out")
        self.sign_out()
