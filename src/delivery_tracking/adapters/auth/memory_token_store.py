"""Token store kept in process memory."""

from delivery_tracking.domain.ports.token_store import TokenStore


class InMemoryTokenStore(TokenStore):
    """Holds the access and refresh tokens for the lifetime of the process."""

    def __init__(self, access_token: str | None = None, refresh_token: str | None = None) -> None:
        """Initialize with optional tokens, e.g. from the environment."""
        self._access_token = access_token
        self._refresh_token = refresh_token

    def get_access_token(self) -> str | None:
        """Return the current access token."""
        return self._access_token

    def get_refresh_token(self) -> str | None:
        """Return the refresh token."""
        return self._refresh_token

    def store(self, access_token: str, refresh_token: str | None) -> None:
        """Replace both tokens."""
        self._access_token = access_token
        self._refresh_token = refresh_token

    def clear(self) -> None:
        """Forget both tokens."""
        self._access_token = None
        self._refresh_token = None
