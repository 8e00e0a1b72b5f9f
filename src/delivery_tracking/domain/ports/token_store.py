"""Token store port."""

from typing import Protocol


class TokenStore(Protocol):
    """Port for the credentials used on REST calls and socket handshakes."""

    def get_access_token(self) -> str | None:
        """Return the current access token, if logged in."""
        ...

    def get_refresh_token(self) -> str | None:
        """Return the refresh token, if any."""
        ...

    def store(self, access_token: str, refresh_token: str | None) -> None:
        """Replace the stored tokens."""
        ...

    def clear(self) -> None:
        """Forget all tokens."""
        ...
