"""Protocol for background status polling."""

from typing import Protocol


class StatusPollerProtocol(Protocol):
    """Protocol for polling the backend until an order reaches a wanted state."""

    async def start(self) -> None:
        """Start polling."""
        ...

    async def stop(self) -> None:
        """Stop polling."""
        ...
