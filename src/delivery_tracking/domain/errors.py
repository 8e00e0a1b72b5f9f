"""Domain errors."""

from delivery_tracking.domain.models.error_details import ErrorDetails


class ApiError(Exception):
    """A backend REST call failed.

    status_code is None for transport failures (no HTTP response at all).
    message carries the backend's own error message when it sent one.
    """

    def __init__(self, status_code: int | None, reason: str, message: str | None = None) -> None:
        """Initialize with the HTTP status, a short reason and the backend message."""
        super().__init__(message or reason)
        self.details = ErrorDetails(status_code=status_code, reason=reason)
        self.message = message

    @property
    def status_code(self) -> int | None:
        """HTTP status code of the failed response."""
        return self.details.status_code

    @property
    def is_auth_error(self) -> bool:
        """Return True for 401 responses."""
        return self.details.is_auth_error
