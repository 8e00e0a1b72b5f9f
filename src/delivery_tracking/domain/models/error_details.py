"""Error details domain model."""

from pydantic import BaseModel, ConfigDict


class ErrorDetails(BaseModel):
    """Details about a failed backend call, including HTTP status code if applicable."""

    model_config = ConfigDict(frozen=True)

    status_code: int | None = None
    reason: str

    @property
    def is_auth_error(self) -> bool:
        """Return True if the backend rejected our credentials."""
        return self.status_code == 401
