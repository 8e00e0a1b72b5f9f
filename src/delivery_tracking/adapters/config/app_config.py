"""12-factor configuration adapter using environment variables."""

from typing import Any

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

ALLOWED_TRANSPORTS = ("websocket", "polling")


class AppConfig(BaseSettings):
    """Application configuration following 12-factor principles."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Backend endpoints
    api_url: str = Field(
        default="http://localhost:3001", description="Base URL of the REST API"
    )
    ws_url: str | None = Field(
        default=None,
        description="Base URL of the Socket.IO server (derived from API_URL if not set)",
    )
    orders_namespace: str = Field(
        default="/orders", description="Socket.IO namespace for order list updates"
    )
    tracking_namespace: str = Field(
        default="/tracking", description="Socket.IO namespace for live order tracking"
    )

    # Socket configuration
    socket_transports: str = Field(
        default="websocket,polling",
        description="Comma-separated transports, in order of preference",
    )
    reconnection_attempts: int = Field(
        default=10, description="Maximum reconnection attempts before giving up"
    )
    reconnection_delay_seconds: float = Field(
        default=1.0, description="Fixed delay between reconnection attempts in seconds"
    )
    tracking_fallback_seconds: float = Field(
        default=3.0,
        description="Seconds to wait for a tracking snapshot before retrying over REST",
    )

    # REST configuration
    http_timeout_seconds: int = Field(
        default=10, description="Timeout for REST requests in seconds"
    )
    payment_poll_interval_seconds: float = Field(
        default=5.0, description="Interval between payment status checks in seconds"
    )

    # Credentials, normally obtained from a login
    access_token: str | None = Field(default=None, description="Initial bearer access token")
    refresh_token: str | None = Field(default=None, description="Initial refresh token")

    log_level: str = Field(default="INFO", description="Root log level")

    @classmethod
    def for_testing(cls, **overrides: Any) -> "AppConfig":
        """Build a config that ignores any local .env file."""
        return cls(_env_file=None, **overrides)

    @field_validator("api_url", "ws_url")
    @classmethod
    def strip_trailing_slash(cls, v: str | None) -> str | None:
        """Normalize URLs so paths can be appended."""
        return v.rstrip("/") if v else v

    @field_validator("orders_namespace", "tracking_namespace")
    @classmethod
    def validate_namespace(cls, v: str) -> str:
        """Validate namespaces start with a slash."""
        if not v.startswith("/"):
            raise ValueError("namespace must start with '/'")
        return v

    @field_validator("socket_transports")
    @classmethod
    def validate_transports(cls, v: str) -> str:
        """Validate transports are a non-empty subset of websocket and polling."""
        transports = [t.strip().lower() for t in v.split(",") if t.strip()]
        if not transports:
            raise ValueError("socket_transports must name at least one transport")
        unknown = [t for t in transports if t not in ALLOWED_TRANSPORTS]
        if unknown:
            raise ValueError(f"socket_transports has unknown transport(s): {', '.join(unknown)}")
        return ",".join(transports)

    @field_validator("reconnection_attempts")
    @classmethod
    def validate_reconnection_attempts(cls, v: int) -> int:
        """Validate reconnection is bounded."""
        if v <= 0:
            raise ValueError("reconnection_attempts must be a positive number")
        return v

    @field_validator(
        "reconnection_delay_seconds",
        "tracking_fallback_seconds",
        "payment_poll_interval_seconds",
    )
    @classmethod
    def validate_positive_seconds(cls, v: float) -> float:
        """Validate delays are positive."""
        if v <= 0:
            raise ValueError("delays must be positive")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is a standard logging level name."""
        level = v.upper()
        if level not in ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"):
            raise ValueError("log_level must be DEBUG, INFO, WARNING, ERROR or CRITICAL")
        return level

    @property
    def websocket_url(self) -> str:
        """Socket.IO server URL, the API URL without a trailing /api when not configured."""
        if self.ws_url:
            return self.ws_url
        if self.api_url.endswith("/api"):
            return self.api_url[: -len("/api")]
        return self.api_url

    @property
    def transports(self) -> list[str]:
        """Configured transports as a list."""
        return self.socket_transports.split(",")
