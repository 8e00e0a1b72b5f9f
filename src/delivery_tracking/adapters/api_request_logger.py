"""Utility for logging backend requests when DT_LOG_REQUESTS is enabled."""

import json
import logging
import os
from typing import Any

logger = logging.getLogger(__name__)

REDACTED = "***REDACTED***"
_SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}
_SENSITIVE_FIELDS = {"accesstoken", "refreshtoken", "token", "password"}


def should_log_requests() -> bool:
    """Check if request logging is enabled via DT_LOG_REQUESTS environment variable."""
    return os.getenv("DT_LOG_REQUESTS", "").lower() == "true"


def _build_url_with_params(url: str, params: dict[str, Any] | None) -> str:
    if not params:
        return url
    param_str = "&".join(f"{k}={v}" for k, v in sorted(params.items()))
    return f"{url}?{param_str}" if "?" not in url else f"{url}&{param_str}"


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    return {k: REDACTED if k.lower() in _SENSITIVE_HEADERS else v for k, v in headers.items()}


def _redact_payload(payload: Any) -> Any:
    """Replace credential fields at any depth of a JSON-like payload."""
    if isinstance(payload, dict):
        return {
            k: REDACTED if str(k).lower() in _SENSITIVE_FIELDS else _redact_payload(v)
            for k, v in payload.items()
        }
    if isinstance(payload, list):
        return [_redact_payload(item) for item in payload]
    return payload


def _format_payload(payload: Any) -> str:
    try:
        return json.dumps(payload, indent=2) if isinstance(payload, dict | list) else str(payload)
    except (TypeError, ValueError):
        return str(payload)


def log_api_request(
    method: str,
    url: str,
    params: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
    payload: Any = None,
) -> None:
    """Log request details if DT_LOG_REQUESTS is enabled.

    Credentials in headers and payload fields are redacted.

    Args:
        method: HTTP method (GET, POST, etc.).
        url: Request URL.
        params: Query parameters (optional).
        headers: Request headers (optional).
        payload: JSON body (optional).
    """
    if not should_log_requests():
        return

    log_parts = [f"{method} {_build_url_with_params(url, params)}"]

    if headers:
        log_parts.append(f"Headers: {json.dumps(_redact_headers(headers), indent=2)}")

    if payload is not None:
        log_parts.append(f"Payload: {_format_payload(_redact_payload(payload))}")

    logger.info("API Request:\n" + "\n".join(log_parts))
