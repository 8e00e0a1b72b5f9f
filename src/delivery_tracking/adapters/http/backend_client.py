"""HTTP client for the delivery backend REST API."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import aiohttp

from delivery_tracking.adapters.api_request_logger import log_api_request
from delivery_tracking.adapters.auth.event_bus import AuthEvent, AuthEventBus
from delivery_tracking.domain.errors import ApiError

if TYPE_CHECKING:
    from delivery_tracking.adapters.config.app_config import AppConfig
    from delivery_tracking.domain.ports.token_store import TokenStore

logger = logging.getLogger(__name__)

REFRESH_PATH = "/auth/refresh"


def _reason_for_status(status_code: int) -> str:
    """Short, human readable reason for an HTTP error status."""
    if status_code == 401:
        reason = "Unauthorized"
    elif status_code == 403:
        reason = "Forbidden"
    elif status_code == 404:
        reason = "Not found"
    elif status_code == 429:
        reason = "Rate limit exceeded"
    elif status_code == 502:
        reason = "Bad gateway (server error)"
    elif status_code == 503:
        reason = "Service unavailable"
    elif status_code == 504:
        reason = "Gateway timeout"
    else:
        reason = f"HTTP {status_code}"
    return reason


def _backend_message(body: Any) -> str | None:
    """Extract the backend's own error message from a response body."""
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, list):
            return "; ".join(str(m) for m in message)
        if message:
            return str(message)
    return None


class BackendHttpClient:
    """JSON client with bearer authentication and one token refresh on 401.

    Concurrent 401s share a single refresh call. When the refresh is not
    possible the stored tokens are cleared and SESSION_EXPIRED is published.
    """

    def __init__(
        self,
        session: aiohttp.ClientSession,
        config: AppConfig,
        token_store: TokenStore,
        auth_events: AuthEventBus,
    ) -> None:
        """Initialize the client.

        Args:
            session: Shared aiohttp session.
            config: Application configuration (base URL and timeout).
            token_store: Source of the bearer token, updated on refresh.
            auth_events: Bus on which session expiry is published.
        """
        self._session = session
        self._base_url = config.api_url
        self._timeout = aiohttp.ClientTimeout(total=config.http_timeout_seconds)
        self._token_store = token_store
        self._auth_events = auth_events
        self._refresh_lock = asyncio.Lock()

    async def get_json(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """GET a path and return the decoded JSON body."""
        return await self.request_json("GET", path, params=params)

    async def post_json(self, path: str, payload: Any = None) -> Any:
        """POST a JSON payload and return the decoded JSON body."""
        return await self.request_json("POST", path, payload=payload)

    async def request_json(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        payload: Any = None,
    ) -> Any:
        """Send a request, refreshing the access token once on 401.

        Raises:
            ApiError: On transport failures and non-2xx responses.
        """
        token = self._token_store.get_access_token()
        status, body = await self._send(method, path, params, payload, token)

        if status == 401 and path != REFRESH_PATH:
            new_token = await self._refresh_access_token(token)
            status, body = await self._send(method, path, params, payload, new_token)

        if not 200 <= status < 300:
            raise ApiError(status, _reason_for_status(status), _backend_message(body))
        return body

    async def _send(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None,
        payload: Any,
        token: str | None,
    ) -> tuple[int, Any]:
        url = f"{self._base_url}{path}"
        headers = {"Content-Type": "application/json"}
        if token:
            headers["Authorization"] = f"Bearer {token}"
        log_api_request(method, url, params=params, headers=headers, payload=payload)

        try:
            async with self._session.request(
                method,
                url,
                params=params,
                json=payload,
                headers=headers,
                timeout=self._timeout,
            ) as response:
                try:
                    body = await response.json(content_type=None)
                except ValueError:
                    body = await response.text()
                return response.status, body
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.warning(f"{method} {url} failed: {e!r}")
            raise ApiError(None, "Network error") from e

    async def _refresh_access_token(self, rejected_token: str | None) -> str:
        """Get a fresh access token, or expire the session.

        Raises:
            ApiError: 401 when no fresh token could be obtained.
        """
        async with self._refresh_lock:
            current = self._token_store.get_access_token()
            if current and current != rejected_token:
                # Another request refreshed while we were waiting
                return current

            refresh_token = self._token_store.get_refresh_token()
            if not refresh_token:
                self._expire_session("no refresh token")
                raise ApiError(401, _reason_for_status(401))

            try:
                status, body = await self._send(
                    "POST", REFRESH_PATH, None, {"refreshToken": refresh_token}, None
                )
            except ApiError as e:
                self._expire_session(f"refresh failed: {e}")
                raise ApiError(401, _reason_for_status(401)) from e

            access_token = body.get("accessToken") if isinstance(body, dict) else None
            if not 200 <= status < 300 or not access_token:
                self._expire_session(f"refresh rejected with HTTP {status}")
                raise ApiError(401, _reason_for_status(401), _backend_message(body))

            self._token_store.store(access_token, body.get("refreshToken") or refresh_token)
            logger.info("Access token refreshed")
            return access_token

    def _expire_session(self, why: str) -> None:
        logger.warning(f"Session expired ({why}), clearing tokens")
        self._token_store.clear()
        self._auth_events.publish(AuthEvent.SESSION_EXPIRED)
