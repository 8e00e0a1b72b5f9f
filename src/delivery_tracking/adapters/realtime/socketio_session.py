"""Socket.IO backed realtime session for one namespace."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import Callable
from dataclasses import replace
from typing import TYPE_CHECKING, Any

import socketio

from delivery_tracking.domain.contracts.realtime_session import (
    AckCallback,
    AsyncHook,
    EventHandler,
    RealtimeSessionProtocol,
)
from delivery_tracking.domain.models.connection_state import ConnectionState, ConnectionStatus

if TYPE_CHECKING:
    from delivery_tracking.adapters.config.app_config import AppConfig

logger = logging.getLogger(__name__)


class SocketIoSession(RealtimeSessionProtocol):
    """Owns one ``socketio.AsyncClient`` connected to a single namespace.

    The session is a small state machine:

    - open(): DISCONNECTED/ERROR -> CONNECTING
    - namespace connect: -> CONNECTED, then connect hooks run in order
    - disconnect: -> DISCONNECTED, then disconnect hooks run
    - connect_error or retries exhausted: -> ERROR, then error hooks run
    - close(): close hooks run (if connected), socket shut down, -> DISCONNECTED

    Reconnection is delegated to python-socketio with a bounded attempt count and
    a fixed delay. Transport failures never propagate to callers.
    """

    def __init__(
        self,
        base_url: str,
        namespace: str,
        *,
        auth_token: str | None = None,
        transports: list[str] | None = None,
        reconnection_attempts: int = 10,
        reconnection_delay_seconds: float = 1.0,
    ) -> None:
        """Initialize the session without connecting.

        Args:
            base_url: Server URL without the namespace (e.g. "http://localhost:3001").
            namespace: Socket.IO namespace (e.g. "/tracking").
            auth_token: Optional token sent in the handshake as ``auth: {token}``.
            transports: Allowed transports, defaults to websocket with polling fallback.
            reconnection_attempts: Maximum reconnection attempts, must be positive.
            reconnection_delay_seconds: Fixed delay between attempts.
        """
        if reconnection_attempts <= 0:
            raise ValueError("reconnection_attempts must be a positive number")

        self._base_url = base_url
        self._namespace = namespace
        self._auth_token = auth_token
        self._transports = transports or ["websocket", "polling"]

        self._sio = socketio.AsyncClient(
            reconnection=True,
            reconnection_attempts=reconnection_attempts,
            reconnection_delay=reconnection_delay_seconds,
            reconnection_delay_max=reconnection_delay_seconds,
            randomization_factor=0,
            logger=logger.getChild(f"socketio{namespace.replace('/', '.')}"),
        )
        self._sio.on("connect", handler=self._on_connect, namespace=namespace)
        self._sio.on("disconnect", handler=self._on_disconnect, namespace=namespace)
        self._sio.on("connect_error", handler=self._on_connect_error, namespace=namespace)

        self._state = ConnectionState()
        self._handlers: dict[str, list[EventHandler]] = {}
        self._connect_hooks: list[AsyncHook] = []
        self._close_hooks: list[AsyncHook] = []
        self._disconnect_hooks: list[Callable[[], None]] = []
        self._error_hooks: list[Callable[[str], None]] = []
        self._state_listeners: list[Callable[[ConnectionState], None]] = []
        self._connect_task: asyncio.Task | None = None
        self._closed = False

    @classmethod
    def from_config(
        cls, config: AppConfig, namespace: str, auth_token: str | None = None
    ) -> SocketIoSession:
        """Create a session using the reconnection policy from configuration."""
        return cls(
            config.websocket_url,
            namespace,
            auth_token=auth_token,
            transports=config.transports,
            reconnection_attempts=config.reconnection_attempts,
            reconnection_delay_seconds=config.reconnection_delay_seconds,
        )

    @property
    def namespace(self) -> str:
        """The namespace this session is bound to."""
        return self._namespace

    @property
    def state(self) -> ConnectionState:
        """Current connection state."""
        return self._state

    @property
    def is_connected(self) -> bool:
        """True while the namespace is connected."""
        return self._state.is_connected

    @property
    def is_closed(self) -> bool:
        """True once close() has been called."""
        return self._closed

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def on(self, event: str, handler: EventHandler) -> None:
        """Register a handler for a server-to-client event."""
        handlers = self._handlers.get(event)
        if handlers is None:
            handlers = self._handlers[event] = []
            self._sio.on(event, handler=self._make_dispatcher(event), namespace=self._namespace)
        handlers.append(handler)

    def add_connect_hook(self, hook: AsyncHook) -> None:
        """Register a hook awaited on every (re)connect, in registration order."""
        self._connect_hooks.append(hook)

    def add_close_hook(self, hook: AsyncHook) -> None:
        """Register a hook awaited by close() while still connected."""
        self._close_hooks.append(hook)

    def add_disconnect_hook(self, hook: Callable[[], None]) -> None:
        """Register a hook called on every disconnect."""
        self._disconnect_hooks.append(hook)

    def add_error_hook(self, hook: Callable[[str], None]) -> None:
        """Register a hook called with the reason of every connection error."""
        self._error_hooks.append(hook)

    def add_state_listener(self, listener: Callable[[ConnectionState], None]) -> None:
        """Register a listener called on every connection state change."""
        self._state_listeners.append(listener)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def open(self) -> None:
        """Start connecting in the background."""
        if self._closed:
            logger.warning(f"Ignoring open() on closed session {self._namespace}")
            return
        if self.is_connected or (self._connect_task is not None and not self._connect_task.done()):
            logger.debug(f"Session {self._namespace} already connected or connecting")
            return

        self._set_state(status=ConnectionStatus.CONNECTING, last_error=None)
        self._connect_task = asyncio.create_task(
            self._connect(), name=f"socketio-connect:{self._namespace}"
        )

    async def _connect(self) -> None:
        """Run the initial connect, retrying with the reconnection policy."""
        auth = {"token": self._auth_token} if self._auth_token else None
        try:
            await self._sio.connect(
                self._base_url,
                auth=auth,
                transports=self._transports,
                namespaces=[self._namespace],
                retry=True,
            )
        except socketio.exceptions.ConnectionError as e:
            if self._closed:
                return
            logger.error(f"Giving up connecting to {self._namespace}: {e}")
            self._set_state(status=ConnectionStatus.ERROR, last_error=str(e))
        except asyncio.CancelledError:
            logger.info(f"Connect to {self._namespace} cancelled")
            raise
        except Exception as e:
            logger.error(f"Unexpected error connecting to {self._namespace}: {e}", exc_info=True)
            self._set_state(status=ConnectionStatus.ERROR, last_error=str(e))

    async def close(self) -> None:
        """Run close hooks, then terminate the socket. Calling it again is a no-op."""
        if self._closed:
            return
        self._closed = True

        if self.is_connected:
            for hook in list(self._close_hooks):
                try:
                    await hook()
                except Exception as e:
                    logger.warning(f"Close hook failed on {self._namespace}: {e}")
            # Emits are only queued; let the writer flush leaves before the socket goes away
            await self._sio.sleep(0)

        task = self._connect_task
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                logger.debug(f"Pending connect to {self._namespace} cancelled on close")

        try:
            await self._sio.shutdown()
        except Exception as e:
            logger.warning(f"Error shutting down socket for {self._namespace}: {e}")

        self._set_state(status=ConnectionStatus.DISCONNECTED, session_id=None)
        logger.info(f"Closed session {self._namespace}")

    # ------------------------------------------------------------------
    # Outgoing
    # ------------------------------------------------------------------

    async def emit(self, event: str, payload: Any = None) -> bool:
        """Send a fire-and-forget event, returning False if it could not be sent."""
        return await self._send(event, payload, None)

    async def request(self, event: str, payload: Any, on_ack: AckCallback) -> bool:
        """Send an event and deliver its acknowledgment to on_ack."""

        def ack(*args: Any) -> None:
            on_ack(args[0] if args else None)

        return await self._send(event, payload, ack)

    async def _send(self, event: str, payload: Any, callback: Callable[..., None] | None) -> bool:
        if not self.is_connected:
            logger.debug(f"Not sending '{event}' on {self._namespace}: not connected")
            return False
        try:
            await self._sio.emit(event, payload, namespace=self._namespace, callback=callback)
        except socketio.exceptions.BadNamespaceError:
            logger.warning(f"Dropped '{event}': namespace {self._namespace} is not connected")
            return False
        except Exception as e:
            logger.error(f"Transport error sending '{event}' on {self._namespace}: {e}")
            self._set_state(status=ConnectionStatus.ERROR, last_error=str(e))
            return False
        return True

    # ------------------------------------------------------------------
    # Socket.IO callbacks
    # ------------------------------------------------------------------

    async def _on_connect(self) -> None:
        session_id = self._sio.get_sid(self._namespace)
        logger.info(f"Connected to {self._namespace}, session id: {session_id}")
        self._set_state(
            status=ConnectionStatus.CONNECTED, session_id=session_id, last_error=None
        )
        # Hooks are awaited one by one so room re-subscription finishes before
        # any later connect-time work.
        for hook in list(self._connect_hooks):
            try:
                await hook()
            except Exception as e:
                logger.error(f"Connect hook failed on {self._namespace}: {e}", exc_info=True)

    async def _on_disconnect(self, reason: Any = None) -> None:
        logger.info(f"Disconnected from {self._namespace}, reason: {reason}")
        self._set_state(status=ConnectionStatus.DISCONNECTED, session_id=None)
        for hook in list(self._disconnect_hooks):
            try:
                hook()
            except Exception as e:
                logger.error(f"Disconnect hook failed on {self._namespace}: {e}", exc_info=True)

    async def _on_connect_error(self, data: Any = None) -> None:
        reason = _describe_connect_error(data)
        logger.warning(f"Connection error on {self._namespace}: {reason}")
        self._set_state(status=ConnectionStatus.ERROR, last_error=reason)
        for hook in list(self._error_hooks):
            try:
                hook(reason)
            except Exception as e:
                logger.error(f"Error hook failed on {self._namespace}: {e}", exc_info=True)

    def _make_dispatcher(self, event: str) -> Callable[..., Any]:
        async def dispatch(*args: Any) -> None:
            payload = args[0] if args else None
            for handler in list(self._handlers.get(event, ())):
                try:
                    result = handler(payload)
                    if inspect.isawaitable(result):
                        await result
                except Exception as e:
                    logger.error(
                        f"Handler for '{event}' on {self._namespace} failed: {e}", exc_info=True
                    )

        return dispatch

    def _set_state(self, **changes: Any) -> None:
        new_state = replace(self._state, **changes)
        if new_state == self._state:
            return
        self._state = new_state
        for listener in list(self._state_listeners):
            try:
                listener(new_state)
            except Exception as e:
                logger.error(f"State listener failed on {self._namespace}: {e}", exc_info=True)


def _describe_connect_error(data: Any) -> str:
    """Turn a connect_error payload into a short reason string."""
    if isinstance(data, dict):
        return str(data.get("message") or data)
    if data is None:
        return "Connection failed"
    return str(data)
