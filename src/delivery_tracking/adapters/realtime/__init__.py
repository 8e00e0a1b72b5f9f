"""Realtime (Socket.IO) adapters."""

from delivery_tracking.adapters.realtime.socketio_session import SocketIoSession

__all__ = ["SocketIoSession"]
