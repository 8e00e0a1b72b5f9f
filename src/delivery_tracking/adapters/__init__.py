"""Adapters for the delivery backend (REST, Socket.IO, auth, configuration)."""
