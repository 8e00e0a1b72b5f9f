"""Real-time order tracking client for the delivery backend."""

__version__ = "0.1.0"
