"""Configuration adapters."""

from delivery_tracking.adapters.config.app_config import AppConfig

__all__ = ["AppConfig"]
