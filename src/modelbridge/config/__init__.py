"""Application configuration helpers."""

from __future__ import annotations

from .errors import ConfigurationError
from .logging import configure_logging, get_log_level
from .storage import StoreConfig, get_store_config

__all__ = [
    "ConfigurationError",
    "StoreConfig",
    "configure_logging",
    "get_log_level",
    "get_store_config",
]
