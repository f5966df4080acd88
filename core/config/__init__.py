"""
Runtime Configuration Module

Provides configuration loading and management for the entitlement engine.
"""

from .runtime import (
    ChainConfig,
    LoggingConfig,
    RuntimeConfig,
    StoreConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "ChainConfig",
    "LoggingConfig",
    "RuntimeConfig",
    "StoreConfig",
    "get_default_config",
    "set_default_config",
]
