"""
Runtime Configuration Module

Provides configuration loading and management.
"""

from .runtime import (
    RuntimeConfig,
    MerkleConfig,
    LoggingConfig,
    get_default_config,
    set_default_config,
)

__all__ = [
    "RuntimeConfig",
    "MerkleConfig",
    "LoggingConfig",
    "get_default_config",
    "set_default_config",
]
