"""
Runtime Configuration Module

Provides configuration loading and management for tinychain.
"""

from .runtime import (
    DEFAULT_CONFIG_PATHS,
    LoggingConfig,
    MerkleConfig,
    OutputConfig,
    RuntimeConfig,
    get_default_config,
    get_default_config_template,
    load_config,
    set_default_config,
)

__all__ = [
    "DEFAULT_CONFIG_PATHS",
    "LoggingConfig",
    "MerkleConfig",
    "OutputConfig",
    "RuntimeConfig",
    "get_default_config",
    "get_default_config_template",
    "load_config",
    "set_default_config",
]
