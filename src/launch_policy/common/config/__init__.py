"""Configuration module."""

from launch_policy.common.config.settings import (
    Config,
    Environment,
    LogLevel,
    get_config,
    reset_config,
)

__all__ = [
    "Config",
    "Environment",
    "LogLevel",
    "get_config",
    "reset_config",
]
