"""Common utilities - logging, config, exceptions."""

from launch_policy.common.logging.logger import get_logger
from launch_policy.common.config import Config, get_config, reset_config
from launch_policy.common.exceptions import (
    LaunchPolicyException,
    ConfigurationError,
    CompilationError,
    LaunchDeniedError,
)

__all__ = [
    # Logging
    "get_logger",
    # Config
    "Config",
    "get_config",
    "reset_config",
    # Exceptions
    "LaunchPolicyException",
    "ConfigurationError",
    "CompilationError",
    "LaunchDeniedError",
]
