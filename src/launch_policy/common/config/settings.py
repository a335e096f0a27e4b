"""Configuration management - Centralized configuration for Launch Policy.

Provides environment-aware configuration with sensible defaults.
All configuration is loaded from environment variables with fallbacks.
"""

import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional, Union

from launch_policy.common.exceptions import ConfigurationError


class Environment(str, Enum):
    """Application environment."""
    DEVELOPMENT = "development"
    STAGING = "staging"
    PRODUCTION = "production"


class LogLevel(str, Enum):
    """Logging levels."""
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def _get_project_root() -> Path:
    """Get the project root directory."""
    # settings.py -> config -> common -> launch_policy -> src -> project_root
    return Path(__file__).resolve().parent.parent.parent.parent.parent


@dataclass
class Config:
    """Central configuration object for Launch Policy.
    
    All settings can be overridden via environment variables prefixed
    with LAUNCH_POLICY_.
    
    Example:
        LAUNCH_POLICY_ENVIRONMENT=production
        LAUNCH_POLICY_LOG_LEVEL=INFO
        LAUNCH_POLICY_POLICY_FILE=/etc/launch_policy/policy.yaml
        LAUNCH_POLICY_MAX_WORKERS=4
    """
    
    # Core settings
    environment: Union[Environment, str] = field(
        default_factory=lambda: os.getenv("LAUNCH_POLICY_ENVIRONMENT", "development")
    )
    debug: bool = field(
        default_factory=lambda: os.getenv("LAUNCH_POLICY_DEBUG", "false").lower() == "true"
    )
    log_level: Union[LogLevel, str] = field(
        default_factory=lambda: os.getenv("LAUNCH_POLICY_LOG_LEVEL", "INFO")
    )
    
    # Paths
    project_root: Path = field(default_factory=_get_project_root)
    
    # Policy settings (defaults to <project_root>/config/launch_policy.yaml)
    policy_file: Optional[Path] = field(
        default_factory=lambda: os.getenv("LAUNCH_POLICY_POLICY_FILE") or None
    )
    
    # Evaluation settings (1 = evaluate rules sequentially)
    max_workers: Union[int, str] = field(
        default_factory=lambda: os.getenv("LAUNCH_POLICY_MAX_WORKERS", "1")
    )
    
    def __post_init__(self):
        """Validate configuration after initialization."""
        try:
            self.environment = Environment(self.environment)
        except ValueError:
            raise ConfigurationError(
                f"Unknown environment '{self.environment}'",
                details={"allowed": [e.value for e in Environment]},
            ) from None
        
        try:
            self.log_level = LogLevel(str(self.log_level).upper())
        except ValueError:
            raise ConfigurationError(
                f"Unknown log level '{self.log_level}'",
                details={"allowed": [lvl.value for lvl in LogLevel]},
            ) from None
        
        try:
            self.max_workers = int(self.max_workers)
        except (TypeError, ValueError):
            raise ConfigurationError(
                f"LAUNCH_POLICY_MAX_WORKERS must be an integer, got '{self.max_workers}'"
            ) from None
        if self.max_workers < 1:
            raise ConfigurationError(
                f"LAUNCH_POLICY_MAX_WORKERS must be >= 1, got {self.max_workers}"
            )
        
        self.policy_file = (
            Path(self.policy_file) if self.policy_file
            else self.config_dir / "launch_policy.yaml"
        )
        
        # Warn about debug in production
        if self.environment == Environment.PRODUCTION and self.debug:
            import warnings
            warnings.warn(
                "Debug mode is enabled in production environment",
                RuntimeWarning,
                stacklevel=2
            )
    
    @property
    def config_dir(self) -> Path:
        """Get the config directory path."""
        return self.project_root / "config"
    
    @property
    def parallel_evaluation(self) -> bool:
        """Whether rules are evaluated on a thread pool."""
        return self.max_workers > 1
    
    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == Environment.PRODUCTION


# Singleton instance
_config: Optional[Config] = None


def get_config() -> Config:
    """Get the global configuration instance.
    
    Returns:
        Config: The global configuration singleton.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reset_config() -> None:
    """Reset the global configuration (for testing)."""
    global _config
    _config = None
