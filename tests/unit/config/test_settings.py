"""Tests for configuration settings.

Tests the Config class and environment variable handling.
"""

import os
from pathlib import Path
from unittest.mock import patch

import pytest

from launch_policy.common.config.settings import (
    Config,
    Environment,
    LogLevel,
    get_config,
    reset_config,
)
from launch_policy.common.exceptions import ConfigurationError


class TestEnvironment:
    """Tests for Environment enum."""
    
    def test_environment_values(self):
        assert Environment.DEVELOPMENT.value == "development"
        assert Environment.STAGING.value == "staging"
        assert Environment.PRODUCTION.value == "production"


class TestConfig:
    """Tests for Config class."""
    
    def test_default_config(self):
        """Test Config with default values."""
        with patch.dict(os.environ, {}, clear=True):
            config = Config()
            
            assert config.environment == Environment.DEVELOPMENT
            assert config.debug is False
            assert config.log_level == LogLevel.INFO
            assert config.policy_file == config.project_root / "config" / "launch_policy.yaml"
            assert config.max_workers == 1
            assert config.parallel_evaluation is False
    
    def test_values_from_env(self):
        with patch.dict(os.environ, {
            "LAUNCH_POLICY_ENVIRONMENT": "staging",
            "LAUNCH_POLICY_LOG_LEVEL": "debug",
            "LAUNCH_POLICY_POLICY_FILE": "/etc/launch/policy.yaml",
            "LAUNCH_POLICY_MAX_WORKERS": "4",
        }, clear=False):
            config = Config()
            assert config.environment == Environment.STAGING
            assert config.log_level == LogLevel.DEBUG
            assert config.policy_file == Path("/etc/launch/policy.yaml")
            assert config.max_workers == 4
            assert config.parallel_evaluation is True
    
    def test_policy_file_defaults_to_config_dir(self):
        with patch.dict(os.environ, {"LAUNCH_POLICY_POLICY_FILE": ""}, clear=False):
            config = Config(project_root=Path("/srv/launch"))
        assert config.config_dir == Path("/srv/launch/config")
        assert config.policy_file == Path("/srv/launch/config/launch_policy.yaml")
    
    def test_explicit_policy_file_wins(self):
        config = Config(project_root=Path("/srv/launch"), policy_file="policies/strict.yaml")
        assert config.policy_file == Path("policies/strict.yaml")
    
    def test_invalid_environment(self):
        with patch.dict(os.environ, {"LAUNCH_POLICY_ENVIRONMENT": "moon"}, clear=False):
            with pytest.raises(ConfigurationError):
                Config()
    
    def test_invalid_log_level(self):
        with patch.dict(os.environ, {"LAUNCH_POLICY_LOG_LEVEL": "LOUD"}, clear=False):
            with pytest.raises(ConfigurationError):
                Config()
    
    @pytest.mark.parametrize("workers", ["zero", "0", "-2"])
    def test_invalid_max_workers(self, workers):
        with patch.dict(os.environ, {"LAUNCH_POLICY_MAX_WORKERS": workers}, clear=False):
            with pytest.raises(ConfigurationError) as exc_info:
                Config()
            assert exc_info.value.code == "CONFIG_ERROR"
    
    def test_debug_in_production_warns(self):
        with patch.dict(os.environ, {
            "LAUNCH_POLICY_ENVIRONMENT": "production",
            "LAUNCH_POLICY_DEBUG": "true",
        }, clear=False):
            with pytest.warns(RuntimeWarning):
                config = Config()
            assert config.is_production


class TestConfigSingleton:
    """Tests for the global config accessor."""
    
    def test_get_config_returns_same_instance(self):
        assert get_config() is get_config()
    
    def test_reset_config(self):
        first = get_config()
        reset_config()
        assert get_config() is not first
