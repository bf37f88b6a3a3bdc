"""
Unit tests for configuration management.
"""

import os
from pathlib import Path
from unittest.mock import patch

from bbhooks.config import Settings
from bbhooks.services.registry import load_registry

ENV_EXAMPLE = Path(__file__).resolve().parents[2] / ".env.example"


def test_settings_loads_from_environment():
    """Test that settings can be loaded from environment variables."""
    with patch.dict(os.environ, {
        'WEBHOOK_SECRET': 'test_secret',
        'BITBUCKET_TOKEN': 'test_token',
        'SOURCES_FILE': '/etc/bbhooks/sources.yaml',
        'API_TIMEOUT_SECONDS': '5',
        'API_MAX_RETRIES': '5',
        'LOG_LEVEL': 'DEBUG',
    }):
        settings = Settings(_env_file=None)

        assert settings.webhook_secret == 'test_secret'
        assert settings.bitbucket_token == 'test_token'
        assert settings.sources_file == '/etc/bbhooks/sources.yaml'
        assert settings.api_timeout_seconds == 5.0
        assert settings.api_max_retries == 5
        assert settings.log_level == 'DEBUG'


def test_settings_has_default_values():
    """Test that settings have appropriate default values."""
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=None)

        assert settings.webhook_secret is None
        assert settings.bitbucket_token is None
        assert settings.sources_file is None
        assert settings.log_level == 'INFO'
        assert settings.api_timeout_seconds == 30.0
        assert settings.api_max_retries == 3
        assert settings.api_base_delay == 1.0


def test_env_example_starts_with_empty_registry():
    """Test that a copy of .env.example gives a loadable sources setting."""
    with patch.dict(os.environ, {}, clear=True):
        settings = Settings(_env_file=ENV_EXAMPLE)

        registry = load_registry(settings.sources_file)

        assert registry.sources == []
        assert settings.log_level == 'INFO'
