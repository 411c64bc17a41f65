"""
Tests for configuration loading.
"""

import pytest
from pydantic import ValidationError

from taskbell.core.config import DEFAULT_DISPATCHER_URL, get_config, reload_config

from conftest import DISPATCHER_URL


class TestConfig:

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("DISPATCHER_TIMEOUT", "2.5")
        monkeypatch.setenv("TELEGRAM_FRONTEND_URL", "https://tasks.example.com")
        monkeypatch.setenv("API_PORT", "9000")

        config = reload_config()

        assert config.dispatcher.url == DISPATCHER_URL
        assert config.dispatcher.timeout == 2.5
        assert config.telegram.frontend_url == "https://tasks.example.com"
        assert config.server.port == 9000

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("DISPATCHER_URL")

        config = reload_config()

        assert config.dispatcher.url == DEFAULT_DISPATCHER_URL
        assert config.telegram.api_base == "https://api.telegram.org"
        assert config.log_level == "INFO"

    def test_config_is_cached(self):
        assert get_config() is get_config()

    def test_log_level_is_normalised(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")
        assert reload_config().log_level == "DEBUG"

    def test_invalid_log_level(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "chatty")
        with pytest.raises(ValidationError):
            reload_config()
