"""Tests for runtime config — env-driven settings and log levels."""

from __future__ import annotations

from pathlib import Path

import pytest
from pydantic import ValidationError

from updvcspins.cli import logsetup
from updvcspins.config import UpdvcspinsConfig, get_config
from updvcspins.errors import ConfigurationError


class TestUpdvcspinsConfig:
    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("UPDVCSPINS_PIN_COMMIT", raising=False)
        config = UpdvcspinsConfig(_env_file=None)
        assert config.log_level == "WARNING"
        assert config.shell == "bash"
        assert config.git_binary == "git"
        assert config.pkgbuild == Path("PKGBUILD")
        assert config.pin_commit is False

    def test_env_override(self, monkeypatch):
        monkeypatch.setenv("UPDVCSPINS_PIN_COMMIT", "true")
        monkeypatch.setenv("UPDVCSPINS_SHELL", "/usr/local/bin/bash")
        config = UpdvcspinsConfig(_env_file=None)
        assert config.pin_commit is True
        assert config.shell == "/usr/local/bin/bash"


    def test_log_level_is_normalized(self):
        config = UpdvcspinsConfig(_env_file=None, log_level=" error ")
        assert config.log_level == "ERROR"

    def test_unknown_log_level_rejected(self):
        with pytest.raises(ValidationError):
            UpdvcspinsConfig(_env_file=None, log_level="loud")


class TestGetConfig:
    def test_invalid_env_raises_configuration_error(self, monkeypatch):
        monkeypatch.setenv("UPDVCSPINS_LOG_LEVEL", "loud")
        get_config.cache_clear()
        with pytest.raises(ConfigurationError, match="Invalid UPDVCSPINS_"):
            get_config()

    def test_loaded_once(self, monkeypatch):
        monkeypatch.delenv("UPDVCSPINS_LOG_LEVEL", raising=False)
        get_config.cache_clear()
        assert get_config() is get_config()


class TestLogLevels:
    def test_default_uses_configured_level(self):
        assert logsetup.level_for_verbosity(0, "ERROR") == "ERROR"
        assert logsetup.level_for_verbosity(0) == "WARNING"

    def test_verbosity(self):
        assert logsetup.level_for_verbosity(1, "ERROR") == "INFO"
        assert logsetup.level_for_verbosity(2) == "DEBUG"
        assert logsetup.level_for_verbosity(5) == "DEBUG"
