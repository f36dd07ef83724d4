"""Runtime configuration, env-driven.

Reads from a .env file and UPDVCSPINS_* environment variables.  Command
line flags take precedence over everything configured here.
"""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path
from typing import Any, Literal

from pydantic import ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from updvcspins.errors import ConfigurationError

LogLevel = Literal["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


class UpdvcspinsConfig(BaseSettings):
    """Settings with environment variable overrides.

    Examples
    --------
    Override via environment::

        export UPDVCSPINS_LOG_LEVEL=DEBUG
        export UPDVCSPINS_SHELL=/usr/bin/bash
        export UPDVCSPINS_PIN_COMMIT=true
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="UPDVCSPINS_",
        env_file_encoding="utf-8",
    )

    log_level: LogLevel = "WARNING"

    # External collaborators
    shell: str = "bash"
    git_binary: str = "git"

    # Defaults for `updvcspins update`
    pkgbuild: Path = Path("PKGBUILD")
    pin_commit: bool = False

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_log_level(cls, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip().upper()
        return value


@lru_cache(maxsize=1)
def get_config() -> UpdvcspinsConfig:
    """Load the configuration once; invalid settings raise ConfigurationError."""
    try:
        return UpdvcspinsConfig()
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid UPDVCSPINS_* configuration: {exc}") from exc
