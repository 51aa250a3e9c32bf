"""
Configuration management for key set loading.

Loads configuration from YAML with ZERO defaults.
Every value must be explicitly specified or loading fails.
"""

from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, ConfigDict

CONFIG_PATH_ENV_VAR = "JWK_SET_CONFIG_PATH"
DEFAULT_CONFIG_FILENAME = "config.yaml"


class ServiceConfig(BaseModel):
    """Component identity configuration."""

    model_config = ConfigDict(extra="forbid")
    name: str
    version: str


class LoggingConfig(BaseModel):
    """Logging configuration. A null directory logs to stdout only."""

    model_config = ConfigDict(extra="forbid")
    level: str
    directory: str | None


class KeysConfig(BaseModel):
    """Key set document configuration."""

    model_config = ConfigDict(extra="forbid")
    document_path: str
    default_algorithm: Literal["RS256", "RS384", "RS512"]


class Settings(BaseModel):
    """
    Root configuration container.

    All fields are REQUIRED. No defaults exist.
    """

    model_config = ConfigDict(extra="forbid")
    service: ServiceConfig
    logging: LoggingConfig
    keys: KeysConfig


def get_config_path() -> Path:
    """Determine configuration file path from the environment or the working directory."""
    configured = os.environ.get(CONFIG_PATH_ENV_VAR)
    if configured:
        return Path(configured)
    return Path.cwd() / DEFAULT_CONFIG_FILENAME


def load_settings(config_path: Path) -> Settings:
    """
    Load and validate settings from a YAML file.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the file is not a YAML mapping
        pydantic.ValidationError: If fields are missing, unknown or mistyped
    """
    raw = yaml.safe_load(config_path.read_text())
    if not isinstance(raw, dict):
        msg = f"Invalid config file: {config_path}"
        raise ValueError(msg)
    return Settings(**raw)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Load settings from the configured path, once."""
    return load_settings(get_config_path())


def clear_settings_cache() -> None:
    """Forget cached settings so the next get_settings() reloads the file."""
    get_settings.cache_clear()


def resolve_document_path(settings: Settings, config_path: Path | None = None) -> Path:
    """Resolve the key set document path, relative paths against the config file's directory."""
    document_path = Path(settings.keys.document_path)
    if document_path.is_absolute():
        return document_path
    if config_path is None:
        config_path = get_config_path()
    return (config_path.parent / document_path).resolve()
