"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from stageforge.core.config.models import AppConfig
from stageforge.core.utils.logging import configure_logging

logger = logging.getLogger(__name__)

_DEFAULT_APP_CONFIG_PATH = Path("config.json")

PASSWORD_ENV_VAR = "STAGEFORGE_PRODUCTION_PASSWORD"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("config.json")
        'json'
        >>> detect_format("config.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            with path.open("r", encoding="utf-8") as f:
                return json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
                # safe_load returns None for empty files
                return content if content is not None else {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    A missing file yields the all-defaults config. The production password is
    read from the environment when the file leaves it empty.

    Args:
        path: Path to app config file (.json, .yaml, or .yml).
              Defaults to config.json

    Returns:
        Validated AppConfig instance

    Raises:
        ValidationError: If config is invalid
    """
    if path is None:
        path = _DEFAULT_APP_CONFIG_PATH

    if Path(path).exists():
        config = AppConfig.model_validate(load_config(path))
    else:
        logger.debug(f"No config at {path}, using defaults")
        config = AppConfig()

    _load_env_vars_into_config(config)
    return config


def configure_logging_from_config(config: AppConfig) -> None:
    """Configure Python logging from the app config's logging section."""
    configure_logging(
        level=config.logging.level,
        format_string=config.logging.format,
        filename=config.logging.filename,
        structured=config.logging.structured,
    )


def _load_env_vars_into_config(config: AppConfig) -> None:
    """Fill unset secrets from the environment.

    This mutates the config object in place.
    """
    if not config.production.password:
        password = os.getenv(PASSWORD_ENV_VAR)
        if password:
            logger.debug(f"Loaded {PASSWORD_ENV_VAR} from environment")
            config.production = config.production.model_copy(update={"password": password})
