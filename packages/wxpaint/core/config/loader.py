"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from wxpaint.core.config.models import AppConfig

logger = logging.getLogger(__name__)

ENV_API_HOST = "WXPAINT_API_HOST"
ENV_API_KEY = "WXPAINT_API_KEY"


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
            content = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e

    # safe_load returns None for empty files
    if content is None:
        return {}
    if not isinstance(content, dict):
        raise ValueError(f"Config root must be a mapping in {path}")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    Missing files fall back to defaults. ``api_host`` and ``api_key`` are
    read from the environment when the file leaves them unset.

    Args:
        path: Path to app config file; defaults to ``config.yaml``

    Returns:
        Validated AppConfig

    Raises:
        ValidationError: If config is invalid
    """
    if path is None:
        path = AppConfig.default_path()

    if Path(path).exists():
        config = AppConfig.model_validate(load_config(path))
    else:
        logger.debug("Config file %s not found, using defaults", path)
        config = AppConfig()

    return _load_env_vars_into_config(config)


def _load_env_vars_into_config(config: AppConfig) -> AppConfig:
    """Fill unset credentials from the environment."""
    updates: dict[str, Any] = {}

    if config.api_host is None:
        host = os.getenv(ENV_API_HOST)
        if host:
            logger.debug("Loaded %s from environment", ENV_API_HOST)
            updates["api_host"] = host

    if config.api_key is None:
        key = os.getenv(ENV_API_KEY)
        if key:
            logger.debug("Loaded %s from environment", ENV_API_KEY)
            updates["api_key"] = key

    if not updates:
        return config
    # Re-validate so the host gets normalized like a file value.
    return AppConfig.model_validate({**config.model_dump(), **updates})
