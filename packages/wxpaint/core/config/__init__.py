"""Configuration management for wxpaint."""

from wxpaint.core.config.loader import (
    ENV_API_HOST,
    ENV_API_KEY,
    detect_format,
    load_app_config,
    load_config,
)
from wxpaint.core.config.models import AppConfig, HttpConfig, LoggingConfig, PollingConfig

__all__ = [
    # Loaders
    "load_config",
    "load_app_config",
    "detect_format",
    "ENV_API_HOST",
    "ENV_API_KEY",
    # Models
    "AppConfig",
    "HttpConfig",
    "LoggingConfig",
    "PollingConfig",
]
