"""Configuration models for wxpaint."""

from __future__ import annotations

from pathlib import Path

import httpx
from pydantic import BaseModel, ConfigDict, Field, field_validator

from wxpaint.core.api.http.config import HttpClientConfig
from wxpaint.core.generation.models import PollOptions


class PollingConfig(BaseModel):
    """Status polling budget."""

    max_attempts: int = Field(default=10, ge=1, description="Polls allowed, failed ones included")
    timeout_s: float = Field(default=120.0, gt=0.0, description="Wall-clock limit for polling")
    interval_s: float = Field(default=2.0, ge=0.0, description="Delay between polls")

    def to_options(self) -> PollOptions:
        return PollOptions(
            max_attempts=self.max_attempts, timeout_s=self.timeout_s, interval_s=self.interval_s
        )


class HttpConfig(BaseModel):
    """Transport settings shared by the provider client and downloads."""

    timeout_s: float = Field(default=30.0, gt=0.0)
    connect_timeout_s: float = Field(default=10.0, gt=0.0)
    download_attempts: int = Field(
        default=2, ge=1, description="Transport attempts per image download"
    )
    user_agent: str = "wxpaint/0.1"

    def to_client_config(self) -> HttpClientConfig:
        return HttpClientConfig(
            timeout=httpx.Timeout(self.timeout_s, connect=self.connect_timeout_s),
            user_agent=self.user_agent,
        )


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit JSON records instead of text")


class AppConfig(BaseModel):
    """Application-level configuration."""

    model_config = ConfigDict(extra="ignore")

    api_host: str | None = Field(
        default=None, description="Provider base URL (env: WXPAINT_API_HOST)"
    )
    api_key: str | None = Field(
        default=None, repr=False, description="Bearer credential (env: WXPAINT_API_KEY)"
    )
    output_dir: str = "data/paintings"
    models_cache_ttl_s: float = Field(default=3600.0, ge=0.0)
    polling: PollingConfig = PollingConfig()
    http: HttpConfig = HttpConfig()
    logging: LoggingConfig = LoggingConfig()

    @field_validator("api_host")
    @classmethod
    def validate_api_host(cls, v: str | None) -> str | None:
        if v is None:
            return None
        if not v.startswith(("http://", "https://")):
            raise ValueError("api_host must start with http:// or https://")
        return v.rstrip("/")

    @classmethod
    def default_path(cls) -> Path:
        """Default path for application config."""
        return Path("config.yaml")

    def require_credentials(self) -> tuple[str, str]:
        """Return ``(api_host, api_key)``.

        Raises:
            ValueError: If either setting is missing
        """
        if not self.api_host:
            raise ValueError("api_host is not configured (set it in config or WXPAINT_API_HOST)")
        if not self.api_key:
            raise ValueError("api_key is not configured (set it in config or WXPAINT_API_KEY)")
        return self.api_host, self.api_key
