from __future__ import annotations

import random

from pydantic import BaseModel, Field, model_validator


class RetryPolicy(BaseModel):
    """Transport-level retry policy with exponential backoff and jitter.

    Args:
        max_attempts: Maximum number of attempts (including the first)
        base_delay_s: Base delay in seconds for exponential backoff
        max_delay_s: Cap on a single delay
        jitter: Jitter as a fraction of the delay (0.15 = +/-15%)
        retry_on_status: HTTP status codes that trigger a retry
        retry_methods: HTTP methods eligible for retry

    Notes:
        Only idempotent methods are retried. Job submission is a POST and is
        therefore never retried here; status polling opts out entirely via
        ``single_attempt()`` because the generation controller owns that
        budget.
    """

    model_config = {"frozen": True}

    max_attempts: int = Field(default=3, ge=1)
    base_delay_s: float = Field(default=0.25, ge=0.0)
    max_delay_s: float = Field(default=5.0, ge=0.0)
    jitter: float = Field(default=0.15, ge=0.0, le=1.0)
    retry_on_status: tuple[int, ...] = (429, 500, 502, 503, 504)
    retry_methods: tuple[str, ...] = ("GET", "HEAD", "OPTIONS")

    @model_validator(mode="after")
    def validate_delays(self) -> RetryPolicy:
        if self.max_delay_s < self.base_delay_s:
            raise ValueError("max_delay_s must be >= base_delay_s")
        return self

    @classmethod
    def single_attempt(cls) -> RetryPolicy:
        """Policy that never retries."""
        return cls(max_attempts=1)

    def allows_method(self, method: str) -> bool:
        return method.upper() in self.retry_methods

    def should_retry(self, method: str, attempt: int, status_code: int | None = None) -> bool:
        """Decide whether attempt number ``attempt`` may be followed by another.

        Args:
            method: HTTP method of the request
            attempt: Attempts made so far (1-indexed)
            status_code: Response status, or None for transport failures
        """
        if attempt >= self.max_attempts or not self.allows_method(method):
            return False
        if status_code is None:
            return True
        return status_code in self.retry_on_status

    def compute_delay(self, attempt: int) -> float:
        """Backoff delay after ``attempt`` failed attempts."""
        delay: float = min(self.max_delay_s, self.base_delay_s * (2 ** (attempt - 1)))
        if self.jitter > 0:
            spread = delay * self.jitter
            delay = max(0.0, delay + random.uniform(-spread, spread))
        return delay


def parse_retry_after_seconds(value: str | None) -> float | None:
    """Parse a numeric Retry-After header value (HTTP-date is not supported)."""
    if not value:
        return None
    try:
        seconds = float(value.strip())
    except ValueError:
        return None
    return seconds if seconds >= 0 else None
