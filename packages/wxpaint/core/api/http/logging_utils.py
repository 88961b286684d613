from __future__ import annotations

import logging
import time
from collections.abc import Mapping

from pydantic import BaseModel

logger = logging.getLogger("wxpaint.core.api.http")

REDACTED = "***REDACTED***"


def redact_headers(headers: Mapping[str, str], redact: tuple[str, ...]) -> dict[str, str]:
    """Copy headers with sensitive values replaced.

    Args:
        headers: Headers to redact
        redact: Header names to redact (case-insensitive)

    Returns:
        New dict safe to log
    """
    red = {name.lower() for name in redact}
    return {k: (REDACTED if k.lower() in red else v) for k, v in headers.items()}


class RequestLogContext(BaseModel):
    """Identifies one attempt of one request in the logs."""

    method: str
    url: str
    attempt: int
    request_id: str | None = None


def log_request(
    ctx: RequestLogContext, headers: Mapping[str, str], redact: tuple[str, ...]
) -> float:
    """Log an outgoing request and return its start timestamp."""
    start = time.perf_counter()
    logger.debug(
        "HTTP %s %s (attempt %d)",
        ctx.method,
        ctx.url,
        ctx.attempt,
        extra={"request_id": ctx.request_id, "headers": redact_headers(headers, redact)},
    )
    return start


def log_response(ctx: RequestLogContext, status_code: int, elapsed_s: float) -> None:
    logger.debug(
        "HTTP %s %s -> %d in %dms",
        ctx.method,
        ctx.url,
        status_code,
        int(elapsed_s * 1000),
        extra={"request_id": ctx.request_id, "attempt": ctx.attempt},
    )


def log_retry(ctx: RequestLogContext, reason: str, delay_s: float) -> None:
    logger.info(
        "Retrying %s %s after %s (attempt %d, sleeping %.2fs)",
        ctx.method,
        ctx.url,
        reason,
        ctx.attempt,
        delay_s,
    )
