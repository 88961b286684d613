"""Utility functions for HTTP client operations."""

from __future__ import annotations

import json
from collections.abc import Mapping
from urllib.parse import urljoin


def join_url(base_url: str, path: str) -> str:
    """Join base URL with path in a predictable way.

    Absolute URLs are returned unchanged, which lets one client serve both
    API paths and fully-qualified download URLs.

    Examples:
        >>> join_url("https://api.example.com", "/v1/images/models")
        'https://api.example.com/v1/images/models'
        >>> join_url("https://api.example.com", "https://cdn.example.com/a.png")
        'https://cdn.example.com/a.png'
    """
    if path.startswith(("http://", "https://")) or not base_url:
        return path
    base = base_url if base_url.endswith("/") else base_url + "/"
    return urljoin(base, path.lstrip("/"))


def safe_snippet(content: bytes, limit: int) -> str:
    """Decode at most ``limit`` bytes of a body for logs and errors."""
    if not content:
        return ""
    return content[:limit].decode("utf-8", errors="replace")


def get_request_id(headers: Mapping[str, str]) -> str | None:
    """Extract a request ID from common tracing headers (case-insensitive)."""
    lowered = {k.lower(): v for k, v in headers.items()}
    for key in ("x-request-id", "x-correlation-id", "request-id", "trace-id"):
        if key in lowered:
            return lowered[key]
    return None


def extract_error_message(snippet: str | None) -> str | None:
    """Pull the ``message`` field out of a JSON error body, if there is one.

    Examples:
        >>> extract_error_message('{"message": "invalid model"}')
        'invalid model'
        >>> extract_error_message("<html>502</html>") is None
        True
    """
    if not snippet:
        return None
    try:
        body = json.loads(snippet)
    except ValueError:
        return None
    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message:
            return message
    return None
