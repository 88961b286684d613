"""Shared utilities: cooperative cancellation and logging setup."""

from wxpaint.core.utils.cancellation import Cancelled, CancelToken
from wxpaint.core.utils.logging import StructuredJSONFormatter, configure_logging, get_logger

__all__ = [
    "Cancelled",
    "CancelToken",
    "StructuredJSONFormatter",
    "configure_logging",
    "get_logger",
]
