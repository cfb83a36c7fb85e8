"""
Observability module.

Logging configuration and structured logging helpers.
"""

from content_index.observability.logger import configure_logging, get_logger
from content_index.observability.log_utils import (
    log_with_context,
    preview_text,
    safe_log_value,
)

__all__ = [
    "configure_logging",
    "get_logger",
    "log_with_context",
    "preview_text",
    "safe_log_value",
]
