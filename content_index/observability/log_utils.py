"""
Logging utilities for safe structured logging.

Keeps personal content and embedding vectors out of log lines: texts are
previewed, vectors are summarised by dimension.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""

import logging
from typing import Any


def preview_text(text: str | None, max_length: int = 80) -> str:
    """
    Shorten user text (queries, titles) for log lines.

    Args:
        text: Text to preview
        max_length: Characters kept before the ellipsis

    Returns:
        str: Single-line preview
    """
    if not text:
        return ""
    flat = " ".join(text.split())
    if len(flat) <= max_length:
        return flat
    return flat[:max_length] + "..."


def safe_log_value(value: Any, max_length: int = 200) -> str:
    """
    Safely convert any value to a string for logging.

    Float lists are treated as vectors and reported by dimension only.

    Args:
        value: Value to convert
        max_length: Maximum length before truncating

    Returns:
        str: Safe string representation
    """
    try:
        if value is None:
            return "None"
        if isinstance(value, str):
            return preview_text(value, max_length)
        if isinstance(value, (list, tuple)):
            if value and all(isinstance(v, float) for v in value):
                return f"vector({len(value)} dims)"
            return f"{type(value).__name__}({len(value)} items)"
        if isinstance(value, dict):
            return f"dict({len(value)} keys)"
        return preview_text(str(value), max_length)
    except Exception as e:
        return f"<unable to log: {type(e).__name__}>"


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    **context,
) -> None:
    """
    Log a message with structured context, safely converting all values.

    Args:
        logger: Logger instance
        level: Log level (logging.INFO, etc.)
        message: Log message
        **context: Context dict with arbitrary key-value pairs
    """
    safe_context = {
        key: safe_log_value(val) for key, val in context.items()
    }
    logger.log(level, message, extra=safe_context)
