"""
Embedding provider interface and quota classification.

Any provider used for ingestion and retrieval must expose a single and a
bulk embedding coroutine. Quota exhaustion must be distinguishable from
other failures so the scheduler can stop issuing calls.

Dependencies: content_index.core.exceptions
System role: Boundary contract between the scheduler and embedding APIs
"""

import re
from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from content_index.core.exceptions import QuotaExceededError

# 429 as a standalone token, not part of an id, a size or a dotted code
STATUS_PATTERN = re.compile(r"(?<!\w)(?<!\w[.-])429(?!\w|[.-]\w)|RESOURCE_EXHAUSTED")
TEXT_MARKERS = ("quota exceeded", "exceeded your current quota", "rate limit")
QUOTA_EXCEPTION_NAMES = frozenset({"ResourceExhausted", "TooManyRequests", "RateLimitError"})


@runtime_checkable
class EmbeddingProvider(Protocol):
    """Structural interface for embedding backends."""

    async def embed(self, text: str) -> list[float]:
        """Embed one text."""
        ...

    async def embed_batch(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed many texts in one bulk request, preserving order."""
        ...


def is_quota_error(exc: BaseException) -> bool:
    """
    Decide whether an exception signals quota or rate-limit exhaustion.

    Checks our own QuotaExceededError, HTTP 429 status attributes, known
    client exception type names and the error text, walking the cause chain.

    Args:
        exc: Exception raised by a provider call

    Returns:
        bool: True for quota exhaustion, False for ordinary failures
    """
    seen: set[int] = set()
    current: BaseException | None = exc
    while current is not None and id(current) not in seen:
        seen.add(id(current))

        if isinstance(current, QuotaExceededError):
            return True
        if type(current).__name__ in QUOTA_EXCEPTION_NAMES:
            return True
        for attr in ("code", "status_code"):
            if getattr(current, attr, None) == 429:
                return True

        message = str(current)
        lowered = message.lower()
        if STATUS_PATTERN.search(message):
            return True
        if any(marker in lowered for marker in TEXT_MARKERS):
            return True

        current = current.__cause__ or current.__context__
    return False
