"""
Core domain logic.

Exceptions are exported here; chunking, ranking, scheduling and retrieval
live in their own modules and are imported from there.
"""

from content_index.core.exceptions import (
    ContentIndexException,
    EmbeddingError,
    QuotaExceededError,
    StorageUnavailableError,
    ValidationError,
    VectorStoreError,
)

__all__ = [
    "ContentIndexException",
    "EmbeddingError",
    "QuotaExceededError",
    "StorageUnavailableError",
    "ValidationError",
    "VectorStoreError",
]
