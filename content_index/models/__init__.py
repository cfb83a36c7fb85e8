"""
Domain models for the content index.

Pydantic models shared across core, boundary and application layers.
"""

from content_index.models.content import ContentEntity, ContentType
from content_index.models.reports import (
    EmbeddingBatchReport,
    IngestionReport,
    RetrievedPassage,
    StoreSummary,
)

__all__ = [
    "ContentEntity",
    "ContentType",
    "EmbeddingBatchReport",
    "IngestionReport",
    "RetrievedPassage",
    "StoreSummary",
]
