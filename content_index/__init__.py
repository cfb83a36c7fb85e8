"""
Personal content index.

Chunking, rate-aware embedding, vector storage and similarity retrieval
for one user's emails, documents and chat history.
"""

from content_index.dependencies import ContentIndexContainer, build_container
from content_index.models import ContentEntity, ContentType

__version__ = "0.1.0"

__all__ = [
    "ContentEntity",
    "ContentIndexContainer",
    "ContentType",
    "build_container",
]
