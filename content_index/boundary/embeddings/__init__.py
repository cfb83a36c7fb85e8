"""
Embedding boundary.

Provider interface, quota classification and the Gemini implementation.
"""

from content_index.boundary.embeddings.base import EmbeddingProvider, is_quota_error
from content_index.boundary.embeddings.gemini_provider import GeminiEmbeddingProvider

__all__ = ["EmbeddingProvider", "GeminiEmbeddingProvider", "is_quota_error"]
