"""
Unified application settings.

Aggregates all configuration modules into a single Settings class.
Provides the cached settings factory used when building the object graph.

Dependencies: All config modules
System role: Central configuration aggregator for the content index
"""

from functools import lru_cache

from content_index.configs.base import BaseSettings
from content_index.configs.embedding import EmbeddingSettings
from content_index.configs.ingestion import ChunkingSettings, RetrievalSettings
from content_index.configs.vector_store import VectorStoreSettings


class Settings(BaseSettings):
    """Unified application settings aggregating all config modules."""

    # Aggregated settings
    embedding: EmbeddingSettings = EmbeddingSettings()
    chunking: ChunkingSettings = ChunkingSettings()
    vector_store: VectorStoreSettings = VectorStoreSettings()
    retrieval: RetrievalSettings = RetrievalSettings()


@lru_cache
def get_settings() -> Settings:
    """
    Get application settings singleton.

    Returns Settings instance, cached for the lifetime of the process.
    Environment variables loaded once at startup.

    Returns:
        Settings: Application settings instance

    Usage:
        from content_index.configs import get_settings
        settings = get_settings()
    """
    return Settings()
