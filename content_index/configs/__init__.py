"""
Configuration management module.

Provides centralized, type-safe configuration using Pydantic Settings.
All config modules support environment variable mapping with validation.
"""

from content_index.configs.embedding import EmbeddingSettings
from content_index.configs.ingestion import ChunkingSettings, RetrievalSettings
from content_index.configs.settings import Settings, get_settings
from content_index.configs.vector_store import VectorStoreSettings

__all__ = [
    "Settings",
    "get_settings",
    "EmbeddingSettings",
    "ChunkingSettings",
    "RetrievalSettings",
    "VectorStoreSettings",
]
